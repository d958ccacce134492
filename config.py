from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PKG_DIR = Path(__file__).resolve().parent
ENV_PATH = PKG_DIR / ".env"


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    port: int = Field(3001, validation_alias="PORT")
    frontend_url: str = Field(
        "http://localhost:3000", validation_alias="FRONTEND_URL"
    )
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # Storage
    database_path: Path = Field(
        PKG_DIR / "eventic.db", validation_alias="DATABASE_PATH"
    )
    seed_demo_data: bool = Field(True, validation_alias="SEED_DEMO_DATA")

    # Matching / presentation
    shortlist_size: int = Field(5, validation_alias="SHORTLIST_SIZE")
    fallback_size: int = Field(3, validation_alias="FALLBACK_SIZE")
    usd_to_inr_rate: float = Field(83.0, validation_alias="USD_TO_INR_RATE")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
