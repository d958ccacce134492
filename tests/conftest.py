import os
import tempfile
from pathlib import Path

import pytest

# settings are read at import time, so point them somewhere harmless first
os.environ.setdefault(
    "DATABASE_PATH", str(Path(tempfile.gettempdir()) / "eventic-test.db")
)

from services import metrics, storage  # noqa: E402


@pytest.fixture
def db(tmp_path, monkeypatch):
    path = tmp_path / "eventic.db"
    monkeypatch.setattr(storage, "DB_PATH", path)
    monkeypatch.setattr(metrics, "DB_PATH", path)
    storage.init_db(seed=True)
    metrics.init_metrics_tables()
    return path


@pytest.fixture
def client(db):
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as c:
        yield c


def _login(client, username, password):
    r = client.post("/api/login", json={"username": username, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "admin123")


@pytest.fixture
def user_headers(client):
    return _login(client, "user1", "pass123")
