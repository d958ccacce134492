from __future__ import annotations

import logging
import time as _t
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from middleware import MetricsMiddleware
from routers import (
    agent as agent_router,
    auth as auth_router,
    bookings as bookings_router,
    events as events_router,
    metrics as metrics_router,
    subscribers as subscribers_router,
)
from services import storage
from services.metrics import init_metrics_tables

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

_log = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    storage.init_db()
    init_metrics_tables()
    yield


app = FastAPI(title="eventic-api", version="1.0.0", lifespan=lifespan)

# CORS: only the configured front end may call with credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Metrics
app.add_middleware(MetricsMiddleware)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = _t.perf_counter()  # monotonic for durations
    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        dur_ms = int((_t.perf_counter() - start) * 1000)
        status = getattr(response, "status_code", "-")
        _log.info(
            "method=%s path=%s status=%s dur_ms=%s",
            request.method,
            request.url.path,
            status,
            dur_ms,
        )


# ---------- Error bodies: {"error": "..."} ----------


@app.exception_handler(StarletteHTTPException)
async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={"error": f"{where}: {msg}" if where else msg},
    )


@app.exception_handler(storage.DuplicateError)
async def duplicate_error(_request: Request, exc: storage.DuplicateError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"error": str(exc)})


@app.exception_handler(storage.StorageError)
async def storage_error(_request: Request, exc: storage.StorageError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


# Routers
app.include_router(auth_router.router)
app.include_router(events_router.router)
app.include_router(bookings_router.router)
app.include_router(subscribers_router.router)
app.include_router(agent_router.router)
app.include_router(metrics_router.router)


@app.get("/ping")
def ping():
    return {"ok": True, "ts": _t.time()}


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def root():
    return {"ok": True, "service": "eventic-api"}


if __name__ == "__main__":
    import uvicorn

    _log.info("Backend server running on http://localhost:%s", settings.port)
    _log.info("Frontend URL: %s", settings.frontend_url)
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port)
