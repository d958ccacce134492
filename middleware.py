from __future__ import annotations

import logging
import sqlite3
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from services.metrics import log_http

_log = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            dur_ms = int((time.perf_counter() - start) * 1000)
            status = getattr(response, "status_code", 500)
            try:
                log_http(
                    route=request.url.path,
                    method=request.method,
                    status=status,
                    duration_ms=dur_ms,
                )
            except sqlite3.Error as exc:
                # metrics must never break a request
                _log.warning("metrics write failed: %s", exc)
