from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict

from fastapi import APIRouter

from services import metrics as _metrics_impl

router = APIRouter(prefix="/metrics", tags=["metrics"])

_log = logging.getLogger(__name__)


@router.get("")
def get_metrics() -> Dict[str, Any]:
    try:
        return {"ok": True, "metrics": _metrics_impl.snapshot()}
    except sqlite3.Error as e:
        _log.warning("metrics snapshot failed: %s", e)
        return {"ok": False, "error": str(e)}
