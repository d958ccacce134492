from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Any, Dict, List

from config import settings

DB_PATH: Path = Path(settings.database_path)


def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def init_metrics_tables() -> None:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    with _connect() as conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS http_metrics (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                ts DATETIME DEFAULT CURRENT_TIMESTAMP,
                route TEXT,
                method TEXT,
                status INTEGER,
                duration_ms INTEGER
            )
            """
        )
        conn.commit()


def log_http(route: str, method: str, status: int, duration_ms: int) -> None:
    with _connect() as conn:
        conn.execute(
            "INSERT INTO http_metrics (route, method, status, duration_ms) VALUES (?, ?, ?, ?)",
            (route, method, int(status), int(duration_ms)),
        )
        conn.commit()


def summary_http(limit_routes: int = 50) -> Dict[str, Any]:
    """
    Returns aggregate per-route metrics + totals.
    """
    with _connect() as conn:
        totals = conn.execute(
            """
            SELECT
                COUNT(*) as requests,
                AVG(duration_ms) as avg_ms,
                SUM(CASE WHEN status BETWEEN 200 AND 299 THEN 1 ELSE 0 END) AS s2xx,
                SUM(CASE WHEN status BETWEEN 400 AND 499 THEN 1 ELSE 0 END) AS s4xx,
                SUM(CASE WHEN status >= 500 THEN 1 ELSE 0 END) AS s5xx
            FROM http_metrics
            """
        ).fetchone()

        rows = conn.execute(
            """
            SELECT
                method || ' ' || route AS route,
                COUNT(*) as requests,
                AVG(duration_ms) as avg_ms,
                SUM(CASE WHEN status >= 400 THEN 1 ELSE 0 END) AS errors
            FROM http_metrics
            GROUP BY method, route
            ORDER BY requests DESC
            LIMIT ?
            """,
            (limit_routes,),
        ).fetchall()

    return dict(
        totals=dict(
            requests=totals["requests"] or 0,
            avg_ms=round(totals["avg_ms"] or 0, 1),
            s2xx=totals["s2xx"] or 0,
            s4xx=totals["s4xx"] or 0,
            s5xx=totals["s5xx"] or 0,
        ),
        routes=[
            dict(
                route=r["route"],
                requests=r["requests"],
                avg_ms=round(r["avg_ms"] or 0, 1),
                errors=r["errors"] or 0,
            )
            for r in rows
        ],
    )


def timeline_http(last_n: int = 300) -> List[Dict[str, Any]]:
    """
    Recent rolling window, oldest first. Good for charts.
    """
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT ts, method, route, status, duration_ms
            FROM http_metrics
            ORDER BY id DESC
            LIMIT ?
            """,
            (last_n,),
        ).fetchall()
    return [dict(r) for r in rows[::-1]]


def snapshot() -> Dict[str, Any]:
    return {"http": summary_http(), "recent": timeline_http(50)}
