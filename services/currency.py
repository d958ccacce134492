"""
Price and date formatting for event listings.

Catalog prices are stored in USD and shown to users in rupees.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

from dateutil import parser as dateutil_parser

from config import settings


def _as_number(value: Any) -> float | None:
    if not value:
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if math.isfinite(price) else None


def convert_to_rupees(price_usd: Any, rate: float | None = None) -> int:
    price = _as_number(price_usd)
    if price is None:
        return 0
    inr = price * (rate or settings.usd_to_inr_rate)
    return round(inr) if math.isfinite(inr) else 0


def _group_indian(n: int) -> str:
    # 12345678 -> 1,23,45,678
    s = str(abs(n))
    if len(s) > 3:
        head, tail = s[:-3], s[-3:]
        parts = []
        while len(head) > 2:
            parts.insert(0, head[-2:])
            head = head[:-2]
        if head:
            parts.insert(0, head)
        s = ",".join(parts + [tail])
    return f"-{s}" if n < 0 else s


def format_price_in_rupees(price_usd: Any, rate: float | None = None) -> str:
    inr = convert_to_rupees(price_usd, rate)
    if inr == 0:
        return "N/A"
    return f"₹{_group_indian(inr)}"


def format_event_date(value: Any) -> str:
    """Render a catalog date as e.g. 'Mon, 15 Jul 2024'."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        raw = (str(value) if value is not None else "").strip()
        if not raw:
            return ""
        try:
            parsed = dateutil_parser.parse(raw)
        except (ValueError, OverflowError):
            return raw
    return parsed.strftime("%a, %d %b %Y")
