from __future__ import annotations

import re
from enum import Enum


class Intent(str, Enum):
    GREETING = "greeting"
    QUESTION = "question"
    SEARCH = "search"
    BOOKING = "booking"
    LOCATION = "location"
    PRICE = "price"
    DATE = "date"


# first match wins, so order matters
_RULES: tuple[tuple[Intent, re.Pattern], ...] = (
    (Intent.GREETING, re.compile(
        r"^(hi|hello|hey|greetings|good morning|good afternoon|good evening)",
        re.IGNORECASE,
    )),
    (Intent.QUESTION, re.compile(
        r"\b(what|how|who|when|where|why|can you|tell me|explain|help)\b",
        re.IGNORECASE,
    )),
    (Intent.SEARCH, re.compile(
        r"\b(show|find|search|look|event|festival|concert|wedding|corporate"
        r"|conference|party|gala|meeting)\b",
        re.IGNORECASE,
    )),
    (Intent.BOOKING, re.compile(
        r"\b(book|booking|reserve|ticket|buy|purchase|register)\b",
        re.IGNORECASE,
    )),
    (Intent.LOCATION, re.compile(
        r"\b(in|at|near|around|location|place|city|chennai|coimbatore"
        r"|madurai|tamil nadu)\b",
        re.IGNORECASE,
    )),
    (Intent.PRICE, re.compile(
        r"\b(price|cost|expensive|cheap|affordable|budget|free|paid)\b",
        re.IGNORECASE,
    )),
    (Intent.DATE, re.compile(
        r"\b(when|date|time|today|tomorrow|week|month|year|soon|upcoming)\b",
        re.IGNORECASE,
    )),
)

SEARCH_INTENTS = frozenset(
    {Intent.SEARCH, Intent.LOCATION, Intent.DATE, Intent.PRICE}
)


def detect_intent(message: str | None) -> Intent:
    text = (message or "").strip().lower()
    for intent, pattern in _RULES:
        if pattern.search(text):
            return intent
    return Intent.SEARCH
