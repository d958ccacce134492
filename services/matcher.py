"""
Keyword relevance scoring for the event catalog.

Used by the chat assistant and the smart search endpoint. Scoring is a pure
function of (query, event): nothing here mutates the catalog or keeps state
between calls, so it is safe to call from any number of requests at once.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Sequence

# super-simple scorer: weighted substring hits + a few curated bonuses

_CATEGORY_SYNONYMS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "wedding": ("wedding", "marriage", "bridal", "reception"),
    "corporate": ("corporate", "business", "conference", "meeting", "seminar"),
    "festival": ("festival", "celebration", "carnival", "fair"),
    "concert": ("concert", "music", "live", "performance", "show"),
    "conference": ("conference", "summit", "convention", "workshop"),
    "gala": ("gala", "dinner", "charity", "fundraiser"),
})

_CITIES: tuple[str, ...] = (
    "chennai", "coimbatore", "madurai", "tiruchirappalli", "salem",
    "tirunelveli", "erode", "vellore", "thoothukudi", "dindigul",
)


@dataclass(frozen=True)
class FieldWeights:
    title: int = 5
    category: int = 4
    description: int = 3
    location: int = 2

    def items(self) -> tuple[tuple[str, int], ...]:
        return (
            ("title", self.title),
            ("category", self.category),
            ("description", self.description),
            ("location", self.location),
        )


@dataclass(frozen=True)
class MatcherConfig:
    weights: FieldWeights = field(default_factory=FieldWeights)
    min_token_length: int = 3
    category_synonyms: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: _CATEGORY_SYNONYMS
    )
    category_bonus: int = 3
    cities: tuple[str, ...] = _CITIES
    city_bonus: int = 4
    free_pattern: re.Pattern = re.compile(
        r"\b(free|no cost|complimentary)\b", re.IGNORECASE
    )
    free_bonus: int = 2
    budget_pattern: re.Pattern = re.compile(
        r"\b(budget|affordable|cheap|low cost)\b", re.IGNORECASE
    )
    budget_threshold: float = 1000
    budget_bonus: int = 2
    shortlist_size: int = 5


DEFAULT_CONFIG = MatcherConfig()


@dataclass(frozen=True)
class ScoredEvent:
    event: Any
    score: int


def _field(event: Any, name: str) -> Any:
    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def _text(event: Any, name: str) -> str:
    value = _field(event, name)
    if value is None:
        return ""
    return str(value).lower()


def _price(event: Any) -> Optional[float]:
    value = _field(event, "price")
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def tokenize(query: Optional[str], min_length: int = 3) -> list[str]:
    """Lowercase whitespace-split tokens, dropping short noise words."""
    if not query:
        return []
    return [w for w in query.lower().split() if len(w) >= min_length]


def score_event(
    query: Optional[str], event: Any, config: MatcherConfig = DEFAULT_CONFIG
) -> int:
    if not query:
        return 0

    lowered = query.lower()
    fields = {name: _text(event, name) for name, _ in config.weights.items()}

    score = 0
    for token in tokenize(query, config.min_token_length):
        for name, weight in config.weights.items():
            if token in fields[name]:
                score += weight

    category = fields["category"]
    for canonical, synonyms in config.category_synonyms.items():
        if any(s in lowered for s in synonyms) and canonical in category:
            score += config.category_bonus

    location = fields["location"]
    for city in config.cities:
        if city in lowered and city in location:
            score += config.city_bonus

    price = _price(event)
    if price is not None:
        if config.free_pattern.search(query) and price == 0:
            score += config.free_bonus
        if config.budget_pattern.search(query) and price < config.budget_threshold:
            score += config.budget_bonus

    return score


def rank_events(
    query: Optional[str],
    events: Optional[Iterable[Any]],
    config: MatcherConfig = DEFAULT_CONFIG,
) -> list[ScoredEvent]:
    """
    Score every event, drop non-positive scores and return the shortlist.

    `sorted` is stable, so equal scores keep catalog order.
    """
    if not query or not events:
        return []
    scored = [ScoredEvent(e, score_event(query, e, config)) for e in events]
    kept = [s for s in scored if s.score > 0]
    kept = sorted(kept, key=lambda s: s.score, reverse=True)
    return kept[: max(config.shortlist_size, 0)]


def match_events(
    query: Optional[str],
    events: Optional[Sequence[Any]],
    *,
    location: Optional[str] = None,
    date: Optional[str] = None,
    config: MatcherConfig = DEFAULT_CONFIG,
) -> list[Any]:
    """
    Ranked shortlist of events for a free-text query.

    `location` is folded into the query text; `date` restricts candidates to
    events on that exact date. An empty result is a normal outcome and the
    caller decides what to show instead.
    """
    if not query or not query.strip():
        return []
    candidates = list(events or [])
    if date:
        candidates = [e for e in candidates if _text(e, "date") == date.strip().lower()]
    if location and location.strip():
        query = f"{query} {location.strip()}"
    return [s.event for s in rank_events(query, candidates, config)]
