"""
Conversational front for the event matcher.

Everything here is string templating around `services.matcher`; the ranking
itself lives there.
"""
from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from config import settings
from services.currency import format_event_date, format_price_in_rupees
from services.intent import SEARCH_INTENTS, Intent, detect_intent
from services.matcher import DEFAULT_CONFIG, MatcherConfig, match_events

logger = logging.getLogger(__name__)

GREETINGS = (
    "Hello! 👋 I'm your AI Event Concierge. I can help you find the perfect "
    "events. What are you looking for?",
    "Hi there! I'm here to help you discover amazing events. What type of "
    "event interests you?",
    "Welcome! I can help you find events, answer questions, and make "
    "recommendations. How can I assist you today?",
    "Greetings! Ready to explore some fantastic events? Just tell me what "
    "you're interested in!",
)

CAPABILITIES_TEXT = (
    "I can help you:\n\n"
    "🔍 Find events based on your preferences\n"
    "📍 Search by location\n"
    "💰 Filter by price range\n"
    "📅 Find events by date\n"
    "💡 Get personalized recommendations\n\n"
    "Just tell me what you're looking for!"
)

HOW_IT_WORKS_TEXT = (
    "Here's how I work:\n\n"
    "1️⃣ You describe what you're looking for\n"
    "2️⃣ I search through available events\n"
    "3️⃣ I provide personalized recommendations\n"
    "4️⃣ You can book directly through the platform\n\n"
    "What kind of event are you interested in?"
)

ABOUT_TEXT = (
    "I'm an AI-powered event concierge designed to help you discover and "
    "book premium events. I use intelligent matching to find events that "
    "match your preferences. What would you like to know more about?"
)

CLARIFY_TEXT = (
    "I'm here to help you find the perfect events! Could you be more "
    "specific about what you're looking for? For example, you could ask "
    "about events in a specific city, type of event, or date range."
)

BOOKING_TEXT = (
    "To book an event, you can:\n\n"
    "1️⃣ Use the search form on the homepage\n"
    "2️⃣ Click on any event card to view details\n"
    "3️⃣ Fill out the booking form\n"
    "4️⃣ Submit your request for admin approval\n\n"
    "Would you like me to help you find a specific event to book?"
)

NO_EVENTS_TEXT = (
    "I don't have any events available right now. Please check back later "
    "or contact our support team for assistance."
)

_CAPABILITIES_RE = re.compile(r"\b(what can you|what do you|help|assist)\b", re.IGNORECASE)
_HOW_RE = re.compile(r"\b(how|process|work|system)\b", re.IGNORECASE)
_ABOUT_RE = re.compile(r"\b(who|about|tell me about)\b", re.IGNORECASE)

DESCRIPTION_PREVIEW = 80


@dataclass
class ChatReply:
    response: str
    suggested_events: list[Any] = field(default_factory=list)
    intent: Intent = Intent.SEARCH


def _get(event: Any, name: str) -> Any:
    if isinstance(event, Mapping):
        return event.get(name)
    return getattr(event, name, None)


def answer_question(message: str) -> str:
    if _CAPABILITIES_RE.search(message):
        return CAPABILITIES_TEXT
    if _HOW_RE.search(message):
        return HOW_IT_WORKS_TEXT
    if _ABOUT_RE.search(message):
        return ABOUT_TEXT
    return CLARIFY_TEXT


def format_event_response(events: Sequence[Any], query: str) -> str:
    if not events:
        return (
            f'I couldn\'t find any events matching "{query}". However, I\'d be '
            "happy to help you browse our available events. Could you try a "
            "different search term or tell me more about what you're looking for?"
        )

    plural = "s" if len(events) > 1 else ""
    lines = [f"Great! I found {len(events)} event{plural} that might interest you:", ""]
    for idx, e in enumerate(events, start=1):
        lines.append(f"{idx}. **{_get(e, 'title') or 'Untitled Event'}**")
        lines.append(f"   📍 {_get(e, 'location') or ''}")
        lines.append(f"   📅 {format_event_date(_get(e, 'date'))}")
        lines.append(f"   💰 {format_price_in_rupees(_get(e, 'price'))}")
        desc = _get(e, "description") or ""
        if desc:
            more = "..." if len(desc) > DESCRIPTION_PREVIEW else ""
            lines.append(f"   📝 {desc[:DESCRIPTION_PREVIEW]}{more}")
        lines.append(f"   🏷️ {_get(e, 'category') or ''}")
        lines.append("")
    lines.append(
        "Would you like more details about any of these events, "
        "or should I search for something else?"
    )
    return "\n".join(lines)


def popular_events(events: Sequence[Any], limit: Optional[int] = None) -> list[Any]:
    """Highest-priced events first; the catalog itself is left untouched."""
    n = settings.fallback_size if limit is None else limit
    ranked = sorted(events, key=lambda e: _get(e, "price") or 0, reverse=True)
    return ranked[:n]


def process_chat_message(
    message: str,
    events: Sequence[Any],
    config: MatcherConfig = DEFAULT_CONFIG,
) -> ChatReply:
    intent = detect_intent(message)
    logger.debug("chat intent=%s catalog=%d", intent.value, len(events))

    if intent is Intent.GREETING:
        return ChatReply(random.choice(GREETINGS), intent=intent)

    if intent is Intent.QUESTION:
        return ChatReply(answer_question(message), intent=intent)

    if intent in SEARCH_INTENTS:
        matched = match_events(message, events, config=config)
        if matched:
            return ChatReply(format_event_response(matched, message), matched, intent)

        fallback = popular_events(events)
        if fallback:
            return ChatReply(
                f'I couldn\'t find exact matches for "{message}", but here are '
                "some popular events you might enjoy:\n\n"
                + format_event_response(fallback, message),
                fallback,
                intent,
            )
        return ChatReply(NO_EVENTS_TEXT, intent=intent)

    return ChatReply(BOOKING_TEXT, intent=intent)
