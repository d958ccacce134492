from services.chat import (
    BOOKING_TEXT,
    CAPABILITIES_TEXT,
    GREETINGS,
    NO_EVENTS_TEXT,
    format_event_response,
    popular_events,
    process_chat_message,
)
from services.intent import Intent, detect_intent
from services.storage import DEMO_EVENTS

CATALOG = [dict(e, id=str(i)) for i, e in enumerate(DEMO_EVENTS, start=1)]


def test_detect_intent_order():
    assert detect_intent("Hello there") is Intent.GREETING
    assert detect_intent("what can you do") is Intent.QUESTION
    assert detect_intent("show me concerts") is Intent.SEARCH
    assert detect_intent("I want to book tickets") is Intent.BOOKING
    assert detect_intent("anything near chennai") is Intent.LOCATION
    assert detect_intent("cheap stuff please") is Intent.PRICE
    assert detect_intent("jazz tomorrow") is Intent.DATE
    assert detect_intent("jazz") is Intent.SEARCH


def test_greeting_and_question():
    assert process_chat_message("hi", CATALOG).response in GREETINGS
    assert process_chat_message("can you help me", CATALOG).response == CAPABILITIES_TEXT


def test_booking_help():
    reply = process_chat_message("I want to reserve seats", CATALOG)
    assert reply.response == BOOKING_TEXT
    assert reply.suggested_events == []


def test_search_returns_shortlist():
    reply = process_chat_message("music festival", CATALOG)
    assert reply.suggested_events[0]["title"] == "Summer Music Festival 2024"
    assert "1. **Summer Music Festival 2024**" in reply.response
    assert "Mon, 15 Jul 2024" in reply.response
    assert "₹9,960" in reply.response


def test_no_match_falls_back_to_priciest():
    reply = process_chat_message("zzzz", CATALOG)
    assert [e["title"] for e in reply.suggested_events] == [
        "AI & Future Tech Summit",
        "Summer Music Festival 2024",
        "Gourmet Food Tour",
    ]
    assert reply.response.startswith('I couldn\'t find exact matches for "zzzz"')


def test_empty_catalog():
    reply = process_chat_message("zzzz", [])
    assert reply.response == NO_EVENTS_TEXT
    assert reply.suggested_events == []


def test_popular_events_leaves_catalog_order():
    before = list(CATALOG)
    popular_events(CATALOG, limit=2)
    assert CATALOG == before


def test_format_truncates_description():
    e = {"title": "Long", "description": "x" * 100, "date": "2024-01-02",
         "location": "Erode", "category": "Art", "price": 0}
    text = format_event_response([e], "long")
    assert "x" * 80 + "..." in text
    assert "N/A" in text
    assert text.startswith("Great! I found 1 event that")


def test_format_empty():
    assert 'matching "rock"' in format_event_response([], "rock")


def test_reply_carries_intent():
    assert process_chat_message("hi", CATALOG).intent is Intent.GREETING
    assert process_chat_message("can you help me", CATALOG).intent is Intent.QUESTION
    assert process_chat_message("music festival", CATALOG).intent is Intent.SEARCH
    assert process_chat_message("I want to reserve seats", CATALOG).intent is Intent.BOOKING


def test_fallback_survives_non_finite_price():
    catalog = CATALOG + [dict(CATALOG[0], id="99", title="Broken Listing", price=float("inf"))]
    reply = process_chat_message("zzzz", catalog)
    assert reply.suggested_events[0]["id"] == "99"
    assert "💰 N/A" in reply.response
