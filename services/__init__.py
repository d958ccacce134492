"""
Service package marker.

Intentionally empty to avoid heavy imports at package import time.
Import the concrete modules directly, e.g.:

    from services.matcher import match_events
    from services.storage import init_db, list_events
    from services.chat import process_chat_message
"""
__all__: list[str] = []
