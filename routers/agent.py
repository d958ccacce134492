from __future__ import annotations

import logging

from fastapi import APIRouter

from schemas import ChatRequest, ChatResponse, EventOut
from services import storage
from services.chat import process_chat_message

router = APIRouter(prefix="/api", tags=["agent"])

_log = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest) -> ChatResponse:
    """
    Chat with the event concierge.

    The reply is computed against the live catalog on every call; when the
    shortlist is empty the concierge offers the most popular events instead.
    """
    catalog = storage.list_events()
    reply = process_chat_message(req.message, catalog)
    _log.info(
        "chat intent=%s suggestions=%d", reply.intent.value, len(reply.suggested_events)
    )
    return ChatResponse(
        response=reply.response,
        intent=reply.intent.value,
        suggested_events=[EventOut.model_validate(e) for e in reply.suggested_events],
    )
