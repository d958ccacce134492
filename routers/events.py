from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from config import settings
from schemas import EventIn, EventOut, MatchResponse
from services import storage
from services.auth import require_admin
from services.chat import popular_events
from services.matcher import MatcherConfig, match_events

router = APIRouter(prefix="/api/events", tags=["events"])

_log = logging.getLogger(__name__)

_MATCHER = MatcherConfig(shortlist_size=settings.shortlist_size)


def _out(e: Dict[str, Any]) -> EventOut:
    return EventOut.model_validate(e)


# ---------- Routes ----------


@router.get("", response_model=List[EventOut])
def list_events(
    category: Optional[str] = None,
    location: Optional[str] = None,
    date: Optional[str] = None,
) -> List[EventOut]:
    return [_out(e) for e in storage.list_events(category, location, date)]


@router.get("/match", response_model=MatchResponse)
def match(
    q: str = Query("", description="Free-text query"),
    location: Optional[str] = Query(None, description="Optional location hint"),
    date: Optional[str] = Query(None, description="Optional exact date hint"),
    fallback: bool = Query(False, description="Return popular events when nothing matches"),
) -> MatchResponse:
    """
    Ranked "smart search" over the whole catalog.

    Unlike GET /api/events this scores title, category, description and
    location and returns a bounded shortlist. With `fallback=true` an empty
    shortlist is replaced by the highest-priced events.
    """
    catalog = storage.list_events()
    items = match_events(q, catalog, location=location, date=date, config=_MATCHER)
    used_fallback = False
    if not items and fallback:
        items = popular_events(catalog)
        used_fallback = bool(items)
    _log.info("match q=%r location=%r date=%r hits=%d fallback=%s",
              q, location, date, len(items), used_fallback)
    return MatchResponse(
        query=q,
        count=len(items),
        items=[_out(e) for e in items],
        fallback=used_fallback,
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str) -> EventOut:
    e = storage.get_event(event_id)
    if e is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _out(e)


@router.post("", response_model=EventOut, status_code=201)
def create_event(body: EventIn, _admin: Dict[str, Any] = Depends(require_admin)) -> EventOut:
    created = storage.create_event(body.model_dump(by_alias=True, exclude_none=True))
    return _out(created)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    body: EventIn,
    _admin: Dict[str, Any] = Depends(require_admin),
) -> EventOut:
    updated = storage.update_event(
        event_id, body.model_dump(by_alias=True, exclude_unset=True)
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return _out(updated)


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: str, _admin: Dict[str, Any] = Depends(require_admin)) -> Response:
    if not storage.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return Response(status_code=204)
