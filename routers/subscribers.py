from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response

from schemas import SubscriberIn, SubscriberOut
from services import storage
from services.auth import require_admin

router = APIRouter(prefix="/api/subscribers", tags=["subscribers"])


@router.post("", response_model=SubscriberOut, status_code=201)
def subscribe(body: SubscriberIn) -> SubscriberOut:
    return SubscriberOut.model_validate(storage.add_subscriber(body.email, body.phone))


@router.get("", response_model=List[SubscriberOut])
def list_subscribers(_admin: Dict[str, Any] = Depends(require_admin)) -> List[SubscriberOut]:
    return [SubscriberOut.model_validate(s) for s in storage.list_subscribers()]


@router.delete("/{identifier}", status_code=204)
def unsubscribe(identifier: str, _admin: Dict[str, Any] = Depends(require_admin)) -> Response:
    """`identifier` may be the subscriber's email, id or phone."""
    if not storage.delete_subscriber(identifier):
        raise HTTPException(status_code=404, detail="Subscriber not found")
    return Response(status_code=204)
