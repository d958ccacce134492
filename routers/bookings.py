from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from schemas import BookingCreate, BookingOut, BookingUpdate
from services import storage
from services.auth import current_user, require_admin

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

BOOKING_NOTICE = "Booking requested. Awaiting admin approval."


@router.post("", status_code=201)
def create_booking(body: BookingCreate) -> JSONResponse:
    booking = storage.create_booking(body.model_dump(by_alias=True))
    if booking is None:
        raise HTTPException(status_code=404, detail="Event not found")
    payload = BookingOut.model_validate(booking).model_dump(by_alias=True)
    payload["notice"] = BOOKING_NOTICE
    return JSONResponse(status_code=201, content=payload)


@router.get("", response_model=List[BookingOut])
def list_bookings(
    user_id: Optional[str] = Query(None, alias="userId"),
    role: Optional[str] = None,
    user: Dict[str, Any] = Depends(current_user),
) -> List[BookingOut]:
    """
    Admins pass `role=admin` to see every booking; everyone else sees the
    bookings of `userId`, defaulting to their own.
    """
    if role == "admin":
        if user.get("role") != "admin":
            raise HTTPException(status_code=403, detail="Admin access required")
        rows = storage.list_bookings()
    else:
        rows = storage.list_bookings(user_id or str(user.get("id")))
    return [BookingOut.model_validate(b) for b in rows]


@router.put("/{booking_id}", response_model=BookingOut)
def update_booking(
    booking_id: str,
    body: BookingUpdate,
    _admin: Dict[str, Any] = Depends(require_admin),
) -> BookingOut:
    updated = storage.update_booking(
        booking_id,
        status=body.status,
        admin_note=body.admin_note,
        set_note="admin_note" in body.model_fields_set,
    )
    if updated is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return BookingOut.model_validate(updated)
