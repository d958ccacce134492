from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    # accept both snake_case field names and the camelCase wire names
    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    id: str
    username: str
    role: Literal["user", "admin"]


class LoginResponse(BaseModel):
    token: str
    user: UserOut


class EventIn(_Wire):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    organizer: Optional[str] = None
    featured: Optional[bool] = None


class EventOut(_Wire):
    id: str
    title: str
    description: str = ""
    date: str
    location: str
    category: str
    price: float = 0
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    organizer: str
    featured: bool = False


class BookingCreate(_Wire):
    event_id: Optional[str] = Field(default=None, alias="eventId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_email: Optional[str] = Field(default=None, alias="userEmail")
    guest_count: Optional[int] = Field(default=None, alias="guestCount")
    phone: Optional[str] = None
    message: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class BookingUpdate(_Wire):
    status: Optional[str] = None
    admin_note: Optional[str] = Field(default=None, alias="adminNote")


class BookingOut(_Wire):
    id: str
    user_id: str = Field(alias="userId")
    event_id: str = Field(alias="eventId")
    event_name: Optional[str] = Field(default=None, alias="eventName")
    user_name: str = Field(alias="userName")
    user_email: str = Field(alias="userEmail")
    phone: Optional[str] = None
    guest_count: int = Field(alias="guestCount")
    tickets: int
    message: Optional[str] = None
    status: str
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    admin_note: Optional[str] = Field(default=None, alias="adminNote")


class SubscriberIn(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None


class SubscriberOut(_Wire):
    id: str
    email: str = ""
    phone: str = ""
    subscribed_at: Optional[str] = Field(default=None, alias="subscribedAt")
    status: str = "active"


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)


class ChatResponse(_Wire):
    response: str
    intent: str
    suggested_events: List[EventOut] = Field(
        default_factory=list, alias="suggestedEvents"
    )


class MatchResponse(BaseModel):
    query: str
    count: int
    items: List[EventOut]
    fallback: bool = False
