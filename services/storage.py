# services/storage.py
from __future__ import annotations

import logging
import re
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import settings

logger = logging.getLogger(__name__)

DB_PATH: Path = Path(settings.database_path)

BOOKING_STATUSES = ("Pending", "Approved", "Rejected")


class StorageError(Exception):
    """Base class for storage-level validation failures."""


class InvalidInputError(StorageError):
    pass


class DuplicateError(StorageError):
    pass


# ---------- DB helpers ----------

def _connect() -> sqlite3.Connection:
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _init_schema(conn: sqlite3.Connection) -> None:
    cur = conn.cursor()

    cur.execute("""
    CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT UNIQUE NOT NULL,
        password TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'user'
    )
    """)

    cur.execute("""
    CREATE TABLE IF NOT EXISTS events (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT DEFAULT '',
        date TEXT NOT NULL,
        location TEXT NOT NULL,
        category TEXT NOT NULL,
        price REAL DEFAULT 0,
        image_url TEXT,
        organizer TEXT NOT NULL,
        featured INTEGER DEFAULT 0
    )
    """)

    cur.execute("""
    CREATE TABLE IF NOT EXISTS bookings (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id TEXT DEFAULT 'guest',
        event_id TEXT NOT NULL,
        event_name TEXT,
        user_name TEXT NOT NULL,
        user_email TEXT NOT NULL,
        phone TEXT,
        guest_count INTEGER NOT NULL,
        message TEXT,
        status TEXT DEFAULT 'Pending',
        created_at TEXT,
        updated_at TEXT,
        admin_note TEXT
    )
    """)

    cur.execute("""
    CREATE TABLE IF NOT EXISTS subscribers (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT DEFAULT '',
        phone TEXT DEFAULT '',
        subscribed_at TEXT,
        status TEXT DEFAULT 'active'
    )
    """)

    conn.commit()


DEMO_USERS = [
    {"username": "user1", "password": "pass123", "role": "user"},
    {"username": "admin", "password": "admin123", "role": "admin"},
]

DEMO_EVENTS = [
    {
        "title": "Summer Music Festival 2024",
        "description": "The biggest outdoor music experience of the year featuring top international artists.",
        "date": "2024-07-15",
        "location": "Central Park, New York",
        "category": "Music",
        "price": 120,
        "imageUrl": "https://picsum.photos/seed/music/800/600",
        "organizer": "Vibe Events",
        "featured": True,
    },
    {
        "title": "AI & Future Tech Summit",
        "description": "Join industry leaders to discuss the next frontier of artificial intelligence and robotics.",
        "date": "2024-08-22",
        "location": "Convention Center, San Francisco",
        "category": "Technology",
        "price": 499,
        "imageUrl": "https://picsum.photos/seed/tech/800/600",
        "organizer": "TechConnect",
        "featured": True,
    },
    {
        "title": "Gourmet Food Tour",
        "description": "A curated journey through the city's hidden culinary gems and Michelin-starred bites.",
        "date": "2024-06-10",
        "location": "Downtown, Chicago",
        "category": "Food & Drink",
        "price": 85,
        "imageUrl": "https://picsum.photos/seed/food/800/600",
        "organizer": "Taste Hunters",
        "featured": False,
    },
    {
        "title": "Contemporary Art Expo",
        "description": "Explore breathtaking works from emerging artists across the globe.",
        "date": "2024-09-05",
        "location": "Modern Art Gallery, London",
        "category": "Art",
        "price": 45,
        "imageUrl": "https://picsum.photos/seed/art/800/600",
        "organizer": "ArtScape",
        "featured": False,
    },
    {
        "title": "Startup Pitch Night",
        "description": "Watch the hottest new startups pitch to elite venture capitalists.",
        "date": "2024-10-12",
        "location": "Innovation Hub, Austin",
        "category": "Business",
        "price": 25,
        "imageUrl": "https://picsum.photos/seed/business/800/600",
        "organizer": "Ventures X",
        "featured": False,
    },
]


def _seed(conn: sqlite3.Connection) -> None:
    if conn.execute("SELECT COUNT(*) FROM users").fetchone()[0] == 0:
        conn.executemany(
            "INSERT INTO users (username, password, role) VALUES (:username, :password, :role)",
            DEMO_USERS,
        )
    if conn.execute("SELECT COUNT(*) FROM events").fetchone()[0] == 0:
        for e in DEMO_EVENTS:
            _insert_event(conn, e)
    conn.commit()


def init_db(seed: Optional[bool] = None) -> None:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    with _connect() as conn:
        _init_schema(conn)
        if settings.seed_demo_data if seed is None else seed:
            _seed(conn)
    logger.info("storage ready at %s", DB_PATH)


# ---------- Users ----------

def authenticate(username: str, password: str) -> Dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute(
            "SELECT id, username, role FROM users WHERE username = ? AND password = ?",
            (username, password),
        ).fetchone()
    if not row:
        return None
    return {"id": str(row["id"]), "username": row["username"], "role": row["role"]}


# ---------- Events ----------

def _event_row(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "title": row["title"],
        "description": row["description"] or "",
        "date": row["date"],
        "location": row["location"],
        "category": row["category"],
        "price": row["price"] or 0,
        "imageUrl": row["image_url"],
        "organizer": row["organizer"],
        "featured": bool(row["featured"]),
    }


def _insert_event(conn: sqlite3.Connection, e: Dict[str, Any]) -> int:
    cur = conn.execute("""
    INSERT INTO events (title, description, date, location, category, price, image_url, organizer, featured)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        e["title"],
        e.get("description") or "",
        e["date"],
        e["location"],
        e["category"],
        float(e.get("price") or 0),
        e.get("imageUrl") or "https://picsum.photos/800/600",
        e["organizer"],
        1 if e.get("featured") else 0,
    ))
    return int(cur.lastrowid)


def list_events(
    category: Optional[str] = None,
    location: Optional[str] = None,
    date: Optional[str] = None,
) -> List[Dict[str, Any]]:
    sql = "SELECT * FROM events WHERE 1=1"
    params: List[Any] = []
    if category:
        sql += " AND lower(category) = lower(?)"
        params.append(category)
    if location:
        sql += " AND instr(lower(location), lower(?)) > 0"
        params.append(location)
    if date:
        sql += " AND date = ?"
        params.append(date)
    sql += " ORDER BY id"
    with _connect() as conn:
        rows = conn.execute(sql, params).fetchall()
    return [_event_row(r) for r in rows]


def get_event(event_id: str) -> Dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,)).fetchone()
    return _event_row(row) if row else None


def create_event(e: Dict[str, Any]) -> Dict[str, Any]:
    missing = [k for k in ("title", "date", "location", "category", "organizer") if not e.get(k)]
    if missing:
        raise InvalidInputError(
            "Title, date, location, category, and organizer are required"
        )
    with _connect() as conn:
        new_id = _insert_event(conn, e)
        conn.commit()
    logger.info("event created id=%s title=%r", new_id, e["title"])
    return get_event(str(new_id))  # type: ignore[return-value]


_EVENT_COLUMNS = {
    "title": "title",
    "description": "description",
    "date": "date",
    "location": "location",
    "category": "category",
    "price": "price",
    "imageUrl": "image_url",
    "organizer": "organizer",
    "featured": "featured",
}


def update_event(event_id: str, changes: Dict[str, Any]) -> Dict[str, Any] | None:
    if get_event(event_id) is None:
        return None
    sets, params = [], []
    for key, column in _EVENT_COLUMNS.items():
        if key not in changes or changes[key] is None:
            continue
        value = changes[key]
        if key == "featured":
            value = 1 if value else 0
        elif key == "price":
            value = float(value)
        sets.append(f"{column} = ?")
        params.append(value)
    if sets:
        with _connect() as conn:
            conn.execute(
                f"UPDATE events SET {', '.join(sets)} WHERE id = ?",
                (*params, event_id),
            )
            conn.commit()
    return get_event(event_id)


def delete_event(event_id: str) -> bool:
    with _connect() as conn:
        cur = conn.execute("DELETE FROM events WHERE id = ?", (event_id,))
        conn.commit()
    return cur.rowcount > 0


# ---------- Bookings ----------

def _booking_row(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "userId": row["user_id"],
        "eventId": row["event_id"],
        "eventName": row["event_name"],
        "userName": row["user_name"],
        "userEmail": row["user_email"],
        "phone": row["phone"],
        "guestCount": row["guest_count"],
        "tickets": row["guest_count"],
        "message": row["message"],
        "status": row["status"],
        "createdAt": row["created_at"],
        "updatedAt": row["updated_at"],
        "adminNote": row["admin_note"],
    }


def create_booking(b: Dict[str, Any]) -> Dict[str, Any] | None:
    """Returns None when the event does not exist."""
    if not (b.get("eventId") and b.get("userName") and b.get("userEmail") and b.get("guestCount")):
        raise InvalidInputError("Event, name, email, and guest count are required")
    try:
        guests = int(b["guestCount"])
    except (TypeError, ValueError):
        raise InvalidInputError("guestCount must be a whole number") from None

    event = get_event(str(b["eventId"]))
    if event is None:
        return None

    with _connect() as conn:
        cur = conn.execute("""
        INSERT INTO bookings (user_id, event_id, event_name, user_name, user_email,
                              phone, guest_count, message, status, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, 'Pending', ?)
        """, (
            b.get("userId") or "guest",
            event["id"],
            event["title"],
            b["userName"],
            b["userEmail"],
            b.get("phone") or None,
            guests,
            b.get("message") or None,
            _now(),
        ))
        conn.commit()
        new_id = cur.lastrowid
    logger.info("booking requested id=%s event=%s guests=%s", new_id, event["id"], guests)
    return get_booking(str(new_id))


def get_booking(booking_id: str) -> Dict[str, Any] | None:
    with _connect() as conn:
        row = conn.execute("SELECT * FROM bookings WHERE id = ?", (booking_id,)).fetchone()
    return _booking_row(row) if row else None


def list_bookings(user_id: Optional[str] = None) -> List[Dict[str, Any]]:
    with _connect() as conn:
        if user_id is None:
            rows = conn.execute("SELECT * FROM bookings ORDER BY id").fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM bookings WHERE user_id = ? ORDER BY id", (user_id,)
            ).fetchall()
    return [_booking_row(r) for r in rows]


def _normalize_status(status: str) -> str:
    s = status.strip().capitalize()
    if s not in BOOKING_STATUSES:
        raise InvalidInputError(f"status must be one of {', '.join(BOOKING_STATUSES)}")
    return s


def update_booking(
    booking_id: str,
    status: Optional[str] = None,
    admin_note: Optional[str] = None,
    *,
    set_note: bool = False,
) -> Dict[str, Any] | None:
    """
    `set_note` distinguishes "leave the note alone" from "clear it",
    since both arrive as None.
    """
    current = get_booking(booking_id)
    if current is None:
        return None
    new_status = _normalize_status(status) if status else current["status"]
    new_note = admin_note if (set_note or admin_note is not None) else current["adminNote"]
    with _connect() as conn:
        conn.execute(
            "UPDATE bookings SET status = ?, admin_note = ?, updated_at = ? WHERE id = ?",
            (new_status, new_note, _now(), booking_id),
        )
        conn.commit()
    return get_booking(booking_id)


# ---------- Subscribers ----------

def _subscriber_row(row: sqlite3.Row) -> Dict[str, Any]:
    return {
        "id": str(row["id"]),
        "email": row["email"] or "",
        "phone": row["phone"] or "",
        "subscribedAt": row["subscribed_at"],
        "status": row["status"],
    }


def add_subscriber(email: Optional[str] = None, phone: Optional[str] = None) -> Dict[str, Any]:
    email_clean = (email or "").strip()
    phone_clean = re.sub(r"\D", "", str(phone)) if phone else ""
    if not email_clean and not phone_clean:
        raise InvalidInputError("Email or phone is required")

    with _connect() as conn:
        if email_clean and conn.execute(
            "SELECT 1 FROM subscribers WHERE lower(email) = lower(?)", (email_clean,)
        ).fetchone():
            raise DuplicateError("Email already subscribed")
        if phone_clean and conn.execute(
            "SELECT 1 FROM subscribers WHERE phone = ?", (phone_clean,)
        ).fetchone():
            raise DuplicateError("Phone already subscribed")

        cur = conn.execute(
            "INSERT INTO subscribers (email, phone, subscribed_at, status) VALUES (?, ?, ?, 'active')",
            (email_clean, phone_clean, _now()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM subscribers WHERE id = ?", (cur.lastrowid,)).fetchone()
    return _subscriber_row(row)


def list_subscribers() -> List[Dict[str, Any]]:
    with _connect() as conn:
        rows = conn.execute("SELECT * FROM subscribers ORDER BY id").fetchall()
    return [_subscriber_row(r) for r in rows]


def delete_subscriber(identifier: str) -> bool:
    """Remove every subscriber whose email, id or phone equals `identifier`."""
    with _connect() as conn:
        cur = conn.execute(
            "DELETE FROM subscribers WHERE email = ? OR CAST(id AS TEXT) = ? OR phone = ?",
            (identifier, identifier, identifier),
        )
        conn.commit()
    return cur.rowcount > 0
