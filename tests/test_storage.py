import pytest

from services import storage


def test_seeded_catalog(db):
    events = storage.list_events()
    assert [e["id"] for e in events] == ["1", "2", "3", "4", "5"]
    assert events[0]["imageUrl"].startswith("https://")


def test_event_filters(db):
    assert [e["id"] for e in storage.list_events(category="music")] == ["1"]
    assert [e["id"] for e in storage.list_events(location="LONDON")] == ["4"]
    assert [e["id"] for e in storage.list_events(date="2024-06-10")] == ["3"]


def test_create_requires_fields(db):
    with pytest.raises(storage.InvalidInputError):
        storage.create_event({"title": "No date"})


def test_ids_increase_monotonically(db):
    a = storage.create_event({"title": "A", "date": "2025-01-01", "location": "Erode",
                              "category": "Art", "organizer": "Me"})
    storage.delete_event(a["id"])
    b = storage.create_event({"title": "B", "date": "2025-01-01", "location": "Erode",
                              "category": "Art", "organizer": "Me"})
    assert int(b["id"]) > int(a["id"])


def test_update_event_merges(db):
    updated = storage.update_event("2", {"price": 0, "featured": False, "title": None})
    assert updated["price"] == 0
    assert updated["featured"] is False
    assert updated["title"] == "AI & Future Tech Summit"
    assert storage.update_event("999", {"title": "x"}) is None


def test_booking_lifecycle(db):
    b = storage.create_booking({"eventId": "1", "userName": "Ann", "userEmail": "a@x.io",
                                "guestCount": "3", "userId": "1"})
    assert b["eventName"] == "Summer Music Festival 2024"
    assert b["status"] == "Pending"
    assert b["tickets"] == 3

    b = storage.update_booking(b["id"], status="approved", admin_note="ok")
    assert b["status"] == "Approved"
    assert b["adminNote"] == "ok"
    assert b["updatedAt"]

    b = storage.update_booking(b["id"])
    assert b["adminNote"] == "ok"
    b = storage.update_booking(b["id"], admin_note=None, set_note=True)
    assert b["adminNote"] is None

    assert [x["id"] for x in storage.list_bookings("1")] == [b["id"]]
    assert storage.list_bookings("someone-else") == []


def test_booking_validation(db):
    with pytest.raises(storage.InvalidInputError):
        storage.create_booking({"eventId": "1", "userName": "Ann"})
    with pytest.raises(storage.InvalidInputError):
        storage.update_booking(
            storage.create_booking({"eventId": "1", "userName": "A", "userEmail": "e",
                                    "guestCount": 1})["id"],
            status="maybe",
        )
    assert storage.create_booking({"eventId": "404", "userName": "A", "userEmail": "e",
                                   "guestCount": 1}) is None


def test_subscriber_uniqueness(db):
    s = storage.add_subscriber(" Ann@Example.com ", None)
    assert s["email"] == "Ann@Example.com"
    with pytest.raises(storage.DuplicateError):
        storage.add_subscriber("ann@example.com")

    p = storage.add_subscriber(None, "+91 (44) 1234-5678")
    assert p["phone"] == "914412345678"
    with pytest.raises(storage.DuplicateError):
        storage.add_subscriber("", "914412345678")

    with pytest.raises(storage.InvalidInputError):
        storage.add_subscriber("  ", "")


def test_delete_subscriber_by_any_identifier(db):
    a = storage.add_subscriber("a@x.io")
    b = storage.add_subscriber(None, "555")
    assert storage.delete_subscriber(a["id"])
    assert storage.delete_subscriber("555")
    assert not storage.delete_subscriber("a@x.io")
    assert storage.list_subscribers() == []
    assert b["id"] != a["id"]


def test_authenticate(db):
    assert storage.authenticate("admin", "admin123")["role"] == "admin"
    assert storage.authenticate("admin", "nope") is None
