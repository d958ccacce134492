import os
import time
from typing import Any, Dict, List, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import streamlit as st

from services.currency import format_event_date, format_price_in_rupees

# =========================
# Config
# =========================
API = os.getenv("EVENTIC_API", "http://localhost:3001").rstrip("/")

st.set_page_config(page_title="Eventic", page_icon="🎟️", layout="wide")
st.title("Eventic")
st.caption(f"API: `{API}`")

# Session defaults
if "token" not in st.session_state:
    st.session_state.token = None
if "user" not in st.session_state:
    st.session_state.user = None

# =========================
# HTTP helpers (with retries)
# =========================
_session = requests.Session()
_retry = Retry(
    total=3, connect=3, read=3, backoff_factor=0.5,
    status_forcelist=[429, 500, 502, 503, 504],
    allowed_methods=frozenset({"GET"}),
    respect_retry_after_header=True,
)
_session.mount("https://", HTTPAdapter(max_retries=_retry))
_session.mount("http://", HTTPAdapter(max_retries=_retry))


def _headers(auth: bool = True) -> Dict[str, str]:
    h = {"Content-Type": "application/json"}
    if auth and st.session_state.token:
        h["Authorization"] = f"Bearer {st.session_state.token}"
    return h


def _req_json(method: str, path: str, *, timeout: int = 20, auth: bool = True, **kwargs) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    url = f"{API}{path}"
    t0 = time.time()
    try:
        r = _session.request(method, url, timeout=timeout, headers=_headers(auth), **kwargs)
        if r.status_code == 401 and auth:
            st.session_state.token = None
            st.session_state.user = None
        if r.status_code == 204:
            return {"ok": True}
        if not r.ok:
            try:
                err = r.json().get("error")
            except ValueError:
                err = None
            return {"ok": False, "error": err or f"HTTP error! status: {r.status_code}"}
        return r.json()
    except requests.RequestException as e:
        elapsed = round((time.time() - t0) * 1000)
        return {"ok": False, "error": str(e), "debug": {"url": url, "elapsed_ms": elapsed}}


def _get(path: str, **params) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    return _req_json("GET", path, params={k: v for k, v in params.items() if v})


def _post(path: str, payload: Dict[str, Any], *, auth: bool = True) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    return _req_json("POST", path, json=payload, auth=auth)


def _put(path: str, payload: Dict[str, Any]) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    return _req_json("PUT", path, json=payload)


def _delete(path: str) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
    return _req_json("DELETE", path)


def _failed(res: Any) -> Optional[str]:
    if isinstance(res, dict) and res.get("ok") is False:
        return res.get("error") or "unknown error"
    return None


def is_admin() -> bool:
    return bool(st.session_state.user and st.session_state.user.get("role") == "admin")


# =========================
# UI components
# =========================


def event_card(e: Dict[str, Any], key: str):
    with st.container():
        st.markdown(f"### {e.get('title') or 'Untitled Event'}")

        chips = []
        if e.get("location"):
            chips.append(f"📍 {e['location']}")
        if e.get("date"):
            chips.append(f"📅 {format_event_date(e['date'])}")
        if e.get("category"):
            chips.append(f"🏷️ {e['category']}")
        chips.append(f"💰 {format_price_in_rupees(e.get('price'))}")
        st.caption(" • ".join(chips))

        desc = e.get("description")
        if desc:
            st.text(desc[:200] + ("..." if len(desc) > 200 else ""))

        if e.get("imageUrl"):
            st.image(e["imageUrl"], use_container_width=True)

        if st.button("🎫 Book", key=f"book_{key}"):
            st.session_state.booking_event = e
            st.info("Open the **Book** tab to finish your request.")

        st.divider()


# =========================
# Sidebar: account + newsletter
# =========================
with st.sidebar:
    st.subheader("👤 Account")
    if st.session_state.user:
        st.write(f"Signed in as **{st.session_state.user['username']}** ({st.session_state.user['role']})")
        if st.button("Log out"):
            _post("/api/logout", {})
            st.session_state.token = None
            st.session_state.user = None
            st.rerun()
    else:
        with st.form("login_form"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in", type="primary"):
                res = _post("/api/login", {"username": username, "password": password}, auth=False)
                err = _failed(res)
                if err:
                    st.error(err)
                else:
                    st.session_state.token = res["token"]
                    st.session_state.user = res["user"]
                    st.rerun()

    st.divider()
    st.subheader("📬 Newsletter")
    with st.form("newsletter_form"):
        sub_email = st.text_input("Email")
        sub_phone = st.text_input("Phone (optional)")
        if st.form_submit_button("Subscribe"):
            res = _post("/api/subscribers", {"email": sub_email, "phone": sub_phone}, auth=False)
            err = _failed(res)
            if err:
                st.error(err)
            else:
                st.success("Subscribed ✅")

tab_names = ["🏠 Discover", "🎫 Book", "💬 Concierge", "📋 My Bookings"]
if is_admin():
    tab_names.append("🛠️ Admin")
tabs = st.tabs(tab_names)

# ---------- DISCOVER ----------
with tabs[0]:
    st.header("🏠 Discover Events")
    left, right = st.columns([1, 3], gap="large")
    with left:
        query = st.text_input("Search", placeholder="e.g. music festival")
        location = st.text_input("Location")
        date = st.date_input("Date", value=None)
        smart = st.checkbox("Smart search (ranked)", value=False)

    with right:
        date_str = date.isoformat() if date else None
        if smart and query:
            res = _get("/api/events/match", q=query, location=location, date=date_str, fallback="true")
            items = [] if _failed(res) else res.get("items", [])
            if not _failed(res) and res.get("fallback"):
                st.info(f'No exact match for "{query}". Showing popular events instead.')
        else:
            res = _get("/api/events", location=location, date=date_str)
            items = [] if _failed(res) else list(res)
            if query:
                q = query.lower()
                items = [
                    e for e in items
                    if q in (e.get("title") or "").lower() or q in (e.get("description") or "").lower()
                ]
        if _failed(res):
            st.error(f"Failed to load events: {_failed(res)}")
        elif not items:
            st.info("No events matched. Try a different search.")
        for i, ev in enumerate(items):
            event_card(ev, key=f"discover_{i}_{ev.get('id')}")

# ---------- BOOK ----------
with tabs[1]:
    st.header("🎫 Request a Booking")
    ev = st.session_state.get("booking_event")
    if not ev:
        st.info("Pick an event on the Discover tab first.")
    else:
        st.subheader(ev.get("title", ""))
        with st.form("booking_form"):
            user = st.session_state.user or {}
            name = st.text_input("Your name", value=user.get("username", ""))
            email = st.text_input("Email")
            phone = st.text_input("Phone")
            guests = st.number_input("Guest count", min_value=1, value=1, step=1)
            message = st.text_area("Message for the organizer")
            if st.form_submit_button("Submit request", type="primary"):
                res = _post("/api/bookings", {
                    "eventId": ev["id"],
                    "userName": name,
                    "userEmail": email,
                    "phone": phone or None,
                    "guestCount": int(guests),
                    "message": message or None,
                    "userId": user.get("id"),
                })
                err = _failed(res)
                if err:
                    st.error(err)
                else:
                    st.success(res.get("notice") or "Booking requested.")

# ---------- CONCIERGE ----------
with tabs[2]:
    st.header("💬 AI Event Concierge")
    if "chat_log" not in st.session_state:
        st.session_state.chat_log = []

    for turn in st.session_state.chat_log:
        with st.chat_message(turn["role"]):
            st.markdown(turn["content"])

    prompt = st.chat_input("Ask about events, cities, prices...")
    if prompt:
        st.session_state.chat_log.append({"role": "user", "content": prompt})
        res = _post("/api/chat", {"message": prompt}, auth=False)
        answer = _failed(res) or res.get("response", "")
        st.session_state.chat_log.append({"role": "assistant", "content": answer})
        st.rerun()

# ---------- MY BOOKINGS ----------
with tabs[3]:
    st.header("📋 My Bookings")
    if not st.session_state.user:
        st.info("Log in to see your bookings.")
    else:
        res = _get("/api/bookings")
        err = _failed(res)
        if err:
            st.error(err)
        elif not res:
            st.info("No bookings yet.")
        else:
            for b in res:
                st.markdown(f"**{b.get('eventName')}** — {b.get('guestCount')} guests — `{b.get('status')}`")
                if b.get("adminNote"):
                    st.caption(f"Note: {b['adminNote']}")

# ---------- ADMIN ----------
if is_admin():
    with tabs[4]:
        st.header("🛠️ Admin Dashboard")
        sec_bookings, sec_events, sec_subs, sec_metrics = st.tabs(
            ["Bookings", "Events", "Subscribers", "Metrics"]
        )

        with sec_bookings:
            res = _get("/api/bookings", role="admin")
            if _failed(res):
                st.error(_failed(res))
            else:
                pending = [b for b in res if (b.get("status") or "").lower() == "pending"]
                st.metric("Pending requests", len(pending))
                for b in res:
                    with st.expander(f"#{b['id']} {b.get('eventName')} — {b.get('userName')} ({b.get('status')})"):
                        st.write(f"{b.get('userEmail')} · {b.get('phone') or '-'} · {b.get('guestCount')} guests")
                        if b.get("message"):
                            st.write(b["message"])
                        note = st.text_input("Admin note", value=b.get("adminNote") or "", key=f"note_{b['id']}")
                        c1, c2 = st.columns(2)
                        if c1.button("Approve", key=f"approve_{b['id']}"):
                            _put(f"/api/bookings/{b['id']}", {"status": "Approved", "adminNote": note})
                            st.rerun()
                        if c2.button("Reject", key=f"reject_{b['id']}"):
                            _put(f"/api/bookings/{b['id']}", {"status": "Rejected", "adminNote": note})
                            st.rerun()

        with sec_events:
            with st.form("new_event"):
                st.subheader("New event")
                title = st.text_input("Title")
                description = st.text_area("Description")
                ev_date = st.date_input("Date")
                ev_location = st.text_input("Location")
                category = st.text_input("Category")
                price = st.number_input("Price (USD)", min_value=0.0, value=0.0)
                organizer = st.text_input("Organizer")
                featured = st.checkbox("Featured")
                if st.form_submit_button("Create", type="primary"):
                    res = _post("/api/events", {
                        "title": title, "description": description,
                        "date": ev_date.isoformat(), "location": ev_location,
                        "category": category, "price": price,
                        "organizer": organizer, "featured": featured,
                    })
                    if _failed(res):
                        st.error(_failed(res))
                    else:
                        st.success(f"Created event #{res['id']}")

            events = _get("/api/events")
            for e in [] if _failed(events) else events:
                c1, c2, c3 = st.columns([4, 1, 1])
                c1.write(f"#{e['id']} **{e['title']}** · {e['location']} · {e['date']}")
                star = "★ Unfeature" if e.get("featured") else "☆ Feature"
                if c2.button(star, key=f"feat_{e['id']}"):
                    _put(f"/api/events/{e['id']}", {"featured": not e.get("featured")})
                    st.rerun()
                if c3.button("Delete", key=f"del_{e['id']}"):
                    _delete(f"/api/events/{e['id']}")
                    st.rerun()

        with sec_subs:
            subs = _get("/api/subscribers")
            if _failed(subs):
                st.error(_failed(subs))
            else:
                for s in subs:
                    c1, c2 = st.columns([5, 1])
                    c1.write(f"{s.get('email') or s.get('phone')} · {s.get('status')} · {s.get('subscribedAt')}")
                    if c2.button("Remove", key=f"unsub_{s['id']}"):
                        _delete(f"/api/subscribers/{s['id']}")
                        st.rerun()

        with sec_metrics:
            res = _get("/metrics")
            if _failed(res):
                st.error(_failed(res))
            else:
                st.json(res.get("metrics", {}))

# Footer
st.divider()
st.caption("🎟️ Eventic — book premium events with a little help from our concierge.")
