"""
Toy bearer tokens: base64 of a JSON user claim. Not signed.
"""
from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException


def encode_token(user: Dict[str, Any]) -> str:
    claim = {"id": user["id"], "username": user["username"], "role": user["role"]}
    return base64.b64encode(json.dumps(claim).encode("utf-8")).decode("ascii")


def decode_token(token: str) -> Dict[str, Any]:
    try:
        claim = json.loads(base64.b64decode(token, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("invalid token") from exc
    if not isinstance(claim, dict) or "id" not in claim:
        raise ValueError("invalid token")
    return claim


def current_user(authorization: Optional[str] = Header(None)) -> Dict[str, Any]:
    token = None
    if authorization:
        parts = authorization.split(" ")
        token = parts[1] if len(parts) > 1 else None
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")
    try:
        return decode_token(token)
    except ValueError:
        raise HTTPException(status_code=403, detail="Invalid or expired token")


def require_admin(user: Dict[str, Any] = Depends(current_user)) -> Dict[str, Any]:
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
