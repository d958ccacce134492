from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from schemas import LoginRequest, LoginResponse, UserOut
from services import storage
from services.auth import encode_token

router = APIRouter(prefix="/api", tags=["auth"])

_log = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest) -> LoginResponse:
    """
    Check the demo credentials and hand back an unsigned token for the UI.
    """
    if not req.username or not req.password:
        raise HTTPException(
            status_code=400, detail="Username and password are required"
        )
    user = storage.authenticate(req.username, req.password)
    if user is None:
        _log.info("login failed username=%s", req.username)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return LoginResponse(token=encode_token(user), user=UserOut(**user))


@router.post("/logout")
def logout() -> Dict[str, Any]:
    return {"message": "Logged out successfully"}
