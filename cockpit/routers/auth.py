"""Authentication router - shared cockpit password and session cookie."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from cockpit.core.config import settings
from cockpit.core.deps import COOKIE_NAME, require_csrf_header
from cockpit.core.rate_limit import limiter
from cockpit.core.security import SESSION_SUBJECT, create_session_token, decode_session_token, verify_password
from cockpit.schemas.auth import LoginRequest, SessionStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=SessionStatus)
@limiter.limit(f"{settings.RATE_LIMIT_AUTH}/minute")
def login(request: Request, response: Response, body: LoginRequest):
    """Check the cockpit password and set the session cookie."""
    if not verify_password(body.password):
        logger.warning("Failed cockpit login attempt")
        raise HTTPException(status_code=401, detail="Invalid password")

    token = create_session_token()
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
    payload = decode_session_token(token)
    return SessionStatus(authenticated=True, expires_at=payload.get("exp"))


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(response: Response):
    response.delete_cookie(COOKIE_NAME, path="/")
    return {"status": "logged_out"}


@router.get("/me", response_model=SessionStatus)
def get_me(request: Request):
    """Session status. Never raises: an invalid cookie is just unauthenticated."""
    token = request.cookies.get(COOKIE_NAME)
    if not token:
        return SessionStatus(authenticated=False)
    try:
        payload = decode_session_token(token)
    except Exception:
        return SessionStatus(authenticated=False)
    if payload.get("sub") != SESSION_SUBJECT:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, expires_at=payload.get("exp"))
