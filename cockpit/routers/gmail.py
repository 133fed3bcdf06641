"""Gmail router - Google OAuth connection (Gmail + Calendar scopes)."""

import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from cockpit.core.config import settings
from cockpit.core.deps import api_dependencies, get_db
from cockpit.core.encryption import ConfigurationError
from cockpit.schemas.email import GmailAuthUrl, GmailConnectionStatus, GmailDisconnectRequest
from cockpit.services import google_oauth_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _frontend_redirect(**params: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.FRONTEND_URL}/?{urlencode(params)}", status_code=302)


@router.get("/auth", response_model=GmailAuthUrl, dependencies=api_dependencies)
def gmail_auth(user_email: str = Query(..., alias="userEmail", min_length=3)):
    """Google consent URL for the user."""
    try:
        return GmailAuthUrl(auth_url=google_oauth_service.get_auth_url(user_email))
    except ConfigurationError as e:
        logger.warning("Google OAuth not configured")
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/callback")
async def gmail_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_db),
):
    """
    OAuth redirect target.

    Not behind the session dependencies: Google calls it with a plain
    browser redirect. The state carries the user email.
    """
    if error:
        return _frontend_redirect(gmail="error", reason=error)
    if not code or not state:
        return _frontend_redirect(gmail="error", reason="missing_code")

    try:
        tokens = await google_oauth_service.exchange_code(code)
        google_oauth_service.store_token_response(db, state, tokens)
    except ConfigurationError:
        logger.warning("Google OAuth not configured")
        return _frontend_redirect(gmail="error", reason="not_configured")
    except httpx.HTTPError as e:
        logger.error(f"Google token exchange failed: {type(e).__name__}")
        return _frontend_redirect(gmail="error", reason="token_exchange_failed")
    except ValueError:
        logger.warning("Google token response incomplete")
        return _frontend_redirect(gmail="error", reason="missing_tokens")

    return _frontend_redirect(gmail="connected")


@router.get(
    "/check-connection",
    response_model=GmailConnectionStatus,
    dependencies=api_dependencies,
)
def check_connection(
    user_email: str = Query(..., alias="userEmail", min_length=3),
    db: Session = Depends(get_db),
):
    return GmailConnectionStatus(connected=google_oauth_service.is_connected(db, user_email))


@router.post("/disconnect", dependencies=api_dependencies)
def disconnect(data: GmailDisconnectRequest, db: Session = Depends(get_db)):
    removed = google_oauth_service.disconnect(db, data.user_email)
    return {"ok": True, "removed": removed}
