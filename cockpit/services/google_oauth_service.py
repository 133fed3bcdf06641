"""Google OAuth for Gmail and Calendar.

Tokens are stored per user email in `gmail_credentials` (encrypted at rest)
and refreshed transparently when expired.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import httpx
from sqlalchemy.orm import Session

from cockpit.core.config import settings
from cockpit.core.encryption import ConfigurationError
from cockpit.db.models import GoogleCredential

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/gmail.readonly",
    "https://www.googleapis.com/auth/calendar.events",
]


class GmailAuthError(Exception):
    """Stored Google credentials are missing, revoked or could not be refreshed."""


def _now_utc() -> datetime:
    """Timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def _is_expired(expires_at: datetime) -> bool:
    """Return True if expires_at is in the past (treat naive datetimes as UTC)."""
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at <= _now_utc()


def _require_config() -> None:
    if not settings.google_oauth_configured:
        raise ConfigurationError(
            "Missing Google OAuth credentials. Set GOOGLE_CLIENT_ID, "
            "GOOGLE_CLIENT_SECRET and GOOGLE_REDIRECT_URI."
        )


# ============================================================================
# OAuth flow
# ============================================================================

def get_auth_url(user_email: str) -> str:
    """Consent URL; the user email travels in `state` back to the callback."""
    _require_config()
    params = {
        "client_id": settings.GOOGLE_CLIENT_ID,
        "redirect_uri": settings.GOOGLE_REDIRECT_URI,
        "response_type": "code",
        "scope": " ".join(GOOGLE_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
        "state": user_email,
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


async def exchange_code(code: str) -> dict[str, Any]:
    """Exchange authorization code for tokens."""
    _require_config()
    async with httpx.AsyncClient() as client:
        response = await client.post(
            GOOGLE_TOKEN_URL,
            data={
                "client_id": settings.GOOGLE_CLIENT_ID,
                "client_secret": settings.GOOGLE_CLIENT_SECRET,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            },
        )
        response.raise_for_status()
        return response.json()


async def refresh_access_token(refresh_token: str) -> dict[str, Any] | None:
    """Refresh an access token. None when Google rejects the refresh token."""
    _require_config()
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "client_id": settings.GOOGLE_CLIENT_ID,
                    "client_secret": settings.GOOGLE_CLIENT_SECRET,
                    "refresh_token": refresh_token,
                    "grant_type": "refresh_token",
                },
            )
            response.raise_for_status()
            return response.json()
    except httpx.HTTPError as e:
        logger.error(f"Google token refresh failed: {type(e).__name__}")
        return None


# ============================================================================
# Credential storage
# ============================================================================

def get_credential(db: Session, user_email: str) -> GoogleCredential | None:
    return (
        db.query(GoogleCredential)
        .filter(GoogleCredential.user_email == user_email)
        .first()
    )


def store_tokens(
    db: Session,
    user_email: str,
    *,
    access_token: str | None,
    refresh_token: str | None,
    expiry_date: datetime | None,
) -> GoogleCredential:
    """
    Upsert the user's tokens.

    Raises:
        ValueError: any of access token, refresh token or expiry is missing
    """
    if not access_token or not refresh_token or not expiry_date:
        raise ValueError("Missing required tokens")

    credential = get_credential(db, user_email)
    if credential is None:
        credential = GoogleCredential(user_email=user_email)
        db.add(credential)
    credential.access_token = access_token
    credential.refresh_token = refresh_token
    credential.expiry_date = expiry_date
    credential.updated_at = _now_utc()
    db.commit()
    db.refresh(credential)
    return credential


def store_token_response(db: Session, user_email: str, tokens: dict[str, Any]) -> GoogleCredential:
    """Store a Google token endpoint response (`expires_in` seconds from now)."""
    expires_in = tokens.get("expires_in")
    expiry = _now_utc() + timedelta(seconds=int(expires_in)) if expires_in else None
    return store_tokens(
        db,
        user_email,
        access_token=tokens.get("access_token"),
        refresh_token=tokens.get("refresh_token"),
        expiry_date=expiry,
    )


def is_connected(db: Session, user_email: str) -> bool:
    return get_credential(db, user_email) is not None


def disconnect(db: Session, user_email: str) -> bool:
    credential = get_credential(db, user_email)
    if not credential:
        return False
    db.delete(credential)
    db.commit()
    return True


async def get_access_token(db: Session, user_email: str) -> str | None:
    """
    Decrypted access token, refreshed first when expired.

    Returns None when the user never connected.

    Raises:
        GmailAuthError: the token is expired and cannot be refreshed
    """
    credential = get_credential(db, user_email)
    if not credential:
        return None

    if credential.expiry_date and _is_expired(credential.expiry_date):
        if not credential.refresh_token:
            raise GmailAuthError("Gmail token expired. Please reconnect your Gmail account.")
        refreshed = await refresh_access_token(credential.refresh_token)
        if not refreshed or not refreshed.get("access_token"):
            raise GmailAuthError(
                "Failed to refresh Gmail token. Please reconnect your Gmail account."
            )
        store_token_response(
            db,
            user_email,
            {
                **refreshed,
                "refresh_token": refreshed.get("refresh_token") or credential.refresh_token,
            },
        )
        return refreshed["access_token"]

    return credential.access_token
