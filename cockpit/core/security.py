"""Security utilities for the cockpit password and JWT session tokens."""

import hmac
from datetime import datetime, timedelta, timezone

import jwt

from cockpit.core.config import settings

SESSION_SUBJECT = "cockpit"


# =============================================================================
# Shared password
# =============================================================================

def verify_password(candidate: str) -> bool:
    """Constant-time comparison against the configured cockpit password."""
    if not settings.COCKPIT_PASSWORD:
        return False
    return hmac.compare_digest(candidate.encode(), settings.COCKPIT_PASSWORD.encode())


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token() -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET).
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": SESSION_SUBJECT,
        "iat": now,
        "exp": now + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore
