"""Pydantic schemas for cockpit authentication."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    password: str = Field(..., min_length=1, max_length=256)


class SessionStatus(BaseModel):
    """Response for GET /auth/me and POST /auth/login."""

    authenticated: bool
    expires_at: int | None = None
