"""Structured logging helpers (secret-safe)."""

from typing import Any


def build_log_context(
    *,
    user_email: str | None = None,
    entity_type: str | None = None,
    entity_id: str | None = None,
    route: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict that never carries tokens or secrets."""
    context: dict[str, Any] = {}
    if user_email:
        context["user_email_domain"] = user_email.rsplit("@", 1)[-1].lower()
    if entity_type:
        context["entity_type"] = entity_type
    if entity_id:
        context["entity_id"] = entity_id
    if route:
        context["route"] = route
    return context
