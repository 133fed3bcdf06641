"""Notion integration: API client, OAuth connection and entity notes."""

from __future__ import annotations

import base64
import logging
import secrets
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode
from uuid import UUID

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.core.config import settings
from cockpit.core.encryption import ConfigurationError
from cockpit.core.structured_logging import build_log_context
from cockpit.db.enums import EntityType, NotionParentType
from cockpit.db.models import (
    Contact,
    Document,
    NotionConnection,
    NotionLink,
    Organisation,
    Project,
)
from cockpit.services.http_service import request_with_retries

logger = logging.getLogger(__name__)

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_AUTHORIZE_URL = f"{NOTION_API_BASE}/oauth/authorize"
NOTION_TOKEN_URL = f"{NOTION_API_BASE}/oauth/token"


class NotionAPIError(Exception):
    """Notion returned an error response (after retries)."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str | None = None,
        retry_after: float | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.retry_after = retry_after


class NotionNotConnectedError(Exception):
    """The user has no stored Notion connection."""


class NotionParentMissingError(Exception):
    """No database/data source configured for new notes."""


# =============================================================================
# API client
# =============================================================================

class NotionClient:
    """
    Thin Notion REST client.

    Every request carries the `Notion-Version` header. 429 and 5xx
    responses are retried with backoff (429 honours `Retry-After`).
    """

    def __init__(
        self,
        access_token: str,
        notion_version: str | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_attempts: int = 4,
        base_delay: float = 1.0,
        max_delay: float = 8.0,
    ):
        self.access_token = access_token
        self.notion_version = notion_version or settings.NOTION_VERSION
        self._transport = transport
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._max_delay = max_delay

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Notion-Version": self.notion_version,
            "Content-Type": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        async with httpx.AsyncClient(
            base_url=NOTION_API_BASE, transport=self._transport, timeout=30.0
        ) as client:

            async def send() -> httpx.Response:
                return await client.request(
                    method,
                    path,
                    headers=self._headers(),
                    json=body if method in ("POST", "PATCH") else None,
                    params=params,
                )

            try:
                response = await request_with_retries(
                    send,
                    max_attempts=self._max_attempts,
                    base_delay=self._base_delay,
                    max_delay=self._max_delay,
                )
            except httpx.RequestError as exc:
                raise NotionAPIError(
                    f"Notion API request failed: {type(exc).__name__}", 503, "network_error"
                ) from exc

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise NotionAPIError(
                "Rate limit exceeded",
                429,
                "rate_limit_exceeded",
                float(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.is_error:
            try:
                data = response.json()
            except ValueError:
                data = {}
            raise NotionAPIError(
                data.get("message") or f"Notion API error: {response.reason_phrase}",
                response.status_code,
                data.get("code"),
            )
        return response.json()

    async def get_page(self, page_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/pages/{page_id}")

    async def create_page(self, page: dict[str, Any]) -> dict[str, Any]:
        return await self.request("POST", "/pages", page)

    async def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PATCH", f"/pages/{page_id}", {"properties": properties})

    async def get_database(self, database_id: str) -> dict[str, Any]:
        return await self.request("GET", f"/databases/{database_id}")

    async def get_block_children(
        self, block_id: str, start_cursor: str | None = None
    ) -> dict[str, Any]:
        params = {"start_cursor": start_cursor} if start_cursor else None
        return await self.request("GET", f"/blocks/{block_id}/children", params=params)

    async def get_all_block_children(self, block_id: str) -> list[dict[str, Any]]:
        blocks: list[dict[str, Any]] = []
        cursor = None
        while True:
            page = await self.get_block_children(block_id, cursor)
            blocks.extend(page.get("results", []))
            cursor = page.get("next_cursor")
            if not cursor:
                return blocks

    async def query_database(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        start_cursor: str | None = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if filter:
            body["filter"] = filter
        if sorts:
            body["sorts"] = sorts
        if start_cursor:
            body["start_cursor"] = start_cursor
        return await self.request("POST", f"/databases/{database_id}/query", body)

    async def resolve_parent(self, parent_type: str, parent_id: str) -> tuple[str, str]:
        """
        Resolve a configured parent to (type, id).

        A database that exposes data sources resolves to its first data
        source. If the database cannot be read, the database id is used as is.
        """
        if parent_type == NotionParentType.DATA_SOURCE.value:
            return NotionParentType.DATA_SOURCE.value, parent_id
        try:
            database = await self.get_database(parent_id)
        except NotionAPIError as exc:
            logger.warning("Could not read Notion database, using it directly: %s", exc.status)
            return NotionParentType.DATABASE.value, parent_id
        data_sources = database.get("data_sources") or []
        if data_sources:
            return NotionParentType.DATA_SOURCE.value, data_sources[0]["id"]
        return NotionParentType.DATABASE.value, parent_id


# =============================================================================
# OAuth
# =============================================================================

def _redirect_uri() -> str:
    return settings.NOTION_REDIRECT_URI or f"{settings.APP_BASE_URL}/api/notion/oauth/callback"


def encode_state(user_email: str) -> str:
    """Random nonce plus the user email, base64 encoded."""
    raw = f"{secrets.token_hex(32)}:{user_email}"
    return base64.b64encode(raw.encode()).decode()


def decode_state(state: str) -> str:
    """
    Extract the user email from an OAuth state value.

    Raises:
        ValueError: state is not in the expected format
    """
    try:
        decoded = base64.b64decode(state.encode(), validate=True).decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        raise ValueError("Invalid state format") from exc
    parts = decoded.split(":")
    if len(parts) < 2 or not parts[1]:
        raise ValueError("Invalid state format")
    return ":".join(parts[1:])


def get_auth_url(user_email: str) -> str:
    if not settings.NOTION_CLIENT_ID:
        raise ConfigurationError("Notion OAuth not configured. Missing NOTION_CLIENT_ID")
    params = {
        "client_id": settings.NOTION_CLIENT_ID,
        "redirect_uri": _redirect_uri(),
        "response_type": "code",
        "owner": "user",
        "state": encode_state(user_email),
    }
    return f"{NOTION_AUTHORIZE_URL}?{urlencode(params)}"


async def exchange_code(code: str) -> dict[str, Any]:
    """Exchange an authorization code (HTTP Basic auth with client id/secret)."""
    if not settings.notion_oauth_configured:
        raise ConfigurationError("Notion OAuth not configured")
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            NOTION_TOKEN_URL,
            auth=(settings.NOTION_CLIENT_ID, settings.NOTION_CLIENT_SECRET),
            json={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": _redirect_uri(),
            },
        )
    if response.is_error:
        raise NotionAPIError("Token exchange failed", response.status_code, "token_exchange_failed")
    return response.json()


# =============================================================================
# Connections
# =============================================================================

def get_connection(db: Session, user_email: str) -> NotionConnection | None:
    """Most recent connection for the user."""
    return (
        db.query(NotionConnection)
        .filter(NotionConnection.user_email == user_email)
        .order_by(NotionConnection.created_at.desc())
        .first()
    )


def store_connection(db: Session, user_email: str, token_data: dict[str, Any]) -> NotionConnection:
    """Upsert on (user_email, workspace_id); the configured parent is kept."""
    owner_workspace = (token_data.get("owner") or {}).get("workspace") or {}
    workspace_id = token_data.get("workspace_id") or owner_workspace.get("id")
    workspace_name = token_data.get("workspace_name") or owner_workspace.get("name")
    access_token = token_data.get("access_token")
    if not access_token:
        raise NotionAPIError("Notion token response has no access_token", status=502)

    connection = (
        db.query(NotionConnection)
        .filter(
            NotionConnection.user_email == user_email,
            NotionConnection.workspace_id == workspace_id,
        )
        .first()
    )
    if connection is None:
        connection = NotionConnection(user_email=user_email, workspace_id=workspace_id)
        db.add(connection)
    connection.access_token = access_token
    connection.workspace_name = workspace_name
    connection.bot_id = token_data.get("bot_id")
    db.commit()
    db.refresh(connection)
    return connection


def set_parent(
    db: Session, user_email: str, parent_id: str, parent_type: str
) -> NotionConnection:
    connection = get_connection(db, user_email)
    if connection is None:
        raise NotionNotConnectedError("Notion not connected. Please connect your Notion account first.")
    connection.notion_parent_id = parent_id
    connection.notion_parent_type = parent_type
    db.commit()
    db.refresh(connection)
    return connection


def disconnect(db: Session, user_email: str) -> int:
    """Remove all of the user's connections. Returns how many were deleted."""
    count = (
        db.query(NotionConnection)
        .filter(NotionConnection.user_email == user_email)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count


# =============================================================================
# Entity notes
# =============================================================================

_ENTITY_MODELS = {
    EntityType.CONTACT.value: (Contact, "name"),
    EntityType.ORGANISATION.value: (Organisation, "name"),
    EntityType.PROJECT.value: (Project, "title"),
    EntityType.DOCUMENT.value: (Document, "name"),
}


def lookup_entity_name(db: Session, entity_type: str, entity_id: str) -> str | None:
    model, name_attr = _ENTITY_MODELS[entity_type]
    try:
        key = UUID(entity_id)
    except ValueError:
        return None
    entity = db.query(model).filter(model.id == key).first()
    if entity is None:
        return None
    return getattr(entity, name_attr) or "Untitled"


def build_note_page(
    parent_type: str,
    parent_id: str,
    *,
    title: str,
    entity_type: str,
    entity_id: str,
    entity_url: str,
) -> dict[str, Any]:
    """Page payload with the cockpit back-pointer properties."""
    parent_key = "data_source_id" if parent_type == NotionParentType.DATA_SOURCE.value else "database_id"
    return {
        "parent": {parent_key: parent_id},
        "properties": {
            "Name": {"title": [{"text": {"content": title}}]},
            "MB Entity Type": {"select": {"name": entity_type}},
            "MB Entity ID": {"rich_text": [{"text": {"content": entity_id}}]},
            "MB URL": {"url": entity_url or None},
        },
    }


async def create_note_for_entity(
    db: Session,
    user_email: str,
    entity_type: str,
    entity_id: str,
    *,
    client: NotionClient | None = None,
) -> NotionLink:
    """
    Create a Notion page for a cockpit entity and remember the link.

    Raises:
        NotionNotConnectedError: user has no Notion connection
        NotionParentMissingError: no parent database configured
        NotionAPIError: Notion rejected the request
    """
    connection = get_connection(db, user_email)
    if connection is None:
        raise NotionNotConnectedError("Notion not connected. Please connect your Notion account first.")

    parent_id = connection.notion_parent_id or settings.NOTION_DEFAULT_DATABASE_ID
    parent_type = connection.notion_parent_type or NotionParentType.DATABASE.value
    if not parent_id:
        raise NotionParentMissingError(
            "Notion parent not configured. Please set up a database or data source for MB Notes."
        )

    entity_name = lookup_entity_name(db, entity_type, entity_id)
    entity_url = ""
    if entity_name is not None:
        entity_url = f"{settings.APP_BASE_URL.rstrip('/')}/{entity_type}s/{entity_id}"

    notion = client or NotionClient(connection.access_token)
    resolved_type, resolved_id = await notion.resolve_parent(parent_type, parent_id)
    page = await notion.create_page(
        build_note_page(
            resolved_type,
            resolved_id,
            title=entity_name or "Untitled",
            entity_type=entity_type,
            entity_id=entity_id,
            entity_url=entity_url,
        )
    )

    link = NotionLink(
        user_email=user_email,
        mb_entity_type=entity_type,
        mb_entity_id=entity_id,
        notion_page_id=page["id"],
        notion_url=page.get("url"),
        notion_parent_type=resolved_type,
        notion_parent_id=resolved_id,
        created_at=datetime.now(timezone.utc),
    )
    try:
        db.add(link)
        db.commit()
        db.refresh(link)
    except SQLAlchemyError:
        # The page exists in Notion; only the back-link is lost
        db.rollback()
        logger.exception(
            "Failed to store Notion link",
            extra=build_log_context(
                user_email=user_email, entity_type=entity_type, entity_id=entity_id
            ),
        )
    return link


def get_links(db: Session, entity_type: str, entity_id: str) -> list[NotionLink]:
    return (
        db.query(NotionLink)
        .filter(
            NotionLink.mb_entity_type == entity_type,
            NotionLink.mb_entity_id == entity_id,
        )
        .order_by(NotionLink.created_at.desc())
        .all()
    )
