"""Notion router - OAuth connection, entity notes and links."""

import logging
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cockpit.core.config import settings
from cockpit.core.deps import api_dependencies, get_db
from cockpit.core.encryption import ConfigurationError
from cockpit.db.enums import EntityType
from cockpit.schemas.notion import (
    CreateNoteRequest,
    CreateNoteResponse,
    NotionConnectionStatus,
    NotionLinkRead,
    NotionParentUpdate,
)
from cockpit.services import notion_service
from cockpit.services.notion_service import (
    NotionAPIError,
    NotionNotConnectedError,
    NotionParentMissingError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _frontend_redirect(**params: str) -> RedirectResponse:
    return RedirectResponse(url=f"{settings.FRONTEND_URL}/?{urlencode(params)}", status_code=302)


# =============================================================================
# OAuth
# =============================================================================

@router.get("/oauth/start", dependencies=api_dependencies)
def oauth_start(user_email: str = Query(..., alias="userEmail", min_length=3)):
    """Redirect the browser to Notion's consent page."""
    try:
        url = notion_service.get_auth_url(user_email)
    except ConfigurationError as e:
        logger.warning("Notion OAuth not configured")
        raise HTTPException(status_code=503, detail=str(e))
    return RedirectResponse(url=url, status_code=302)


@router.get("/oauth/callback")
async def oauth_callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    db: Session = Depends(get_db),
):
    if error:
        return _frontend_redirect(notion="error", reason=error)
    if not code or not state:
        return _frontend_redirect(notion="error", reason="missing_code")

    try:
        user_email = notion_service.decode_state(state)
    except ValueError:
        return _frontend_redirect(notion="error", reason="invalid_state")

    try:
        token_data = await notion_service.exchange_code(code)
        notion_service.store_connection(db, user_email, token_data)
    except ConfigurationError:
        logger.warning("Notion OAuth not configured")
        return _frontend_redirect(notion="error", reason="not_configured")
    except (NotionAPIError, httpx.HTTPError) as e:
        logger.error(f"Notion token exchange failed: {type(e).__name__}")
        return _frontend_redirect(notion="error", reason="token_exchange_failed")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to store Notion connection")
        return _frontend_redirect(notion="error", reason="storage_failed")

    return _frontend_redirect(notion="connected")


# =============================================================================
# Connection
# =============================================================================

@router.get("/connection", response_model=NotionConnectionStatus, dependencies=api_dependencies)
def get_connection(
    user_email: str = Query(..., alias="userEmail", min_length=3),
    db: Session = Depends(get_db),
):
    connection = notion_service.get_connection(db, user_email)
    if connection is None:
        return NotionConnectionStatus(connected=False)
    return NotionConnectionStatus(
        connected=True,
        workspace_name=connection.workspace_name,
        parent_id=connection.notion_parent_id,
        parent_type=connection.notion_parent_type,
    )


@router.patch("/connection", response_model=NotionConnectionStatus, dependencies=api_dependencies)
def set_parent(data: NotionParentUpdate, db: Session = Depends(get_db)):
    """Choose the database (or data source) new notes are created in."""
    try:
        connection = notion_service.set_parent(db, data.user_email, data.parent_id, data.parent_type)
    except NotionNotConnectedError as e:
        raise HTTPException(status_code=401, detail=str(e))
    return NotionConnectionStatus(
        connected=True,
        workspace_name=connection.workspace_name,
        parent_id=connection.notion_parent_id,
        parent_type=connection.notion_parent_type,
    )


@router.delete("/connection", dependencies=api_dependencies)
def disconnect(
    user_email: str = Query(..., alias="userEmail", min_length=3),
    db: Session = Depends(get_db),
):
    removed = notion_service.disconnect(db, user_email)
    return {"ok": True, "removed": removed}


# =============================================================================
# Notes and links
# =============================================================================

@router.post(
    "/create-note",
    response_model=CreateNoteResponse,
    response_model_by_alias=True,
    dependencies=api_dependencies,
)
async def create_note(data: CreateNoteRequest, db: Session = Depends(get_db)):
    """Create a Notion page for a contact, organisation, project or document."""
    if not data.user_email or not data.mb_entity_type or not data.mb_entity_id:
        raise HTTPException(
            status_code=400,
            detail="Missing required fields: userEmail, mbEntityType, mbEntityId",
        )
    if not EntityType.has_value(data.mb_entity_type):
        raise HTTPException(
            status_code=400,
            detail="Invalid mbEntityType. Must be: contact, organisation, project, or document",
        )

    try:
        link = await notion_service.create_note_for_entity(
            db, data.user_email, data.mb_entity_type, data.mb_entity_id
        )
    except NotionNotConnectedError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except NotionParentMissingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotionAPIError as e:
        logger.error(f"Notion API error creating note: status={e.status} code={e.code}")
        raise HTTPException(status_code=502, detail=f"Notion API error: {e}")

    return CreateNoteResponse(notion_page_id=link.notion_page_id, notion_url=link.notion_url)


@router.get("/links", response_model=list[NotionLinkRead], dependencies=api_dependencies)
def list_links(
    entity_type: str = Query(..., alias="entityType"),
    entity_id: str = Query(..., alias="entityId"),
    db: Session = Depends(get_db),
):
    return notion_service.get_links(db, entity_type, entity_id)
