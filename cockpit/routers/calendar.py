"""Calendar router - Google Calendar events and task sync."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cockpit.core.deps import api_dependencies, get_db
from cockpit.core.encryption import ConfigurationError
from cockpit.schemas.calendar import CalendarEvent, CalendarEventWrite, TaskSyncRequest
from cockpit.services import calendar_service, google_oauth_service
from cockpit.services.calendar_service import CalendarServiceError
from cockpit.services.google_oauth_service import GmailAuthError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=api_dependencies)


async def _access_token(db: Session, user_email: str) -> str:
    try:
        token = await google_oauth_service.get_access_token(db, user_email)
    except GmailAuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ConfigurationError as e:
        logger.warning("Google OAuth not configured")
        raise HTTPException(status_code=503, detail=str(e))
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Google account not connected. Please connect your Google account first.",
        )
    return token


def _upstream_error(e: Exception) -> HTTPException:
    if isinstance(e, GmailAuthError):
        return HTTPException(status_code=401, detail=str(e))
    logger.error(f"Google Calendar request failed: {type(e).__name__}")
    return HTTPException(status_code=502, detail="Google Calendar request failed")


@router.get("/events", response_model=list[CalendarEvent])
async def list_events(
    user_email: str = Query(..., alias="userEmail", min_length=3),
    max_results: int = Query(default=10, alias="maxResults", ge=1, le=250),
    db: Session = Depends(get_db),
):
    """Upcoming events from now, ordered by start time."""
    token = await _access_token(db, user_email)
    try:
        return await calendar_service.list_upcoming_events(token, max_results)
    except (GmailAuthError, CalendarServiceError, httpx.HTTPError) as e:
        raise _upstream_error(e)


@router.post("/events", response_model=CalendarEvent, status_code=201)
async def create_event(data: CalendarEventWrite, db: Session = Depends(get_db)):
    if not data.summary or not data.start or not data.end:
        raise HTTPException(status_code=400, detail="summary, start and end are required")
    token = await _access_token(db, data.user_email)
    try:
        return await calendar_service.create_event(token, calendar_service.build_event_body(data))
    except (GmailAuthError, CalendarServiceError, httpx.HTTPError) as e:
        raise _upstream_error(e)


@router.patch("/events/{event_id}", response_model=CalendarEvent)
async def update_event(event_id: str, data: CalendarEventWrite, db: Session = Depends(get_db)):
    token = await _access_token(db, data.user_email)
    try:
        return await calendar_service.update_event(
            token, event_id, calendar_service.build_event_body(data)
        )
    except (GmailAuthError, CalendarServiceError, httpx.HTTPError) as e:
        raise _upstream_error(e)


@router.delete("/events/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    user_email: str = Query(..., alias="userEmail", min_length=3),
    db: Session = Depends(get_db),
):
    token = await _access_token(db, user_email)
    try:
        await calendar_service.delete_event(token, event_id)
    except (GmailAuthError, CalendarServiceError, httpx.HTTPError) as e:
        raise _upstream_error(e)


@router.post("/tasks/sync", response_model=CalendarEvent)
async def sync_task(data: TaskSyncRequest, db: Session = Depends(get_db)):
    """Create (or update, with `event_id`) the event mirroring a contact task."""
    token = await _access_token(db, data.user_email)
    try:
        event = await calendar_service.sync_task_to_calendar(token, data)
    except GmailAuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid due date")
    if event is None:
        raise HTTPException(status_code=502, detail="Failed to sync task to calendar")
    return event
