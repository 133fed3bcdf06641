"""Calendar service - Google Calendar events for the cockpit.

Handles:
- Listing upcoming events
- Event creation/update/deletion with an importance `weight`
- Mirroring contact tasks as one-hour events

The weight lives in `extendedProperties.private.weight` on the Google side
and is lifted to a top-level `weight` on the way out.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from cockpit.schemas.calendar import CalendarEvent, CalendarEventWrite, TaskSyncRequest
from cockpit.services.google_oauth_service import GmailAuthError

logger = logging.getLogger(__name__)

CALENDAR_EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/{calendar_id}/events"
TASK_EVENT_DURATION = timedelta(hours=1)


class CalendarServiceError(Exception):
    """Google Calendar returned an error other than an auth failure."""


# =============================================================================
# Conversion helpers
# =============================================================================

def to_calendar_event(item: dict[str, Any]) -> CalendarEvent:
    private = (item.get("extendedProperties") or {}).get("private") or {}
    return CalendarEvent(
        id=item.get("id", ""),
        summary=item.get("summary"),
        description=item.get("description"),
        start=item.get("start"),
        end=item.get("end"),
        location=item.get("location"),
        html_link=item.get("htmlLink"),
        attendees=item.get("attendees") or [],
        weight=private.get("weight"),
    )


def _time_body(value) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if value.date_time:
        body["dateTime"] = value.date_time
    if value.date:
        body["date"] = value.date
    if value.time_zone:
        body["timeZone"] = value.time_zone
    return body


def build_event_body(data: CalendarEventWrite) -> dict[str, Any]:
    """Google Calendar resource for a create/update request."""
    body: dict[str, Any] = {}
    if data.summary is not None:
        body["summary"] = data.summary
    if data.description is not None:
        body["description"] = data.description
    if data.location is not None:
        body["location"] = data.location
    if data.start is not None:
        body["start"] = _time_body(data.start)
    if data.end is not None:
        body["end"] = _time_body(data.end)
    if data.attendees:
        body["attendees"] = [
            {"email": a.email, **({"displayName": a.display_name} if a.display_name else {})}
            for a in data.attendees
        ]
    if data.weight:
        body["extendedProperties"] = {"private": {"weight": data.weight}}
    return body


def _parse_due_date(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def task_to_event(task: TaskSyncRequest) -> dict[str, Any]:
    """One-hour event starting at the task's due date."""
    start = _parse_due_date(task.due_date)
    end = start + TASK_EVENT_DURATION

    description_lines = [
        f"Task: {task.task_text}",
        f"Notes: {task.notes}" if task.notes else "",
        f"Assignees: {', '.join(task.assignees)}" if task.assignees else "",
        f"Contact: {task.contact_name}",
    ]
    body: dict[str, Any] = {
        "summary": task.task_text,
        "description": "\n\n".join(line for line in description_lines if line),
        "start": {"dateTime": start.isoformat(), "timeZone": "UTC"},
        "end": {"dateTime": end.isoformat(), "timeZone": "UTC"},
        "reminders": {"useDefault": True},
    }
    if task.contact_email:
        body["attendees"] = [{"email": task.contact_email}]
    if task.weight:
        body["extendedProperties"] = {"private": {"weight": task.weight}}
    return body


# =============================================================================
# Google Calendar API
# =============================================================================

def _check_response(response: httpx.Response, action: str) -> None:
    if response.status_code == 401:
        raise GmailAuthError("Google authentication failed. Please reconnect your account.")
    if response.status_code >= 400:
        raise CalendarServiceError(f"Failed to {action}: Google returned {response.status_code}")


async def list_upcoming_events(
    access_token: str,
    max_results: int = 10,
    calendar_id: str = "primary",
) -> list[CalendarEvent]:
    """Upcoming events from now, single instances, ordered by start time."""
    params = {
        "timeMin": datetime.now(timezone.utc).isoformat(),
        "showDeleted": "false",
        "singleEvents": "true",
        "maxResults": str(max_results),
        "orderBy": "startTime",
    }
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.get(
            CALENDAR_EVENTS_URL.format(calendar_id=calendar_id),
            headers={"Authorization": f"Bearer {access_token}"},
            params=params,
        )
    _check_response(response, "list events")
    return [to_calendar_event(item) for item in response.json().get("items", [])]


async def create_event(
    access_token: str,
    body: dict[str, Any],
    calendar_id: str = "primary",
) -> CalendarEvent:
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(
            CALENDAR_EVENTS_URL.format(calendar_id=calendar_id),
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            json=body,
        )
    _check_response(response, "create event")
    return to_calendar_event(response.json())


async def update_event(
    access_token: str,
    event_id: str,
    body: dict[str, Any],
    calendar_id: str = "primary",
) -> CalendarEvent:
    """Partial update (PATCH) so omitted fields are kept."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.patch(
            f"{CALENDAR_EVENTS_URL.format(calendar_id=calendar_id)}/{event_id}",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            json=body,
        )
    _check_response(response, "update event")
    return to_calendar_event(response.json())


async def delete_event(
    access_token: str,
    event_id: str,
    calendar_id: str = "primary",
) -> bool:
    """Delete an event. An already deleted event (410) counts as success."""
    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.delete(
            f"{CALENDAR_EVENTS_URL.format(calendar_id=calendar_id)}/{event_id}",
            headers={"Authorization": f"Bearer {access_token}"},
        )
    if response.status_code in (200, 204, 410):
        return True
    _check_response(response, "delete event")
    return False


async def sync_task_to_calendar(
    access_token: str, task: TaskSyncRequest
) -> CalendarEvent | None:
    """Create the task's event, or update it when `event_id` is given. None on API error."""
    body = task_to_event(task)
    try:
        if task.event_id:
            return await update_event(access_token, task.event_id, body)
        return await create_event(access_token, body)
    except (CalendarServiceError, httpx.HTTPError) as exc:
        logger.warning("Task calendar sync failed: %s", exc)
        return None
