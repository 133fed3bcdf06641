"""Tests for Google Calendar event conversion and the calendar router."""

import pytest

from cockpit.schemas.calendar import CalendarEvent, CalendarEventWrite, TaskSyncRequest
from cockpit.services import calendar_service, google_oauth_service
from cockpit.services.calendar_service import CalendarServiceError
from cockpit.services.google_oauth_service import GmailAuthError


def _task(**overrides) -> TaskSyncRequest:
    fields = {
        "user_email": "me@mb.io",
        "contact_id": "c1",
        "contact_name": "Ada",
        "contact_email": "ada@acme.io",
        "task_id": "t1",
        "task_text": "Send NDA",
        "due_date": "2025-03-10T09:00:00Z",
    }
    fields.update(overrides)
    return TaskSyncRequest(**fields)


@pytest.fixture
def connected(monkeypatch):
    async def fake_get_access_token(db, user_email):
        return "tok"

    monkeypatch.setattr(google_oauth_service, "get_access_token", fake_get_access_token)


# =============================================================================
# Conversion
# =============================================================================

def test_weight_lifted_from_private_properties():
    event = calendar_service.to_calendar_event(
        {
            "id": "e1",
            "summary": "Board",
            "htmlLink": "https://calendar.google.com/e1",
            "start": {"dateTime": "2025-03-10T09:00:00Z"},
            "extendedProperties": {"private": {"weight": "critical"}},
        }
    )
    assert event.weight == "critical"
    assert event.html_link == "https://calendar.google.com/e1"
    assert event.attendees == []
    assert calendar_service.to_calendar_event({"id": "e2"}).weight is None


def test_build_event_body_only_includes_set_fields():
    data = CalendarEventWrite(
        user_email="me@mb.io",
        summary="Call",
        start={"date_time": "2025-03-10T09:00:00Z", "time_zone": "UTC"},
        attendees=[{"email": "ada@acme.io", "display_name": "Ada"}, {"email": "bob@acme.io"}],
        weight="high",
    )

    body = calendar_service.build_event_body(data)

    assert body == {
        "summary": "Call",
        "start": {"dateTime": "2025-03-10T09:00:00Z", "timeZone": "UTC"},
        "attendees": [{"email": "ada@acme.io", "displayName": "Ada"}, {"email": "bob@acme.io"}],
        "extendedProperties": {"private": {"weight": "high"}},
    }


def test_task_to_event_is_one_hour():
    body = calendar_service.task_to_event(_task(notes="Draft ready", assignees=["Bob", "Eve"], weight="medium"))

    assert body["summary"] == "Send NDA"
    assert body["start"] == {"dateTime": "2025-03-10T09:00:00+00:00", "timeZone": "UTC"}
    assert body["end"] == {"dateTime": "2025-03-10T10:00:00+00:00", "timeZone": "UTC"}
    assert body["description"] == (
        "Task: Send NDA\n\nNotes: Draft ready\n\nAssignees: Bob, Eve\n\nContact: Ada"
    )
    assert body["attendees"] == [{"email": "ada@acme.io"}]
    assert body["extendedProperties"] == {"private": {"weight": "medium"}}
    assert body["reminders"] == {"useDefault": True}


def test_task_without_email_has_no_attendees():
    body = calendar_service.task_to_event(_task(contact_email=None, due_date="2025-03-10T09:00:00"))
    assert "attendees" not in body
    assert body["start"]["dateTime"] == "2025-03-10T09:00:00+00:00"


@pytest.mark.asyncio
async def test_sync_updates_when_event_id_given(monkeypatch):
    calls = []

    async def fake_update(access_token, event_id, body, calendar_id="primary"):
        calls.append(event_id)
        return CalendarEvent(id=event_id, summary=body["summary"])

    monkeypatch.setattr(calendar_service, "update_event", fake_update)

    event = await calendar_service.sync_task_to_calendar("tok", _task(event_id="e9"))

    assert event.id == "e9"
    assert calls == ["e9"]


@pytest.mark.asyncio
async def test_sync_returns_none_on_api_error(monkeypatch):
    async def failing(access_token, body, calendar_id="primary"):
        raise CalendarServiceError("boom")

    monkeypatch.setattr(calendar_service, "create_event", failing)

    assert await calendar_service.sync_task_to_calendar("tok", _task()) is None


# =============================================================================
# Router
# =============================================================================

@pytest.mark.asyncio
async def test_create_event_requires_fields(authed_client, connected):
    response = await authed_client.post("/api/calendar/events", json={"user_email": "me@mb.io", "summary": "x"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_event(authed_client, connected, monkeypatch):
    sent = {}

    async def fake_create(access_token, body, calendar_id="primary"):
        sent.update(body)
        return CalendarEvent(id="e1", summary=body["summary"], weight="low")

    monkeypatch.setattr(calendar_service, "create_event", fake_create)

    response = await authed_client.post(
        "/api/calendar/events",
        json={
            "user_email": "me@mb.io",
            "summary": "Review",
            "start": {"date": "2025-03-10"},
            "end": {"date": "2025-03-11"},
            "weight": "low",
        },
    )

    assert response.status_code == 201
    assert response.json()["weight"] == "low"
    assert sent["start"] == {"date": "2025-03-10"}


@pytest.mark.asyncio
async def test_events_not_connected_is_401(authed_client, monkeypatch):
    async def not_connected(db, user_email):
        return None

    monkeypatch.setattr(google_oauth_service, "get_access_token", not_connected)

    response = await authed_client.get("/api/calendar/events", params={"userEmail": "me@mb.io"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_events_auth_failure_is_401(authed_client, connected, monkeypatch):
    async def rejected(access_token, max_results=10, calendar_id="primary"):
        raise GmailAuthError("reconnect")

    monkeypatch.setattr(calendar_service, "list_upcoming_events", rejected)

    response = await authed_client.get("/api/calendar/events", params={"userEmail": "me@mb.io"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_events_upstream_failure_is_502(authed_client, connected, monkeypatch):
    async def broken(access_token, max_results=10, calendar_id="primary"):
        raise CalendarServiceError("Google returned 500")

    monkeypatch.setattr(calendar_service, "list_upcoming_events", broken)

    response = await authed_client.get("/api/calendar/events", params={"userEmail": "me@mb.io"})
    assert response.status_code == 502


@pytest.mark.asyncio
async def test_delete_event(authed_client, connected, monkeypatch):
    deleted = []

    async def fake_delete(access_token, event_id, calendar_id="primary"):
        deleted.append(event_id)
        return True

    monkeypatch.setattr(calendar_service, "delete_event", fake_delete)

    response = await authed_client.delete("/api/calendar/events/e1", params={"userEmail": "me@mb.io"})
    assert response.status_code == 204
    assert deleted == ["e1"]


@pytest.mark.asyncio
async def test_sync_task_invalid_due_date_is_400(authed_client, connected):
    payload = _task(due_date="not-a-real-date").model_dump()
    response = await authed_client.post("/api/calendar/tasks/sync", json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_sync_task_failure_is_502(authed_client, connected, monkeypatch):
    async def failed(access_token, task):
        return None

    monkeypatch.setattr(calendar_service, "sync_task_to_calendar", failed)

    response = await authed_client.post("/api/calendar/tasks/sync", json=_task().model_dump())
    assert response.status_code == 502
