"""Pydantic schemas for Google Calendar events and task sync."""

from typing import Any

from pydantic import BaseModel, Field

from cockpit.db.enums import EventWeight


class EventTime(BaseModel):
    """Google Calendar start/end: `date_time` for timed, `date` for all-day."""

    date_time: str | None = None
    date: str | None = None
    time_zone: str | None = None


class EventAttendee(BaseModel):
    email: str
    display_name: str | None = None


class CalendarEventWrite(BaseModel):
    user_email: str = Field(..., min_length=3, max_length=320)
    summary: str | None = Field(default=None, max_length=1024)
    description: str | None = None
    start: EventTime | None = None
    end: EventTime | None = None
    location: str | None = None
    attendees: list[EventAttendee] | None = None
    weight: EventWeight | None = None

    model_config = {"use_enum_values": True}


class CalendarEvent(BaseModel):
    id: str
    summary: str | None = None
    description: str | None = None
    start: dict[str, Any] | None = None
    end: dict[str, Any] | None = None
    location: str | None = None
    html_link: str | None = None
    attendees: list[dict[str, Any]] = Field(default_factory=list)
    weight: str | None = None


class TaskSyncRequest(BaseModel):
    """A contact task to mirror as a one-hour calendar event."""

    user_email: str = Field(..., min_length=3, max_length=320)
    contact_id: str
    contact_name: str
    contact_email: str | None = None
    task_id: str
    task_text: str = Field(..., min_length=1)
    due_date: str = Field(..., min_length=10)
    notes: str | None = None
    assignees: list[str] = Field(default_factory=list)
    weight: EventWeight | None = None
    event_id: str | None = None

    model_config = {"use_enum_values": True}
