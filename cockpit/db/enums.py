"""Enum definitions for application constants."""

from enum import Enum


class Priority(str, Enum):
    """Priority ladder shared by contacts, organisations, projects and tasks."""
    LOW = "low"
    MID = "mid"
    PRIO = "prio"
    HIGH_PRIO = "high prio"


class ContactStatus(str, Enum):
    """Relationship state of a contact (separate from its priority)."""
    ONGOING = "ongoing"
    FREEZED = "freezed"


class OrganisationStatus(str, Enum):
    ONGOING = "ongoing"
    FREEZED = "freezed"
    LOST = "lost"
    ACTIVE_BUT_CEASED = "active_but_ceased"


class TaskStatus(str, Enum):
    ONGOING = "ongoing"
    DONE = "done"
    FAILED = "failed"


class ProjectType(str, Enum):
    MB_20 = "mb-2.0"
    INTERNAL = "internal"


class InvoiceType(str, Enum):
    COST = "cost"
    REVENUE = "revenue"


class TaxType(str, Enum):
    CIT = "CIT"
    VAT = "VAT"


class EntityType(str, Enum):
    """Cockpit entities that can be linked to external pages."""
    CONTACT = "contact"
    ORGANISATION = "organisation"
    PROJECT = "project"
    DOCUMENT = "document"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


class TransactionDirection(str, Enum):
    IN = "in"
    OUT = "out"


class RecurrencePattern(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONE_TIME = "one_time"


class EventWeight(str, Enum):
    """Importance marker stored in a calendar event's private properties."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class NotionParentType(str, Enum):
    DATABASE = "database"
    DATA_SOURCE = "data_source"


class GraphNodeType(str, Enum):
    CONTACT = "contact"
    ORGANISATION = "organisation"
    DOCUMENT = "document"
    CATEGORY = "category"
    TASK = "task"


class GraphLinkType(str, Enum):
    BELONGS_TO = "belongs_to"
    HAS_DOCUMENT = "has_document"
    ASSIGNED_TASK = "assigned_task"
    HAS_CATEGORY = "has_category"
