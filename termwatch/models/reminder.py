"""
Reminder model and its API schemas.

A reminder tracks one obligation: the date it is due and the date the user
wants to be told about it. Snoozing moves reminder_date itself, so the
"today" query needs no separate wake-up logic.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, PydanticObjectId
from pydantic import Field, model_validator

from termwatch.models.common import (
    CamelModel,
    ObjectIdStr,
    RecordOut,
    Timestamp,
    drop_empty_strings,
    utcnow,
)
from termwatch.models.document import DocumentOut


class ReminderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ReminderCategory(str, Enum):
    LEGAL = "legal"
    ADMINISTRATIVE = "administrative"
    CLIENT = "client"
    COURT = "court"
    DEADLINE = "deadline"
    MEETING = "meeting"


class ReminderType(str, Enum):
    MANUAL = "manual"
    DEADLINE = "deadline"
    COURT = "court"
    FILING = "filing"
    MEETING = "meeting"


class ReminderStatus(str, Enum):
    """Any status may be set from any other; nothing guards the transitions."""

    ACTIVE = "active"
    DISMISSED = "dismissed"
    COMPLETED = "completed"
    SNOOZED = "snoozed"


# Optional fields where "" from a form means "not given"
OPTIONAL_TEXT_FIELDS = (
    "document_id",
    "assigned_to",
    "related_case",
    "contract_party_1",
    "contract_party_2",
    "extracted_context",
)


class Reminder(Document):
    """
    Stored reminder. document_id is a weak reference to a Document;
    external_event_ref is the calendar provider's id once mirrored.
    """

    title: str = Field(min_length=1)
    description: str = ""
    due_date: Timestamp
    reminder_date: Timestamp
    term_start_date: Optional[Timestamp] = None
    term_end_date: Optional[Timestamp] = None
    priority: ReminderPriority = ReminderPriority.MEDIUM
    category: ReminderCategory
    type: ReminderType = ReminderType.MANUAL
    assigned_to: Optional[str] = None
    related_case: Optional[str] = None
    contract_party_1: Optional[str] = None
    contract_party_2: Optional[str] = None
    extracted_context: Optional[str] = None
    document_id: Optional[PydanticObjectId] = None
    status: ReminderStatus = ReminderStatus.ACTIVE
    snooze_until: Optional[Timestamp] = None
    external_event_ref: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "reminders"
        use_state_management = True
        keep_nulls = False  # absent optional fields are not stored as null
        indexes = ["due_date", "reminder_date", "status", "priority", "type"]


class ReminderCreate(CamelModel):
    """POST /api/reminders body. title, dueDate, reminderDate and category are required."""

    title: str = Field(min_length=1)
    description: str = ""
    due_date: Timestamp
    reminder_date: Timestamp
    term_start_date: Optional[Timestamp] = None
    term_end_date: Optional[Timestamp] = None
    priority: ReminderPriority = ReminderPriority.MEDIUM
    category: ReminderCategory
    type: ReminderType = ReminderType.MANUAL
    assigned_to: Optional[str] = None
    related_case: Optional[str] = None
    contract_party_1: Optional[str] = None
    contract_party_2: Optional[str] = None
    extracted_context: Optional[str] = None
    document_id: Optional[ObjectIdStr] = None
    status: ReminderStatus = ReminderStatus.ACTIVE

    @model_validator(mode="before")
    @classmethod
    def strip_empty_optionals(cls, data):
        return drop_empty_strings(data, OPTIONAL_TEXT_FIELDS)


class ReminderUpdate(CamelModel):
    """PUT /api/reminders/{id} body. Only the keys actually sent are applied."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[Timestamp] = None
    reminder_date: Optional[Timestamp] = None
    term_start_date: Optional[Timestamp] = None
    term_end_date: Optional[Timestamp] = None
    priority: Optional[ReminderPriority] = None
    category: Optional[ReminderCategory] = None
    type: Optional[ReminderType] = None
    assigned_to: Optional[str] = None
    related_case: Optional[str] = None
    contract_party_1: Optional[str] = None
    contract_party_2: Optional[str] = None
    extracted_context: Optional[str] = None
    document_id: Optional[ObjectIdStr] = None
    status: Optional[ReminderStatus] = None
    snooze_until: Optional[Timestamp] = None

    @model_validator(mode="before")
    @classmethod
    def strip_empty_optionals(cls, data):
        return drop_empty_strings(data, OPTIONAL_TEXT_FIELDS)

    def changes(self) -> dict:
        """Fields the client sent, minus explicit nulls."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ReminderSnooze(CamelModel):
    snooze_until: Timestamp


class ReminderOut(RecordOut):
    """Reminder as returned by the API, with its document populated when it still exists."""

    title: str
    description: str = ""
    due_date: datetime
    reminder_date: datetime
    term_start_date: Optional[datetime] = None
    term_end_date: Optional[datetime] = None
    priority: ReminderPriority
    category: ReminderCategory
    type: ReminderType
    assigned_to: Optional[str] = None
    related_case: Optional[str] = None
    contract_party_1: Optional[str] = None
    contract_party_2: Optional[str] = None
    extracted_context: Optional[str] = None
    document_id: Optional[DocumentOut] = None
    status: ReminderStatus
    snooze_until: Optional[datetime] = None
    external_event_ref: Optional[str] = None

    @classmethod
    def from_reminder(cls, reminder: Reminder, document=None) -> "ReminderOut":
        data = reminder.model_dump(exclude={"document_id"})
        if document is not None:
            data["document_id"] = DocumentOut.from_document(document)
        return cls.model_validate(data)
