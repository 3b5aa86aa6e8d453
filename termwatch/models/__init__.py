"""Beanie document models and Pydantic schemas."""

from termwatch.models.document import Document, DocumentCategory, DocumentOut, DocumentUpdate, ExtractedDate
from termwatch.models.event import Event, EventCreate, EventOut, EventStatus, EventType, EventUpdate
from termwatch.models.reminder import (
    Reminder,
    ReminderCategory,
    ReminderCreate,
    ReminderOut,
    ReminderPriority,
    ReminderSnooze,
    ReminderStatus,
    ReminderType,
    ReminderUpdate,
)

# Collections Beanie manages (used by init_beanie at startup and in tests)
DOCUMENT_MODELS = [Document, Event, Reminder]

__all__ = [
    "DOCUMENT_MODELS",
    "Document",
    "DocumentCategory",
    "DocumentOut",
    "DocumentUpdate",
    "ExtractedDate",
    "Event",
    "EventCreate",
    "EventOut",
    "EventStatus",
    "EventType",
    "EventUpdate",
    "Reminder",
    "ReminderCategory",
    "ReminderCreate",
    "ReminderOut",
    "ReminderPriority",
    "ReminderSnooze",
    "ReminderStatus",
    "ReminderType",
    "ReminderUpdate",
]
