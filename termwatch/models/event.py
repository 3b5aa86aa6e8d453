"""
Calendar Event model and its API schemas.

date and time are separate fields: date carries the day, time is an "HH:MM"
24-hour string. Listing sorts by (date, time), so time must stay zero-padded
for same-day ordering to be chronological.
"""

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional

from beanie import Document, PydanticObjectId
from pydantic import Field, field_validator, model_validator

from termwatch.models.common import (
    CamelModel,
    ObjectIdStr,
    RecordOut,
    Timestamp,
    drop_empty_strings,
    utcnow,
)
from termwatch.models.document import DocumentOut

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class EventType(str, Enum):
    MEETING = "meeting"
    DEADLINE = "deadline"
    COURT = "court"
    CONSULTATION = "consultation"
    REMINDER = "reminder"


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def check_time_of_day(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not TIME_PATTERN.match(value):
        raise ValueError("time must be HH:MM in 24-hour format")
    return value


class Event(Document):
    title: str = Field(min_length=1)
    description: str = ""
    date: Timestamp
    time: str
    type: EventType = EventType.MEETING
    document_id: Optional[PydanticObjectId] = None
    location: str = ""
    attendees: List[str] = Field(default_factory=list)
    status: EventStatus = EventStatus.SCHEDULED
    external_event_ref: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time_of_day(v)

    class Settings:
        name = "events"
        use_state_management = True
        keep_nulls = False
        indexes = ["date", "type", "status"]


class EventCreate(CamelModel):
    title: str = Field(min_length=1)
    description: str = ""
    date: Timestamp
    time: str
    type: EventType = EventType.MEETING
    document_id: Optional[ObjectIdStr] = None
    location: str = ""
    attendees: List[str] = Field(default_factory=list)
    status: EventStatus = EventStatus.SCHEDULED

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time_of_day(v)

    @model_validator(mode="before")
    @classmethod
    def strip_empty_document(cls, data):
        return drop_empty_strings(data, ("document_id",))


class EventUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[Timestamp] = None
    time: Optional[str] = None
    type: Optional[EventType] = None
    document_id: Optional[ObjectIdStr] = None
    location: Optional[str] = None
    attendees: Optional[List[str]] = None
    status: Optional[EventStatus] = None

    @field_validator("time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time_of_day(v)

    @model_validator(mode="before")
    @classmethod
    def strip_empty_document(cls, data):
        return drop_empty_strings(data, ("document_id",))

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class EventOut(RecordOut):
    title: str
    description: str = ""
    date: datetime
    time: str
    type: EventType
    document_id: Optional[DocumentOut] = None
    location: str = ""
    attendees: List[str] = Field(default_factory=list)
    status: EventStatus
    external_event_ref: Optional[str] = None

    @classmethod
    def from_event(cls, event: Event, document=None) -> "EventOut":
        data = event.model_dump(exclude={"document_id"})
        if document is not None:
            data["document_id"] = DocumentOut.from_document(document)
        return cls.model_validate(data)
