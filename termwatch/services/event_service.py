"""
Calendar events: CRUD and the date-filtered listing.

The listing picks one date window by precedence: an exact day, then a
month of a year, then a whole year, otherwise no date constraint. Type and
status are plain equality filters on top.

An event's date is stored as the UTC midnight of its calendar day, so the
windows use UTC-midnight boundaries whatever TIMEZONE is. TIMEZONE only
applies when the day and the wall-clock time are combined for the calendar.
"""

import logging
from datetime import date
from typing import List, Optional

from beanie import PydanticObjectId

from termwatch.models.common import apply_changes, utcnow
from termwatch.models.event import Event, EventCreate, EventOut, EventUpdate
from termwatch.services.calendar_service import CalendarEntry, GoogleCalendarClient
from termwatch.services.dates import Window, day_window, month_window, year_window
from termwatch.services.document_service import fetch_documents, require_document
from termwatch.services.sync import best_effort

logger = logging.getLogger(__name__)


def event_date_range(
    day: Optional[date] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> Optional[Window]:
    """exact day > month+year > year > nothing. A month without a year is ignored."""
    if day is not None:
        return day_window(day)
    if month is not None and year is not None:
        return month_window(year, month)
    if year is not None:
        return year_window(year)
    return None


def build_event_filter(
    day: Optional[date] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    type: Optional[str] = None,
    status: Optional[str] = None,
) -> dict:
    query: dict = {}
    window = event_date_range(day, month, year)
    if window is not None:
        start, end = window
        query["date"] = {"$gte": start, "$lt": end}
    if type:
        query["type"] = type
    if status:
        query["status"] = status
    return query


class EventService:
    def __init__(self, calendar: GoogleCalendarClient, tz_name: str = "UTC"):
        self.calendar = calendar
        self.tz_name = tz_name

    async def _present(self, event: Event) -> EventOut:
        docs = await fetch_documents([event.document_id])
        return EventOut.from_event(event, docs.get(event.document_id))

    async def list_events(
        self,
        day: Optional[date] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[EventOut]:
        query = build_event_filter(day, month, year, type, status)
        # time is "HH:MM", so string order is chronological within a day
        events = await Event.find(query).sort(+Event.date, +Event.time).to_list()
        docs = await fetch_documents(e.document_id for e in events)
        return [EventOut.from_event(e, docs.get(e.document_id)) for e in events]

    async def get_event(self, event_id: PydanticObjectId) -> Optional[EventOut]:
        event = await Event.get(event_id)
        if event is None:
            return None
        return await self._present(event)

    async def create_event(self, data: EventCreate) -> EventOut:
        document = await require_document(data.document_id)
        event = Event(**data.model_dump(exclude_none=True))
        await event.insert()
        logger.info("Created event %s (%s on %s %s)", event.id, event.title, event.date.date(), event.time)
        return EventOut.from_event(event, document)

    async def update_event(self, event_id: PydanticObjectId, data: EventUpdate) -> Optional[EventOut]:
        event = await Event.get(event_id)
        if event is None:
            return None
        changes = data.changes()
        if "document_id" in changes:
            await require_document(changes["document_id"])

        apply_changes(event, changes)
        event.updated_at = utcnow()
        await event.save_changes()
        logger.info("Updated event %s", event.id)

        if event.external_event_ref:
            await best_effort(
                f"update event {event.id}",
                self.calendar.update_event,
                event.external_event_ref,
                CalendarEntry.from_event(event, self.tz_name),
            )
        return await self._present(event)

    async def delete_event(self, event_id: PydanticObjectId) -> bool:
        event = await Event.get(event_id)
        if event is None:
            return False
        if event.external_event_ref:
            await best_effort(
                f"delete event {event.id}",
                self.calendar.delete_event,
                event.external_event_ref,
            )
        await event.delete()
        logger.info("Deleted event %s", event_id)
        return True
