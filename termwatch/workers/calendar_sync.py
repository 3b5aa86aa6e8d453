"""
Background calendar mirroring for newly created reminders and events.

Runs as a FastAPI BackgroundTask after the create endpoint has answered 201,
so the client never waits on Google. On success the provider's event id is
written back onto the record in a second, independent write.

Nothing here can fail the create: a missing record, an unconfigured
calendar or a provider error is logged and dropped. There is no retry and no
later reconciliation, so a record whose mirror failed stays unmirrored.
"""

import logging
from typing import Optional

from beanie import PydanticObjectId

from termwatch.models.event import Event
from termwatch.models.reminder import Reminder
from termwatch.services.calendar_service import CalendarEntry, GoogleCalendarClient
from termwatch.services.sync import best_effort

logger = logging.getLogger(__name__)


async def mirror_new_reminder(reminder_id: PydanticObjectId, calendar: GoogleCalendarClient) -> Optional[str]:
    """Create the calendar copy of a reminder; returns the external id when one was stored."""
    if not calendar.configured:
        logger.debug("Calendar not configured; reminder %s not mirrored", reminder_id)
        return None
    reminder: Optional[Reminder] = await Reminder.get(reminder_id)
    if not reminder:
        logger.error("Reminder not found for calendar mirroring: %s", reminder_id)
        return None

    result = await best_effort(
        f"create reminder {reminder_id}",
        calendar.create_event,
        CalendarEntry.from_reminder(reminder),
    )
    if not result or not result.ok:
        return None

    try:
        reminder.external_event_ref = result.external_id
        await reminder.save_changes()
    except Exception:
        logger.exception("Could not store calendar event id on reminder %s", reminder_id)
        return None
    logger.info("Reminder %s mirrored as calendar event %s", reminder_id, result.external_id)
    return result.external_id


async def mirror_new_event(
    event_id: PydanticObjectId, calendar: GoogleCalendarClient, tz_name: str = "UTC"
) -> Optional[str]:
    """Same as mirror_new_reminder, for calendar events."""
    if not calendar.configured:
        logger.debug("Calendar not configured; event %s not mirrored", event_id)
        return None
    event: Optional[Event] = await Event.get(event_id)
    if not event:
        logger.error("Event not found for calendar mirroring: %s", event_id)
        return None

    result = await best_effort(
        f"create event {event_id}",
        calendar.create_event,
        CalendarEntry.from_event(event, tz_name),
    )
    if not result or not result.ok:
        return None

    try:
        event.external_event_ref = result.external_id
        await event.save_changes()
    except Exception:
        logger.exception("Could not store calendar event id on event %s", event_id)
        return None
    logger.info("Event %s mirrored as calendar event %s", event_id, result.external_id)
    return result.external_id
