"""
Reminder lifecycle: CRUD, dismiss/snooze, filtered listing and the today view.

Status is deliberately permissive: update may set any status from any other,
dismiss works on anything (including already dismissed or completed
reminders), and snooze simply moves reminder_date forward so the today query
picks the reminder up again on the snoozed day.

Calendar mirroring is best-effort. Creation is mirrored later by a background
task (see termwatch.workers.calendar_sync); updates and deletes talk to the
calendar inline, but a failure there is only logged and the local write stands.
"""

import logging
from datetime import datetime
from typing import List, Optional

from beanie import PydanticObjectId

from termwatch.models.common import apply_changes, utcnow
from termwatch.models.reminder import (
    Reminder,
    ReminderCreate,
    ReminderOut,
    ReminderStatus,
    ReminderUpdate,
)
from termwatch.services.calendar_service import CalendarEntry, GoogleCalendarClient
from termwatch.services.dates import today_window
from termwatch.services.document_service import fetch_documents, require_document
from termwatch.services.sync import best_effort

logger = logging.getLogger(__name__)

FILTER_FIELDS = ("status", "type", "priority")


def build_reminder_filter(
    status: Optional[str] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
) -> dict:
    """Equality on each given field; missing, empty or "all" leaves the field unconstrained."""
    query: dict = {}
    for field, value in zip(FILTER_FIELDS, (status, type, priority)):
        if value and value != "all":
            query[field] = value
    return query


def build_today_filter(tz_name: str = "UTC", now: Optional[datetime] = None) -> dict:
    start, end = today_window(tz_name, now)
    return {
        "reminder_date": {"$gte": start, "$lt": end},
        "status": ReminderStatus.ACTIVE.value,
    }


class ReminderService:
    """Reminder operations; the calendar client is injected so tests can swap it."""

    def __init__(self, calendar: GoogleCalendarClient, tz_name: str = "UTC"):
        self.calendar = calendar
        self.tz_name = tz_name

    async def _present(self, reminder: Reminder) -> ReminderOut:
        docs = await fetch_documents([reminder.document_id])
        return ReminderOut.from_reminder(reminder, docs.get(reminder.document_id))

    async def _present_all(self, reminders: List[Reminder]) -> List[ReminderOut]:
        docs = await fetch_documents(r.document_id for r in reminders)
        return [ReminderOut.from_reminder(r, docs.get(r.document_id)) for r in reminders]

    async def list_reminders(
        self,
        status: Optional[str] = None,
        type: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[ReminderOut]:
        query = build_reminder_filter(status, type, priority)
        reminders = await Reminder.find(query).sort(+Reminder.due_date).to_list()
        return await self._present_all(reminders)

    async def list_today(self, now: Optional[datetime] = None) -> List[ReminderOut]:
        """Active reminders whose reminder_date falls on the current local day."""
        query = build_today_filter(self.tz_name, now)
        reminders = await Reminder.find(query).sort(+Reminder.reminder_date).to_list()
        return await self._present_all(reminders)

    async def get_reminder(self, reminder_id: PydanticObjectId) -> Optional[ReminderOut]:
        reminder = await Reminder.get(reminder_id)
        if reminder is None:
            return None
        return await self._present(reminder)

    async def create_reminder(self, data: ReminderCreate) -> ReminderOut:
        """Persist a new reminder. Mirroring to the calendar is the caller's background job."""
        document = await require_document(data.document_id)
        reminder = Reminder(**data.model_dump(exclude_none=True))
        await reminder.insert()
        logger.info("Created reminder %s (%s)", reminder.id, reminder.title)
        return ReminderOut.from_reminder(reminder, document)

    async def update_reminder(
        self, reminder_id: PydanticObjectId, data: ReminderUpdate
    ) -> Optional[ReminderOut]:
        reminder = await Reminder.get(reminder_id)
        if reminder is None:
            return None
        changes = data.changes()
        if "document_id" in changes:
            await require_document(changes["document_id"])

        apply_changes(reminder, changes)
        reminder.updated_at = utcnow()
        await reminder.save_changes()
        logger.info("Updated reminder %s (%s)", reminder.id, ", ".join(sorted(changes)) or "no fields")

        if reminder.external_event_ref:
            await best_effort(
                f"update reminder {reminder.id}",
                self.calendar.update_event,
                reminder.external_event_ref,
                CalendarEntry.from_reminder(reminder),
            )
        return await self._present(reminder)

    async def dismiss_reminder(self, reminder_id: PydanticObjectId) -> Optional[ReminderOut]:
        """Set status to dismissed whatever it was before; repeating it is harmless."""
        reminder = await Reminder.get(reminder_id)
        if reminder is None:
            return None
        reminder.status = ReminderStatus.DISMISSED
        reminder.updated_at = utcnow()
        await reminder.save_changes()
        logger.info("Dismissed reminder %s", reminder.id)
        return await self._present(reminder)

    async def snooze_reminder(
        self, reminder_id: PydanticObjectId, snooze_until: datetime
    ) -> Optional[ReminderOut]:
        """Mark snoozed and move reminder_date to snooze_until in the same write."""
        reminder = await Reminder.get(reminder_id)
        if reminder is None:
            return None
        reminder.status = ReminderStatus.SNOOZED
        reminder.snooze_until = snooze_until
        reminder.reminder_date = snooze_until
        reminder.updated_at = utcnow()
        await reminder.save_changes()
        logger.info("Snoozed reminder %s until %s", reminder.id, snooze_until.isoformat())
        return await self._present(reminder)

    async def delete_reminder(self, reminder_id: PydanticObjectId) -> bool:
        reminder = await Reminder.get(reminder_id)
        if reminder is None:
            return False
        if reminder.external_event_ref:
            await best_effort(
                f"delete reminder {reminder.id}",
                self.calendar.delete_event,
                reminder.external_event_ref,
            )
        await reminder.delete()
        logger.info("Deleted reminder %s", reminder_id)
        return True
