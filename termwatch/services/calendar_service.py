"""
Google Calendar mirroring for reminders and events.

The client is built once at startup from the service-account credentials in
settings and handed to whoever needs it (no module-level instance). When the
credentials are missing it stays unconfigured and every call returns a
skipped result without touching the network.

Calls never raise for provider trouble: HTTP, auth and I/O errors come back
as a failed CalendarSyncResult carrying the reason. Deciding what to do with
a failure (log it, move on) is the caller's job.

The googleapiclient library is blocking, so requests run in a worker thread
via asyncio.to_thread to keep the event loop free.
"""

import asyncio
import logging
from datetime import datetime, time as dt_time, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError
from pydantic import BaseModel

from termwatch.config import Settings
from termwatch.models.common import to_naive_utc
from termwatch.models.event import Event, EventType
from termwatch.models.reminder import Reminder

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

EVENT_DURATION = timedelta(hours=1)
POPUP_MINUTES = 30

# Google Calendar colorId per priority
PRIORITY_COLORS = {
    "urgent": "11",  # red
    "high": "6",  # orange
    "medium": "5",  # yellow
    "low": "2",  # green
}
DEFAULT_COLOR = "1"  # blue

PROVIDER_ERRORS = (GoogleApiError, GoogleAuthError, OSError)


class CalendarSyncResult(BaseModel):
    """Outcome of one calendar call. skipped means nothing was attempted."""

    ok: bool
    external_id: Optional[str] = None
    reason: Optional[str] = None
    skipped: bool = False

    @classmethod
    def success(cls, external_id: Optional[str] = None) -> "CalendarSyncResult":
        return cls(ok=True, external_id=external_id)

    @classmethod
    def failure(cls, reason: str) -> "CalendarSyncResult":
        return cls(ok=False, reason=reason)

    @classmethod
    def skip(cls, reason: str) -> "CalendarSyncResult":
        return cls(ok=False, reason=reason, skipped=True)


class CalendarEntry(BaseModel):
    """Reminder-shaped data the calendar understands; events are translated into it."""

    title: str
    description: str = ""
    due_date: datetime
    reminder_date: datetime
    priority: str = "medium"
    category: str = ""
    type: str = ""
    assigned_to: Optional[str] = None
    related_case: Optional[str] = None
    contract_party_1: Optional[str] = None
    contract_party_2: Optional[str] = None

    @classmethod
    def from_reminder(cls, reminder: Reminder) -> "CalendarEntry":
        return cls.model_validate(reminder.model_dump(mode="json"))

    @classmethod
    def from_event(cls, event: Event, tz_name: str = "UTC") -> "CalendarEntry":
        """Combine the event's day and wall-clock time in the configured zone into one instant."""
        wall_clock = datetime.combine(event.date.date(), dt_time.fromisoformat(event.time))
        due = to_naive_utc(wall_clock.replace(tzinfo=ZoneInfo(tz_name)))
        event_type = EventType(event.type).value
        description = event.description or (
            f"Event Type: {event_type}\nLocation: {event.location or 'N/A'}"
        )
        priority = "high" if event_type in (EventType.DEADLINE.value, EventType.COURT.value) else "medium"
        return cls(
            title=event.title,
            description=description,
            due_date=due,
            reminder_date=due,
            priority=priority,
            category=event_type,
            type=event_type,
        )


def priority_color(priority: Optional[str]) -> str:
    return PRIORITY_COLORS.get(priority or "", DEFAULT_COLOR)


def reminder_minutes(reminder_date: datetime, due_date: datetime) -> int:
    """Whole minutes between notification and due date, never negative."""
    diff = int((due_date - reminder_date).total_seconds() // 60)
    return max(diff, 0)


def format_description(entry: CalendarEntry) -> str:
    lines = [entry.description or "", ""]
    lines.append(f"Category: {entry.category}")
    lines.append(f"Priority: {entry.priority}")
    lines.append(f"Type: {entry.type}")
    if entry.assigned_to:
        lines.append(f"Assigned To: {entry.assigned_to}")
    if entry.related_case:
        lines.append(f"Related Case: {entry.related_case}")
    if entry.contract_party_1 or entry.contract_party_2:
        lines.append(f"Parties: {entry.contract_party_1 or ''} - {entry.contract_party_2 or ''}")
    return "\n".join(lines)


def _rfc3339(value: datetime) -> str:
    # Stored timestamps are naive UTC
    return to_naive_utc(value).isoformat() + "Z"


def build_event_body(entry: CalendarEntry, timezone: str = "UTC") -> dict[str, Any]:
    """Google Calendar v3 event resource for an entry: one hour starting at the due date."""
    body: dict[str, Any] = {
        "summary": f"⏰ {entry.title}",
        "description": format_description(entry),
        "start": {"dateTime": _rfc3339(entry.due_date), "timeZone": timezone},
        "end": {"dateTime": _rfc3339(entry.due_date + EVENT_DURATION), "timeZone": timezone},
        "reminders": {
            "useDefault": False,
            "overrides": [
                {"method": "email", "minutes": reminder_minutes(entry.reminder_date, entry.due_date)},
                {"method": "popup", "minutes": POPUP_MINUTES},
            ],
        },
        "colorId": priority_color(entry.priority),
    }
    if entry.type in ("court", "meeting"):
        body["location"] = entry.related_case or "TBD"
    return body


class GoogleCalendarClient:
    """
    Thin async wrapper over the Calendar v3 events resource.
    service is a googleapiclient Resource, or None when not configured.
    """

    def __init__(self, service: Any = None, calendar_id: str = "primary", timezone: str = "UTC"):
        self._service = service
        self.calendar_id = calendar_id
        self.timezone = timezone

    @property
    def configured(self) -> bool:
        return self._service is not None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleCalendarClient":
        """Build the client from service-account credentials; unconfigured if they are missing or bad."""
        if not settings.calendar_configured:
            logger.warning(
                "Google Calendar not configured. Set GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY to enable."
            )
            return cls(calendar_id=settings.google_calendar_id, timezone=settings.timezone)
        try:
            credentials = service_account.Credentials.from_service_account_info(
                {
                    "client_email": settings.google_client_email,
                    "private_key": settings.google_private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=SCOPES,
            )
            service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        except (ValueError, GoogleAuthError, GoogleApiError) as e:
            logger.error("Failed to initialize Google Calendar: %s", e)
            return cls(calendar_id=settings.google_calendar_id, timezone=settings.timezone)
        logger.info("Google Calendar API initialized (calendar=%s)", settings.google_calendar_id)
        return cls(service=service, calendar_id=settings.google_calendar_id, timezone=settings.timezone)

    async def create_event(self, entry: CalendarEntry) -> CalendarSyncResult:
        if not self.configured:
            return CalendarSyncResult.skip("calendar not configured")
        request = self._service.events().insert(
            calendarId=self.calendar_id,
            body=build_event_body(entry, self.timezone),
        )
        try:
            created = await asyncio.to_thread(request.execute)
        except PROVIDER_ERRORS as e:
            return CalendarSyncResult.failure(f"create failed: {e}")
        event_id = (created or {}).get("id")
        if not event_id:
            return CalendarSyncResult.failure("create failed: provider returned no event id")
        logger.info("Created Google Calendar event %s", event_id)
        return CalendarSyncResult.success(event_id)

    async def update_event(self, external_id: Optional[str], entry: CalendarEntry) -> CalendarSyncResult:
        if not self.configured or not external_id:
            return CalendarSyncResult.skip("calendar not configured or event not mirrored")
        request = self._service.events().update(
            calendarId=self.calendar_id,
            eventId=external_id,
            body=build_event_body(entry, self.timezone),
        )
        try:
            await asyncio.to_thread(request.execute)
        except PROVIDER_ERRORS as e:
            return CalendarSyncResult.failure(f"update of {external_id} failed: {e}")
        logger.info("Updated Google Calendar event %s", external_id)
        return CalendarSyncResult.success(external_id)

    async def delete_event(self, external_id: Optional[str]) -> CalendarSyncResult:
        if not self.configured or not external_id:
            return CalendarSyncResult.skip("calendar not configured or event not mirrored")
        request = self._service.events().delete(calendarId=self.calendar_id, eventId=external_id)
        try:
            await asyncio.to_thread(request.execute)
        except PROVIDER_ERRORS as e:
            return CalendarSyncResult.failure(f"delete of {external_id} failed: {e}")
        logger.info("Deleted Google Calendar event %s", external_id)
        return CalendarSyncResult.success(external_id)
