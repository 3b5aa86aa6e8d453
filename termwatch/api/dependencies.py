"""
FastAPI dependency providers.

The calendar client is built once in the app lifespan and kept on app.state;
services are cheap and built per request around it. Tests replace any of
these through app.dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends, Request

from termwatch.config import Settings, get_settings
from termwatch.services.assistant_service import AssistantService, assistant_service
from termwatch.services.calendar_service import GoogleCalendarClient
from termwatch.services.event_service import EventService
from termwatch.services.reminder_service import ReminderService


def get_calendar(request: Request) -> GoogleCalendarClient:
    calendar = getattr(request.app.state, "calendar", None)
    if calendar is None:
        # Lifespan did not run (e.g. embedded use); behave as unconfigured
        calendar = GoogleCalendarClient()
        request.app.state.calendar = calendar
    return calendar


def get_reminder_service(
    calendar: Annotated[GoogleCalendarClient, Depends(get_calendar)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReminderService:
    return ReminderService(calendar, tz_name=settings.timezone)


def get_event_service(
    calendar: Annotated[GoogleCalendarClient, Depends(get_calendar)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> EventService:
    return EventService(calendar, tz_name=settings.timezone)


def get_assistant() -> AssistantService:
    return assistant_service
