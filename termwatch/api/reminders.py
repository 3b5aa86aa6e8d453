"""
Reminder APIs.

GET    /reminders               list, filtered by status/type/priority, soonest due first
GET    /reminders/today         active reminders whose reminder date is today
GET    /reminders/{id}          one reminder, document populated
POST   /reminders               create; calendar mirror runs after the response
PUT    /reminders/{id}          partial update
PUT    /reminders/{id}/dismiss  mark dismissed (idempotent)
PUT    /reminders/{id}/snooze   mark snoozed and move the reminder date
DELETE /reminders/{id}          delete, plus best-effort calendar delete
"""

import logging
from typing import Annotated, Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from termwatch.api.dependencies import get_calendar, get_reminder_service
from termwatch.models.reminder import ReminderCreate, ReminderSnooze, ReminderUpdate
from termwatch.services.calendar_service import GoogleCalendarClient
from termwatch.services.reminder_service import ReminderService
from termwatch.workers.calendar_sync import mirror_new_reminder

logger = logging.getLogger(__name__)
router = APIRouter()

Service = Annotated[ReminderService, Depends(get_reminder_service)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")


@router.get("", response_model=list, summary="List reminders")
async def list_reminders(
    service: Service,
    status_filter: Annotated[Optional[str], Query(alias="status")] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
) -> list:
    reminders = await service.list_reminders(status=status_filter, type=type, priority=priority)
    return [r.to_response() for r in reminders]


@router.get("/today", response_model=list, summary="Reminders due for notification today")
async def list_today(service: Service) -> list:
    reminders = await service.list_today()
    return [r.to_response() for r in reminders]


@router.get("/{reminder_id}", response_model=dict, summary="Get a reminder")
async def get_reminder(reminder_id: PydanticObjectId, service: Service) -> dict:
    reminder = await service.get_reminder(reminder_id)
    if reminder is None:
        raise _not_found()
    return reminder.to_response()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=dict, summary="Create a reminder")
async def create_reminder(
    payload: ReminderCreate,
    background_tasks: BackgroundTasks,
    service: Service,
    calendar: Annotated[GoogleCalendarClient, Depends(get_calendar)],
) -> dict:
    """
    Create the reminder and answer 201 right away. The calendar copy is
    requested afterwards as a background task; its outcome never affects
    this response.
    """
    reminder = await service.create_reminder(payload)
    if calendar.configured:
        background_tasks.add_task(mirror_new_reminder, reminder.id, calendar)
    return {"message": "Reminder created successfully", "reminder": reminder.to_response()}


@router.put("/{reminder_id}", response_model=dict, summary="Update a reminder")
async def update_reminder(reminder_id: PydanticObjectId, payload: ReminderUpdate, service: Service) -> dict:
    reminder = await service.update_reminder(reminder_id, payload)
    if reminder is None:
        raise _not_found()
    return {"message": "Reminder updated successfully", "reminder": reminder.to_response()}


@router.put("/{reminder_id}/dismiss", response_model=dict, summary="Dismiss a reminder")
async def dismiss_reminder(reminder_id: PydanticObjectId, service: Service) -> dict:
    reminder = await service.dismiss_reminder(reminder_id)
    if reminder is None:
        raise _not_found()
    return {"message": "Reminder dismissed successfully", "reminder": reminder.to_response()}


@router.put("/{reminder_id}/snooze", response_model=dict, summary="Snooze a reminder")
async def snooze_reminder(reminder_id: PydanticObjectId, payload: ReminderSnooze, service: Service) -> dict:
    reminder = await service.snooze_reminder(reminder_id, payload.snooze_until)
    if reminder is None:
        raise _not_found()
    return {"message": "Reminder snoozed successfully", "reminder": reminder.to_response()}


@router.delete("/{reminder_id}", response_model=dict, summary="Delete a reminder")
async def delete_reminder(reminder_id: PydanticObjectId, service: Service) -> dict:
    if not await service.delete_reminder(reminder_id):
        raise _not_found()
    return {"message": "Reminder deleted successfully"}
