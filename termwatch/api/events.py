"""
Calendar event APIs.

GET /events accepts one of: date=YYYY-MM-DD, month+year, or year alone
(in that order of precedence), plus type and status equality filters.
"""

import logging
from datetime import date
from typing import Annotated, Optional

from beanie import PydanticObjectId
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from termwatch.api.dependencies import get_calendar, get_event_service
from termwatch.models.event import EventCreate, EventUpdate
from termwatch.services.calendar_service import GoogleCalendarClient
from termwatch.services.event_service import EventService
from termwatch.workers.calendar_sync import mirror_new_event

logger = logging.getLogger(__name__)
router = APIRouter()

Service = Annotated[EventService, Depends(get_event_service)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")


@router.get("", response_model=list, summary="List events")
async def list_events(
    service: Service,
    day: Annotated[Optional[date], Query(alias="date")] = None,
    month: Annotated[Optional[int], Query(ge=1, le=12)] = None,
    year: Annotated[Optional[int], Query(ge=2000)] = None,
    type: Optional[str] = None,
    status_filter: Annotated[Optional[str], Query(alias="status")] = None,
) -> list:
    events = await service.list_events(day=day, month=month, year=year, type=type, status=status_filter)
    return [e.to_response() for e in events]


@router.get("/{event_id}", response_model=dict, summary="Get an event")
async def get_event(event_id: PydanticObjectId, service: Service) -> dict:
    event = await service.get_event(event_id)
    if event is None:
        raise _not_found()
    return event.to_response()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=dict, summary="Create an event")
async def create_event(
    payload: EventCreate,
    background_tasks: BackgroundTasks,
    service: Service,
    calendar: Annotated[GoogleCalendarClient, Depends(get_calendar)],
) -> dict:
    event = await service.create_event(payload)
    if calendar.configured:
        background_tasks.add_task(mirror_new_event, event.id, calendar, service.tz_name)
    return {"message": "Event created successfully", "event": event.to_response()}


@router.put("/{event_id}", response_model=dict, summary="Update an event")
async def update_event(event_id: PydanticObjectId, payload: EventUpdate, service: Service) -> dict:
    event = await service.update_event(event_id, payload)
    if event is None:
        raise _not_found()
    return {"message": "Event updated successfully", "event": event.to_response()}


@router.delete("/{event_id}", response_model=dict, summary="Delete an event")
async def delete_event(event_id: PydanticObjectId, service: Service) -> dict:
    if not await service.delete_event(event_id):
        raise _not_found()
    return {"message": "Event deleted successfully"}
