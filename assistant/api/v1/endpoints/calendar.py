"""Calendar events API."""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from assistant.api.v1.dependencies import get_calendar_service, get_user_id
from assistant.application.services import CalendarService
from assistant.domain.enums import EventCategory, EventStatus
from assistant.schemas.calendar import EventCreateRequest, EventUpdateRequest

router = APIRouter()


@router.get("/events")
async def list_events(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[CalendarService, Depends(get_calendar_service)],
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    category: EventCategory | None = None,
    status: EventStatus | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
) -> dict[str, Any]:
    """Events in a start-date window plus the week's upcoming events (cached 10 minutes)."""
    data = await service.list_events(
        user_id,
        start_date=start_date,
        end_date=end_date,
        category=category.value if category else None,
        status=status.value if status else None,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


@router.post("/events", status_code=201)
async def create_event(
    body: EventCreateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[CalendarService, Depends(get_calendar_service)],
) -> dict[str, Any]:
    event = await service.create(user_id, body)
    return {"success": True, "message": "Event created successfully", "data": {"event": event}}


@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[CalendarService, Depends(get_calendar_service)],
) -> dict[str, Any]:
    return {"success": True, "data": {"event": await service.get(user_id, event_id)}}


@router.put("/events/{event_id}")
async def update_event(
    event_id: str,
    body: EventUpdateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[CalendarService, Depends(get_calendar_service)],
) -> dict[str, Any]:
    event = await service.update(user_id, event_id, body)
    return {"success": True, "message": "Event updated successfully", "data": {"event": event}}


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[CalendarService, Depends(get_calendar_service)],
) -> dict[str, Any]:
    await service.delete(user_id, event_id)
    return {"success": True, "message": "Event deleted successfully"}
