"""Reminders API."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from assistant.api.v1.dependencies import get_reminder_service, get_user_id
from assistant.application.services import ReminderService
from assistant.schemas.reminder import ReminderCreateRequest, ReminderUpdateRequest

router = APIRouter()


@router.get("")
async def list_reminders(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ReminderService, Depends(get_reminder_service)],
    completed: bool | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> dict[str, Any]:
    data = await service.list_reminders(user_id, completed=completed, page=page, limit=limit)
    return {"success": True, "data": data}


@router.post("", status_code=201)
async def create_reminder(
    body: ReminderCreateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ReminderService, Depends(get_reminder_service)],
) -> dict[str, Any]:
    reminder = await service.create(user_id, body)
    return {
        "success": True,
        "message": "Reminder created successfully",
        "data": {"reminder": reminder},
    }


@router.get("/{reminder_id}")
async def get_reminder(
    reminder_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ReminderService, Depends(get_reminder_service)],
) -> dict[str, Any]:
    return {"success": True, "data": {"reminder": await service.get(user_id, reminder_id)}}


@router.put("/{reminder_id}")
async def update_reminder(
    reminder_id: str,
    body: ReminderUpdateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ReminderService, Depends(get_reminder_service)],
) -> dict[str, Any]:
    reminder = await service.update(user_id, reminder_id, body)
    return {
        "success": True,
        "message": "Reminder updated successfully",
        "data": {"reminder": reminder},
    }


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[ReminderService, Depends(get_reminder_service)],
) -> dict[str, Any]:
    await service.delete(user_id, reminder_id)
    return {"success": True, "message": "Reminder deleted successfully"}
