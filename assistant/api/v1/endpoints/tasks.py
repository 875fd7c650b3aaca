"""Tasks API: thin routes delegating to TaskService."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from assistant.api.v1.dependencies import get_task_service, get_user_id
from assistant.application.services import TaskService
from assistant.domain.enums import TaskPriority, TaskStatus
from assistant.schemas.task import TaskCreateRequest, TaskUpdateRequest

router = APIRouter()


@router.get("")
async def list_tasks(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[TaskService, Depends(get_task_service)],
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    search: str | None = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> dict[str, Any]:
    """The user's tasks, newest first; pages are cached for 5 minutes."""
    data = await service.list_tasks(
        user_id,
        status=status.value if status else None,
        priority=priority.value if priority else None,
        search=search,
        page=page,
        limit=limit,
    )
    return {"success": True, "data": data}


@router.post("", status_code=201)
async def create_task(
    body: TaskCreateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> dict[str, Any]:
    task = await service.create(user_id, body)
    return {"success": True, "message": "Task created successfully", "data": {"task": task}}


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> dict[str, Any]:
    return {"success": True, "data": {"task": await service.get(user_id, task_id)}}


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    body: TaskUpdateRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> dict[str, Any]:
    task = await service.update(user_id, task_id, body)
    return {"success": True, "message": "Task updated successfully", "data": {"task": task}}


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[TaskService, Depends(get_task_service)],
) -> dict[str, Any]:
    await service.delete(user_id, task_id)
    return {"success": True, "message": "Task deleted successfully"}
