"""Task service: per-user to-do items with cached, filtered listings.

Listing pages (tasks:{user}:{digest}:{page}:{limit}) live for 5 minutes
and are dropped on every task mutation.
"""

from __future__ import annotations

from typing import Any

from assistant.application.services.user_collection import EPOCH, UserCollection, paginate
from assistant.core.constants import (
    CACHE_PREFIX_TASK,
    CACHE_PREFIX_USER_TASKS,
    TASK_TTL,
    USER_TASKS_CAP,
    USER_TASKS_TTL,
)
from assistant.domain.enums import TaskStatus
from assistant.infrastructure.cache import CacheProtocol, QueryResultCache
from assistant.schemas.task import TaskCreateRequest, TaskUpdateRequest
from assistant.shared.utils import parse_iso, utc_now, utc_now_iso


def _matches(task: dict[str, Any], filters: dict[str, Any]) -> bool:
    if "status" in filters and task.get("status") != filters["status"]:
        return False
    if "priority" in filters and task.get("priority") != filters["priority"]:
        return False
    if "search" in filters:
        needle = filters["search"].lower()
        haystack = f"{task.get('title') or ''}\n{task.get('description') or ''}".lower()
        if needle not in haystack:
            return False
    return True


def _is_overdue(task: dict[str, Any]) -> bool:
    due = parse_iso(task.get("due_date"))
    return due is not None and due < utc_now() and task.get("status") != TaskStatus.COMPLETED.value


class TaskService(UserCollection):
    """Create, list, update and delete a user's tasks."""

    kind = "task"

    def __init__(self, cache: CacheProtocol, listing: QueryResultCache) -> None:
        super().__init__(
            cache,
            listing,
            prefix=CACHE_PREFIX_TASK,
            ttl=TASK_TTL,
            index_scope=CACHE_PREFIX_USER_TASKS,
            index_cap=USER_TASKS_CAP,
            index_ttl=USER_TASKS_TTL,
        )

    async def create(self, user_id: str, request: TaskCreateRequest) -> dict[str, Any]:
        fields = request.model_dump(mode="json")
        fields.update(status=TaskStatus.PENDING.value, completed_at=None)
        return await self._insert(user_id, fields)

    async def update(
        self, user_id: str, task_id: str, request: TaskUpdateRequest
    ) -> dict[str, Any]:
        """Apply the fields present in the request; completing a task stamps completed_at."""
        task = await self.get(user_id, task_id)
        changes = request.model_dump(mode="json", exclude_unset=True)
        task.update(changes)
        if "status" in changes:
            completed = changes["status"] == TaskStatus.COMPLETED.value
            task["completed_at"] = (task.get("completed_at") or utc_now_iso()) if completed else None
        return await self._replace(user_id, task)

    async def list_tasks(
        self,
        user_id: str,
        *,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """One page of tasks, newest first, with pagination and stats for the filter."""
        filters = {
            name: value
            for name, value in (("status", status), ("priority", priority), ("search", search))
            if value
        }

        async def load() -> dict[str, Any]:
            matching = [t for t in await self.all_for_user(user_id) if _matches(t, filters)]
            matching.sort(key=lambda t: parse_iso(t.get("created_at")) or EPOCH, reverse=True)
            tasks, pagination = paginate(matching, page, limit)
            return {
                "tasks": tasks,
                "pagination": pagination,
                "stats": {
                    "total": len(matching),
                    "completed": sum(1 for t in matching if t.get("status") == TaskStatus.COMPLETED.value),
                    "pending": sum(1 for t in matching if t.get("status") == TaskStatus.PENDING.value),
                    "overdue": sum(1 for t in matching if _is_overdue(t)),
                },
            }

        return await self.listing.get_or_load(user_id, filters, page, limit, load)
