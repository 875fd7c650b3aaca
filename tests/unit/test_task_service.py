"""Tests for TaskService (storage, filters, cached listings)."""

from datetime import timedelta

import pytest

from assistant.application.services import TaskService, build_listing_caches
from assistant.domain.exceptions import ResourceNotFoundException
from assistant.infrastructure.cache import KeyValueCache
from assistant.schemas.task import TaskCreateRequest, TaskUpdateRequest
from assistant.shared.utils import utc_now, utc_now_iso
from tests.fakes import FakeRedis


@pytest.fixture
def service(cache: KeyValueCache) -> TaskService:
    return TaskService(cache, build_listing_caches(cache)["tasks"])


def _cached_pages(fake_redis: FakeRedis, user_id: str = "u1") -> list[str]:
    return [k for k in fake_redis.keys() if k.startswith(f"tasks:{user_id}:")]


async def test_create_stores_and_indexes(service: TaskService, fake_redis: FakeRedis) -> None:
    task = await service.create("u1", TaskCreateRequest(title="Buy milk", tags=[" home "]))
    assert task["id"].startswith("task_")
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["tags"] == ["home"]
    assert f"task:{task['id']}" in fake_redis.keys()
    assert await service.get("u1", task["id"]) == task


async def test_other_users_task_is_not_found(service: TaskService) -> None:
    task = await service.create("u1", TaskCreateRequest(title="Private"))
    with pytest.raises(ResourceNotFoundException):
        await service.get("u2", task["id"])


async def test_listing_is_cached_until_a_mutation(
    service: TaskService, fake_redis: FakeRedis
) -> None:
    await service.create("u1", TaskCreateRequest(title="First"))
    first = await service.list_tasks("u1")
    assert first["pagination"]["total"] == 1
    assert len(_cached_pages(fake_redis)) == 1

    # A write that bypasses the service is not seen while the page is cached
    stray = {"id": "task_stray", "user_id": "u1", "title": "Stray", "status": "pending", "created_at": utc_now_iso()}
    await service.store.save("task_stray", stray)
    await service.index.push("u1", "task_stray")
    assert (await service.list_tasks("u1"))["pagination"]["total"] == 1

    await service.create("u1", TaskCreateRequest(title="Second"))
    assert _cached_pages(fake_redis) == []
    fresh = await service.list_tasks("u1")
    assert [t["title"] for t in fresh["tasks"]] == ["Second", "Stray", "First"]


async def test_update_and_delete_invalidate(service: TaskService, fake_redis: FakeRedis) -> None:
    task = await service.create("u1", TaskCreateRequest(title="Write report"))
    await service.list_tasks("u1")

    updated = await service.update("u1", task["id"], TaskUpdateRequest(status="completed"))
    assert updated["completed_at"] is not None
    assert _cached_pages(fake_redis) == []
    assert (await service.list_tasks("u1"))["stats"]["completed"] == 1

    await service.delete("u1", task["id"])
    assert _cached_pages(fake_redis) == []
    assert (await service.list_tasks("u1"))["tasks"] == []
    with pytest.raises(ResourceNotFoundException):
        await service.delete("u1", task["id"])


async def test_reopening_clears_completed_at(service: TaskService) -> None:
    task = await service.create("u1", TaskCreateRequest(title="Call mom"))
    await service.update("u1", task["id"], TaskUpdateRequest(status="completed"))
    reopened = await service.update("u1", task["id"], TaskUpdateRequest(status="in_progress"))
    assert reopened["completed_at"] is None


async def test_invalidation_is_per_user(service: TaskService, fake_redis: FakeRedis) -> None:
    await service.list_tasks("u1")
    await service.list_tasks("u2")
    await service.create("u1", TaskCreateRequest(title="Mine"))
    assert _cached_pages(fake_redis, "u1") == []
    assert len(_cached_pages(fake_redis, "u2")) == 1


async def test_filters_search_and_pagination(service: TaskService) -> None:
    await service.create("u1", TaskCreateRequest(title="Groceries", priority="high"))
    await service.create("u1", TaskCreateRequest(title="Taxes", description="file the GROCERY receipts"))
    await service.create("u1", TaskCreateRequest(title="Gym"))

    found = await service.list_tasks("u1", search="grocer")
    assert sorted(t["title"] for t in found["tasks"]) == ["Groceries", "Taxes"]

    high = await service.list_tasks("u1", priority="high")
    assert [t["title"] for t in high["tasks"]] == ["Groceries"]

    page = await service.list_tasks("u1", page=2, limit=2)
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}
    assert [t["title"] for t in page["tasks"]] == ["Groceries"]


async def test_overdue_counts_open_tasks_past_due(service: TaskService) -> None:
    task = await service.create(
        "u1", TaskCreateRequest(title="Renew passport", due_date=utc_now() + timedelta(days=1))
    )
    stored = await service.store.load(task["id"])
    stored["due_date"] = (utc_now() - timedelta(days=1)).isoformat()
    await service.store.save(task["id"], stored)
    await service.listing.invalidate("u1")

    assert (await service.list_tasks("u1"))["stats"]["overdue"] == 1


async def test_listing_without_cache(offline_cache: KeyValueCache) -> None:
    service = TaskService(offline_cache, build_listing_caches(offline_cache)["tasks"])
    data = await service.list_tasks("u1")
    assert data["tasks"] == []
    assert data["pagination"]["pages"] == 0
