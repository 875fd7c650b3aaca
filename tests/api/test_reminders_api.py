"""API tests for the reminder endpoints."""

from datetime import timedelta

from httpx import AsyncClient

from assistant.shared.utils import utc_now
from tests.fakes import FakeRedis


async def test_reminder_crud_and_cached_listing(
    client: AsyncClient, user_headers: dict[str, str], fake_redis: FakeRedis
) -> None:
    body = {"title": "Take meds", "reminder_date": (utc_now() + timedelta(hours=3)).isoformat()}
    created = await client.post("/api/v1/reminders", json=body, headers=user_headers)
    assert created.status_code == 201
    reminder = created.json()["data"]["reminder"]
    assert reminder["is_completed"] is False

    pending = await client.get("/api/v1/reminders", params={"completed": "false"}, headers=user_headers)
    assert [r["id"] for r in pending.json()["data"]["reminders"]] == [reminder["id"]]
    assert any(k.startswith("reminders:u1:") for k in fake_redis.keys())

    done = await client.put(
        f"/api/v1/reminders/{reminder['id']}", json={"is_completed": True}, headers=user_headers
    )
    assert done.status_code == 200
    assert not any(k.startswith("reminders:u1:") for k in fake_redis.keys())
    pending = await client.get("/api/v1/reminders", params={"completed": "false"}, headers=user_headers)
    assert pending.json()["data"]["reminders"] == []

    deleted = await client.delete(f"/api/v1/reminders/{reminder['id']}", headers=user_headers)
    assert deleted.status_code == 200
    again = await client.delete(f"/api/v1/reminders/{reminder['id']}", headers=user_headers)
    assert again.status_code == 404


async def test_recurring_requires_type(client: AsyncClient, user_headers: dict[str, str]) -> None:
    body = {
        "title": "Weekly review",
        "reminder_date": (utc_now() + timedelta(days=1)).isoformat(),
        "is_recurring": True,
    }
    response = await client.post("/api/v1/reminders", json=body, headers=user_headers)
    assert response.status_code == 422
    response = await client.post(
        "/api/v1/reminders", json={**body, "recurring_type": "weekly"}, headers=user_headers
    )
    assert response.status_code == 201
