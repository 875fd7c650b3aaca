"""API tests for the food ordering endpoints."""

import pytest
from httpx import AsyncClient

ORDER_BODY = {
    "restaurant": {"id": "rest_001", "name": "Pizza Palace"},
    "items": [{"name": "Margherita Pizza", "price": 14.99, "quantity": 2}],
    "delivery_address": {"street": "1 Main St", "city": "Springfield", "postal_code": "12345"},
}


async def _place(client: AsyncClient, headers: dict[str, str]) -> dict:
    response = await client.post("/api/v1/orders/place", json=ORDER_BODY, headers=headers)
    assert response.status_code == 201
    return response.json()["data"]["order"]


async def test_missing_user_header_returns_401(client: AsyncClient) -> None:
    response = await client.get("/api/v1/orders")
    assert response.status_code == 401
    assert response.json()["error"] == "HTTP_ERROR"


@pytest.mark.parametrize("user_id", ["u1:*", "u?", "u[1]"])
async def test_invalid_user_header_returns_400(client: AsyncClient, user_id: str) -> None:
    response = await client.get("/api/v1/orders", headers={"X-User-ID": user_id})
    assert response.status_code == 400


async def test_restaurants_and_menu(client: AsyncClient, user_headers: dict[str, str]) -> None:
    response = await client.get(
        "/api/v1/orders/restaurants", params={"cuisine": "Japanese"}, headers=user_headers
    )
    assert response.status_code == 200
    assert [r["name"] for r in response.json()["data"]["restaurants"]] == ["Sushi Master"]

    menu = await client.get("/api/v1/orders/restaurants/rest_003/menu", headers=user_headers)
    assert menu.json()["data"]["restaurant"] == "Sushi Master"

    missing = await client.get("/api/v1/orders/restaurants/nope/menu", headers=user_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_place_get_and_list(client: AsyncClient, user_headers: dict[str, str]) -> None:
    order = await _place(client, user_headers)
    assert order["total_amount"] == 32.38

    response = await client.get(f"/api/v1/orders/{order['id']}", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["data"]["order"]["id"] == order["id"]

    listing = await client.get("/api/v1/orders", headers=user_headers)
    data = listing.json()["data"]
    assert [o["id"] for o in data["orders"]] == [order["id"]]
    assert data["total_orders"] == 1


async def test_order_of_other_user_forbidden(client: AsyncClient, user_headers: dict[str, str]) -> None:
    order = await _place(client, user_headers)
    response = await client.get(f"/api/v1/orders/{order['id']}", headers={"X-User-ID": "u2"})
    assert response.status_code == 403
    assert response.json()["error"] == "AUTHORIZATION_ERROR"


async def test_unknown_order_404(client: AsyncClient, user_headers: dict[str, str]) -> None:
    response = await client.get("/api/v1/orders/order_missing", headers=user_headers)
    assert response.status_code == 404


async def test_cancel_twice(client: AsyncClient, user_headers: dict[str, str]) -> None:
    order = await _place(client, user_headers)
    first = await client.patch(f"/api/v1/orders/{order['id']}/cancel", headers=user_headers)
    assert first.status_code == 200
    assert first.json()["data"]["order"]["status"] == "cancelled"

    second = await client.patch(f"/api/v1/orders/{order['id']}/cancel", headers=user_headers)
    assert second.status_code == 400
    assert second.json()["error"] == "INVALID_STATE_TRANSITION"


async def test_place_order_validation(client: AsyncClient, user_headers: dict[str, str]) -> None:
    body = {**ORDER_BODY, "items": []}
    response = await client.post("/api/v1/orders/place", json=body, headers=user_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"
