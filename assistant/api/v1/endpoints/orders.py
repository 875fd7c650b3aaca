"""Food ordering API: thin routes delegating to OrderService."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from assistant.api.v1.dependencies import get_order_service, get_user_id
from assistant.application.services import OrderService
from assistant.schemas.order import PlaceOrderRequest

router = APIRouter()


@router.get("/restaurants")
async def list_restaurants(
    _user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
    cuisine: str | None = Query(None, max_length=50),
    location: str | None = Query(None, max_length=100),
) -> dict[str, Any]:
    """Restaurants, optionally filtered by cuisine and location."""
    data = await service.list_restaurants(cuisine=cuisine, location=location)
    return {"success": True, "data": data}


@router.get("/restaurants/{restaurant_id}/menu")
async def get_menu(
    restaurant_id: str,
    _user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> dict[str, Any]:
    return {"success": True, "data": await service.get_menu(restaurant_id)}


@router.post("/place", status_code=201)
async def place_order(
    body: PlaceOrderRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> dict[str, Any]:
    """Place an order; progression to confirmed/preparing runs in the background."""
    order = await service.place_order(user_id, body)
    return {"success": True, "message": "Order placed successfully", "data": {"order": order}}


@router.get("")
async def list_orders(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
    status: str | None = Query(None, max_length=30),
    limit: int = Query(10, ge=1, le=50),
) -> dict[str, Any]:
    """The user's most recent orders, newest first."""
    return {"success": True, "data": await service.list_orders(user_id, status, limit)}


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> dict[str, Any]:
    order = await service.get_order(user_id, order_id)
    return {"success": True, "data": {"order": order}}


@router.patch("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> dict[str, Any]:
    order = await service.cancel_order(user_id, order_id)
    return {"success": True, "message": "Order cancelled successfully", "data": {"order": order}}
