"""Food ordering service: orders live only in the cache.

Each order is an ephemeral entity (order:{id}, 24h TTL) indexed by a
newest-first capped list per user (user_orders:{user}, 50 entries, 30d).
Restaurant and menu lookups are read-through cached. Order progression
(placed -> confirmed -> preparing) is simulated by one background task per
order, cancelled on shutdown.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any

from assistant.application.services.restaurant_catalog import find_menu, find_restaurants
from assistant.core.constants import (
    CACHE_PREFIX_MENU,
    CACHE_PREFIX_ORDER,
    CACHE_PREFIX_RESTAURANTS,
    CACHE_PREFIX_USER_ORDERS,
    MENU_TTL,
    ORDER_TTL,
    RESTAURANTS_TTL,
    USER_ORDERS_CAP,
    USER_ORDERS_TTL,
)
from assistant.domain.enums import OrderStatus
from assistant.domain.exceptions import (
    AuthorizationException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
)
from assistant.infrastructure.cache import EntityStore, IndexList, KeyValueCache, cached
from assistant.schemas.order import PlaceOrderRequest
from assistant.shared.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

FREE_DELIVERY_THRESHOLD = 25.0
DELIVERY_FEE = 2.99
TAX_RATE = 0.08
ESTIMATED_DELIVERY_MINUTES = 35

# Forward-only lifecycle used to reject out-of-order progression updates.
_ORDER_FLOW = (
    OrderStatus.PLACED,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)


def _money(value: float) -> float:
    return round(value + 1e-9, 2)


def _tracking_update(status: OrderStatus, message: str) -> dict[str, str]:
    return {"status": status.value, "timestamp": utc_now_iso(), "message": message}


def compute_totals(items: list[dict[str, Any]], tip: float) -> dict[str, float]:
    """Subtotal, delivery fee (free over 25), 8% tax, tip and total, 2 decimals."""
    subtotal = sum(item["price"] * item["quantity"] for item in items)
    delivery_fee = 0.0 if subtotal > FREE_DELIVERY_THRESHOLD else DELIVERY_FEE
    tax = subtotal * TAX_RATE
    total = subtotal + delivery_fee + tax + tip
    return {
        "subtotal": _money(subtotal),
        "delivery_fee": _money(delivery_fee),
        "tax": _money(tax),
        "tip": _money(tip),
        "total_amount": _money(total),
    }


class OrderService:
    """Place, list, track and cancel food orders stored in the cache."""

    def __init__(
        self,
        cache: KeyValueCache,
        *,
        confirm_delay: float = 120.0,
        prepare_delay: float = 480.0,
    ) -> None:
        """Initialize service.

        Args:
            cache: Shared KeyValueCache (also used by the cached() lookups).
            confirm_delay: Seconds after placement until "confirmed".
            prepare_delay: Seconds after placement until "preparing".
        """
        self.cache = cache
        self.orders = EntityStore(cache, CACHE_PREFIX_ORDER, ORDER_TTL)
        self.user_orders = IndexList(
            cache, CACHE_PREFIX_USER_ORDERS, USER_ORDERS_CAP, USER_ORDERS_TTL
        )
        self.confirm_delay = confirm_delay
        self.prepare_delay = prepare_delay
        self._progress_tasks: set[asyncio.Task[None]] = set()

    @cached(CACHE_PREFIX_RESTAURANTS, ttl=RESTAURANTS_TTL)
    async def list_restaurants(
        self, cuisine: str | None = None, location: str | None = None
    ) -> dict[str, Any]:
        """Restaurants matching the filters (cached 30 minutes)."""
        restaurants = find_restaurants(cuisine, location)
        return {
            "restaurants": restaurants,
            "total": len(restaurants),
            "filters": {"cuisine": cuisine, "location": location},
        }

    @cached(CACHE_PREFIX_MENU, ttl=MENU_TTL)
    async def get_menu(self, restaurant_id: str) -> dict[str, Any]:
        """Menu for a restaurant (cached 1 hour). Raises ResourceNotFoundException."""
        menu = find_menu(restaurant_id)
        if menu is None:
            raise ResourceNotFoundException("restaurant", restaurant_id)
        return menu

    async def place_order(self, user_id: str, request: PlaceOrderRequest) -> dict[str, Any]:
        """Create the order, index it for the user and schedule its progression."""
        items = [
            {**item.model_dump(), "total": _money(item.price * item.quantity)}
            for item in request.items
        ]
        order: dict[str, Any] = {
            "id": generate_id("order"),
            "user_id": user_id,
            "restaurant": request.restaurant.model_dump(),
            "items": items,
            "delivery_address": request.delivery_address.model_dump(),
            "payment_method": request.payment_method,
            "special_requests": request.special_requests,
            **compute_totals(items, request.tip),
            "status": OrderStatus.PLACED.value,
            "order_time": utc_now_iso(),
            "estimated_delivery": utc_now_iso(timedelta(minutes=ESTIMATED_DELIVERY_MINUTES)),
            "tracking_updates": [
                _tracking_update(OrderStatus.PLACED, "Order placed successfully")
            ],
        }
        await self.orders.save(order["id"], order)
        await self.user_orders.push(user_id, order["id"])
        self._schedule_progression(order["id"])
        logger.info("Food order placed: %s by user: %s", order["id"], user_id)
        return order

    def _schedule_progression(self, order_id: str) -> None:
        task = asyncio.create_task(self._run_progression(order_id))
        self._progress_tasks.add(task)
        task.add_done_callback(self._progress_tasks.discard)

    async def _run_progression(self, order_id: str) -> None:
        await asyncio.sleep(self.confirm_delay)
        await self.advance_order(
            order_id, OrderStatus.CONFIRMED, "Restaurant confirmed your order"
        )
        await asyncio.sleep(max(self.prepare_delay - self.confirm_delay, 0))
        await self.advance_order(
            order_id, OrderStatus.PREPARING, "Your order is being prepared"
        )

    async def advance_order(
        self, order_id: str, status: OrderStatus, message: str
    ) -> dict[str, Any] | None:
        """Move a stored order forward to status.

        No-op (returns None) if the order expired, was cancelled, or is
        already at or past status.
        """
        order = await self.orders.load(order_id)
        if order is None:
            logger.debug("Order %s expired before progression to %s", order_id, status.value)
            return None
        current = OrderStatus(order["status"])
        if current not in _ORDER_FLOW or _ORDER_FLOW.index(current) >= _ORDER_FLOW.index(status):
            return None
        order["status"] = status.value
        order["tracking_updates"].append(_tracking_update(status, message))
        await self.orders.save(order_id, order)
        logger.info("Order %s advanced to %s", order_id, status.value)
        return order

    async def list_orders(
        self, user_id: str, status: str | None = None, limit: int = 10
    ) -> dict[str, Any]:
        """Most recent orders (newest first), optionally filtered by status."""
        total = await self.user_orders.count(user_id)
        orders = await self.user_orders.resolve(user_id, self.orders, limit)
        if status:
            orders = [o for o in orders if o.get("status") == status]
        return {"orders": orders, "count": len(orders), "total_orders": total}

    async def get_order(self, user_id: str, order_id: str) -> dict[str, Any]:
        """Return the user's order. Raises ResourceNotFoundException / AuthorizationException."""
        order = await self.orders.load(order_id)
        if order is None:
            raise ResourceNotFoundException("order", order_id)
        if str(order.get("user_id")) != str(user_id):
            raise AuthorizationException(resource="order")
        return order

    async def cancel_order(self, user_id: str, order_id: str) -> dict[str, Any]:
        """Cancel unless out for delivery, delivered, or already cancelled."""
        order = await self.get_order(user_id, order_id)
        current = OrderStatus(order["status"])
        if current in OrderStatus.terminal():
            raise InvalidStateTransitionException(
                "order", current.value, OrderStatus.CANCELLED.value
            )
        order["status"] = OrderStatus.CANCELLED.value
        order["tracking_updates"].append(
            _tracking_update(OrderStatus.CANCELLED, "Order cancelled by customer")
        )
        await self.orders.save(order_id, order)
        logger.info("Order cancelled: %s by user: %s", order_id, user_id)
        return order

    async def shutdown(self) -> None:
        """Cancel pending progression tasks."""
        tasks = list(self._progress_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._progress_tasks.clear()
