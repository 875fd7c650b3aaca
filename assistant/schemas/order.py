"""Food order request schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class RestaurantRef(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)


class OrderItem(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1, le=50)
    notes: str | None = Field(default=None, max_length=300)


class DeliveryAddress(BaseModel):
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)


class PlaceOrderRequest(BaseModel):
    """Body for POST /orders/place."""

    restaurant: RestaurantRef
    items: list[OrderItem] = Field(..., min_length=1, max_length=50)
    delivery_address: DeliveryAddress
    payment_method: Literal["card", "cash", "digital_wallet"] = "card"
    special_requests: str | None = Field(default=None, max_length=500)
    tip: float = Field(default=0.0, ge=0, le=500)
