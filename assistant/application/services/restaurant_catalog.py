"""Static restaurant catalog used by the food ordering service.

Stands in for a delivery-partner API; OrderService caches lookups with
cached() so the read-through path is the same as it would be for a remote
catalog.
"""

from typing import Any

RESTAURANTS: tuple[dict[str, Any], ...] = (
    {
        "id": "rest_001",
        "name": "Pizza Palace",
        "cuisine": "Italian",
        "location": "downtown",
        "rating": 4.5,
        "delivery_time": "25-35 mins",
        "delivery_fee": 2.99,
        "minimum_order": 15.00,
        "popular": True,
        "categories": ["Pizza", "Pasta", "Salads"],
    },
    {
        "id": "rest_002",
        "name": "Burger Hub",
        "cuisine": "American",
        "location": "midtown",
        "rating": 4.3,
        "delivery_time": "20-30 mins",
        "delivery_fee": 1.99,
        "minimum_order": 12.00,
        "popular": True,
        "categories": ["Burgers", "Fries", "Shakes"],
    },
    {
        "id": "rest_003",
        "name": "Sushi Master",
        "cuisine": "Japanese",
        "location": "downtown",
        "rating": 4.7,
        "delivery_time": "30-40 mins",
        "delivery_fee": 3.99,
        "minimum_order": 20.00,
        "popular": False,
        "categories": ["Sushi", "Sashimi", "Miso Soup"],
    },
    {
        "id": "rest_004",
        "name": "Spice Route",
        "cuisine": "Indian",
        "location": "uptown",
        "rating": 4.6,
        "delivery_time": "35-45 mins",
        "delivery_fee": 2.99,
        "minimum_order": 18.00,
        "popular": True,
        "categories": ["Curry", "Biryani", "Naan"],
    },
)

MENUS: dict[str, dict[str, Any]] = {
    "rest_001": {
        "restaurant": "Pizza Palace",
        "categories": [
            {
                "name": "Pizzas",
                "items": [
                    {"id": "pizza_001", "name": "Margherita Pizza", "price": 14.99},
                    {"id": "pizza_002", "name": "Pepperoni Pizza", "price": 16.99},
                ],
            },
            {
                "name": "Sides",
                "items": [{"id": "side_001", "name": "Garlic Bread", "price": 5.99}],
            },
        ],
    },
    "rest_002": {
        "restaurant": "Burger Hub",
        "categories": [
            {
                "name": "Burgers",
                "items": [
                    {"id": "burger_001", "name": "Classic Burger", "price": 12.99},
                    {"id": "burger_002", "name": "Cheese Burger", "price": 14.99},
                ],
            },
            {
                "name": "Sides",
                "items": [{"id": "fries_001", "name": "Regular Fries", "price": 4.99}],
            },
        ],
    },
    "rest_003": {
        "restaurant": "Sushi Master",
        "categories": [
            {
                "name": "Rolls",
                "items": [
                    {"id": "roll_001", "name": "California Roll", "price": 8.99},
                    {"id": "roll_002", "name": "Dragon Roll", "price": 13.99},
                ],
            },
        ],
    },
    "rest_004": {
        "restaurant": "Spice Route",
        "categories": [
            {
                "name": "Curries",
                "items": [
                    {"id": "curry_001", "name": "Butter Chicken", "price": 15.99},
                    {"id": "curry_002", "name": "Chana Masala", "price": 12.99},
                ],
            },
        ],
    },
}


def find_restaurants(cuisine: str | None = None, location: str | None = None) -> list[dict[str, Any]]:
    """Filter the catalog by cuisine and location (case-insensitive)."""
    results = list(RESTAURANTS)
    if cuisine:
        results = [r for r in results if r["cuisine"].lower() == cuisine.lower()]
    if location:
        results = [r for r in results if r["location"].lower() == location.lower()]
    return results


def find_menu(restaurant_id: str) -> dict[str, Any] | None:
    return MENUS.get(restaurant_id)
