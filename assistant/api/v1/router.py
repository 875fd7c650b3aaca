"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
services from assistant.api.v1.dependencies (built once in lifespan).
"""

from fastapi import APIRouter

from assistant.api.v1.endpoints import calendar, chat, emails, health, orders, reminders, tasks
from assistant.api.v1.endpoints import websocket as ws_endpoint

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(emails.router, prefix="/emails", tags=["emails"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
api_router.include_router(reminders.router, prefix="/reminders", tags=["reminders"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(ws_endpoint.router, prefix="/ws", tags=["websocket"])
