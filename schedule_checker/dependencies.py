"""Dependency injection for FastAPI endpoints.

Provides FastAPI dependencies for the shared Redis client and EventBus
created during the application lifespan. Both are optional: endpoints that
can degrade without them receive ``None``.

Usage in controllers:
    from schedule_checker.dependencies import OptionalBus

    @router.post("/events/{event_id}/join")
    async def join_event(event_id: str, bus: OptionalBus):
        ...
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from schedule_checker import state
from schedule_checker.bus import EventBus


def get_optional_redis() -> redis.Redis | None:
    """Get the Redis client if available, or None."""
    return state.redis_client


def get_optional_event_bus() -> EventBus | None:
    """Get the EventBus if available, or None."""
    return state.event_bus


OptionalRedis = Annotated[redis.Redis | None, Depends(get_optional_redis)]
OptionalBus = Annotated[EventBus | None, Depends(get_optional_event_bus)]
