"""Lifespan management for the FastAPI application.

Creates the shared Redis client and EventBus on startup and tears them
down on shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import redis.asyncio as redis
from fastapi import FastAPI
from redis.asyncio import BlockingConnectionPool as RedisConnectionPool

from schedule_checker import state
from schedule_checker.bus import EventBus
from schedule_checker.config import get_settings
from schedule_checker.redis_debug import wrap_redis_client

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    redis_client: redis.Redis | None = None
    event_bus: EventBus | None = None


async def init_redis() -> redis.Redis:
    """Initialize Redis connection with connection pool.

    Returns:
        Configured Redis client.
    """
    settings = get_settings()

    redis_pool = RedisConnectionPool(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password if settings.redis.password else None,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout_sec,
        health_check_interval=settings.redis.health_check_interval,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
        retry_on_timeout=settings.redis.retry_on_timeout,
        decode_responses=True,
    )
    redis_client = redis.Redis(connection_pool=redis_pool)

    if settings.debug.redis:
        redis_logger = logging.getLogger("schedule_checker.redis")
        redis_logger.setLevel(logging.DEBUG)
        redis_client = wrap_redis_client(redis_client, redis_logger)

    logger.info("Redis client configured for %s:%d", settings.redis.host, settings.redis.port)
    return redis_client


async def setup_resources() -> LifespanResources:
    """Set up all shared resources and publish them on ``state``."""
    resources = LifespanResources()
    resources.redis_client = await init_redis()
    resources.event_bus = EventBus(resources.redis_client)

    state.redis_client = resources.redis_client
    state.event_bus = resources.event_bus
    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    """Clean up all resources on shutdown."""
    if resources.redis_client:
        aclose = getattr(resources.redis_client, "aclose", None)
        if callable(aclose):
            await aclose()
        else:
            close = getattr(resources.redis_client, "close", None)
            if callable(close):
                await close()

    state.redis_client = None
    state.event_bus = None


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    resources = await setup_resources()
    try:
        yield
    finally:
        await cleanup_resources(resources)
