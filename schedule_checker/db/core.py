"""JSON key-value helpers over the shared Redis client."""

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from schedule_checker import state
from schedule_checker.config import get_settings
from schedule_checker.errors import DatabaseError, ServiceUnavailableError

_logger = logging.getLogger(__name__)


def _get_client() -> redis.Redis:
    if state.redis_client is None:
        raise ServiceUnavailableError(detail="Redis not connected")
    return state.redis_client


def _decode(raw: str | None) -> Any:
    if raw is None:
        return None
    return json.loads(raw)


async def kv_get(key: str) -> Any:
    try:
        raw = await _get_client().get(key)
    except RedisError as e:
        _logger.exception("kv_get failed key=%s", key)
        raise DatabaseError(detail=f"Failed to read {key}") from e
    return _decode(raw)


async def kv_mget(keys: list[str]) -> list[Any]:
    if not keys:
        return []
    try:
        raws = await _get_client().mget(keys)
    except RedisError as e:
        _logger.exception("kv_mget failed keys=%d", len(keys))
        raise DatabaseError(detail="Failed to read schedules") from e
    return [_decode(r) for r in raws]


async def kv_set(key: str, value: Any, *, only_if_absent: bool = False) -> bool:
    """Store ``value`` as JSON. Returns False when ``only_if_absent`` and the key exists."""
    ttl = get_settings().events.key_ttl
    try:
        ok = await _get_client().set(key, json.dumps(value), ex=ttl, nx=only_if_absent)
    except RedisError as e:
        _logger.exception("kv_set failed key=%s", key)
        raise DatabaseError(detail=f"Failed to write {key}") from e
    return bool(ok)


async def kv_delete(key: str) -> int:
    try:
        return await _get_client().delete(key)
    except RedisError as e:
        _logger.exception("kv_delete failed key=%s", key)
        raise DatabaseError(detail=f"Failed to delete {key}") from e


__all__ = [
    "_get_client",
    "kv_delete",
    "kv_get",
    "kv_mget",
    "kv_set",
]
