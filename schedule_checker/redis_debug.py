import inspect
import logging
import time
from typing import Any

_MAX_ARG_LEN = 120


def _pool_size(client) -> dict[str, Any]:
    pool = getattr(client, "connection_pool", None)
    if not pool:
        return {}
    stats: dict[str, Any] = {"max": getattr(pool, "max_connections", None)}
    in_use = getattr(pool, "_in_use_connections", None)
    if in_use is not None:
        stats["in_use"] = len(in_use)
    return stats


def _trim(value: Any) -> Any:
    if isinstance(value, str) and len(value) > _MAX_ARG_LEN:
        return value[:_MAX_ARG_LEN] + "…"
    if isinstance(value, (list, tuple)) and len(value) > 5:
        return f"<{len(value)} items>"
    return value


class RedisDebugWrapper:
    """Logs every coroutine command with its key arguments and latency."""

    def __init__(self, inner, logger: logging.Logger):
        self._inner = inner
        self._logger = logger

    @property
    def connection_pool(self):
        return getattr(self._inner, "connection_pool", None)

    def pubsub(self, *args, **kwargs):
        self._logger.debug("redis.pubsub() pool=%s", _pool_size(self._inner))
        return self._inner.pubsub(*args, **kwargs)

    def __getattr__(self, name: str):
        attr = getattr(self._inner, name)
        if not inspect.iscoroutinefunction(attr):
            return attr

        async def _wrapped(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = await attr(*args, **kwargs)
            except Exception as e:
                self._logger.warning("redis.%s error=%r pool=%s", name, e, _pool_size(self._inner))
                raise
            dur_ms = (time.perf_counter() - start) * 1000
            self._logger.debug(
                "redis.%s args=%s dur_ms=%.1f",
                name,
                tuple(_trim(a) for a in args),
                dur_ms,
            )
            return result

        return _wrapped


def wrap_redis_client(client, logger: logging.Logger):
    return RedisDebugWrapper(client, logger)
