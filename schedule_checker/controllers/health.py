from fastapi import APIRouter
from typing import Dict

from redis.exceptions import RedisError

from schedule_checker.dependencies import OptionalRedis

router = APIRouter()


@router.get("/health")
async def health(redis_client: OptionalRedis) -> Dict[str, str]:
    redis_status = "disconnected"
    if redis_client is not None:
        try:
            await redis_client.ping()
            redis_status = "healthy"
        except RedisError:
            redis_status = "unhealthy"

    return {"status": "ok", "redis": redis_status}
