"""
Event bus for schedule updates, backed by Redis pub/sub.
"""
import json
from typing import Final
import redis.asyncio as redis
from schedule_checker.events import ScheduleEvent

CHANNEL_EVENT_PREFIX: Final[str] = "event_updates:"


class EventBus:
    def __init__(self, redis_client: redis.Redis):
        self.redis_client = redis_client

    @staticmethod
    def event_channel(event_id: str) -> str:
        return f"{CHANNEL_EVENT_PREFIX}{event_id}"

    async def publish(self, event_id: str, event: ScheduleEvent) -> int:
        """Publish to everyone watching ``event_id``; returns the receiver count."""
        return await self.redis_client.publish(self.event_channel(event_id), json.dumps(event))
