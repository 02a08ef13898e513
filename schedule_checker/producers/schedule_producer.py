import logging
from datetime import datetime, timezone
from typing import Optional

from redis.exceptions import RedisError

from schedule_checker.bus import EventBus
from schedule_checker.events import (
    AvailabilityUpdatedEvent,
    ParticipantJoinedEvent,
    ParticipantRemovedEvent,
    ScheduleEvent,
)

logger = logging.getLogger("schedule_checker.producer")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_participant_joined(event_id: str, user_id: str, user_name: str) -> ParticipantJoinedEvent:
    return {
        "type": "participant_joined",
        "event_id": event_id,
        "user_id": user_id,
        "user_name": user_name,
        "timestamp": _now(),
    }


def build_availability_updated(event_id: str, user_id: str, availability: list[str]) -> AvailabilityUpdatedEvent:
    return {
        "type": "availability_updated",
        "event_id": event_id,
        "user_id": user_id,
        "unavailable_slots": len(availability),
        "timestamp": _now(),
    }


def build_participant_removed(event_id: str, user_id: str) -> ParticipantRemovedEvent:
    return {
        "type": "participant_removed",
        "event_id": event_id,
        "user_id": user_id,
        "timestamp": _now(),
    }


async def publish_schedule_event(event_bus: Optional[EventBus], event_id: str, event: ScheduleEvent) -> None:
    if event_bus is None:
        return
    # The write already succeeded; subscribers fall back to polling GET /events/{id}
    try:
        await event_bus.publish(event_id, event)
    except RedisError:
        logger.warning("Failed to publish %s for event %s", event["type"], event_id, exc_info=True)
