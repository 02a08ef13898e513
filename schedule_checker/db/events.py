import secrets
import string
from datetime import UTC, datetime
from typing import Any

from schedule_checker.config import get_settings
from schedule_checker.db.core import kv_delete, kv_get, kv_mget, kv_set

_ID_CHARS = string.ascii_lowercase + string.digits
_PASSCODE_CHARS = string.ascii_uppercase + string.digits


def _generate_id(length: int) -> str:
    return "".join(secrets.choice(_ID_CHARS) for _ in range(length))


def generate_user_id() -> str:
    return _generate_id(get_settings().events.user_id_length)


def generate_passcode() -> str:
    length = get_settings().events.passcode_length
    return "".join(secrets.choice(_PASSCODE_CHARS) for _ in range(length))


def event_key(event_id: str) -> str:
    return f"event_{event_id}"


def schedule_key(event_id: str, user_id: str) -> str:
    return f"schedule_{event_id}_{user_id}"


async def create_event(event_name: str, user_name: str) -> dict[str, Any]:
    """Create an event whose creator is its admin and first participant."""
    settings = get_settings().events
    user_id = generate_user_id()
    now = datetime.now(UTC)
    for _ in range(10):
        event_id = _generate_id(settings.id_length)
        event = {
            "event_id": event_id,
            "event_name": event_name,
            "admin": user_id,
            "passcode": generate_passcode(),
            "participants": [{"user_id": user_id, "user_name": user_name}],
            "created_at": now.isoformat(),
        }
        if await kv_set(event_key(event_id), event, only_if_absent=True):
            await kv_set(schedule_key(event_id, user_id), {"availability": []})
            return event
    raise RuntimeError("Failed to generate unique event ID")


async def get_event(event_id: str) -> dict[str, Any] | None:
    return await kv_get(event_key(event_id))


async def save_event(event: dict[str, Any]) -> None:
    await kv_set(event_key(event["event_id"]), event)


async def add_participant(event: dict[str, Any], user_name: str) -> dict[str, str]:
    participant = {"user_id": generate_user_id(), "user_name": user_name}
    event["participants"].append(participant)
    await save_event(event)
    await kv_set(schedule_key(event["event_id"], participant["user_id"]), {"availability": []})
    return participant


async def remove_participant(event: dict[str, Any], user_id: str) -> None:
    event["participants"] = [p for p in event["participants"] if p["user_id"] != user_id]
    await save_event(event)
    await kv_delete(schedule_key(event["event_id"], user_id))


async def get_schedule(event_id: str, user_id: str) -> list[str]:
    schedule = await kv_get(schedule_key(event_id, user_id))
    return (schedule or {}).get("availability", [])


async def set_schedule(event_id: str, user_id: str, availability: list[str]) -> None:
    await kv_set(schedule_key(event_id, user_id), {"availability": availability})


async def get_participants_with_schedules(event: dict[str, Any]) -> list[dict[str, Any]]:
    """Attach each participant's stored availability, fetched in a single MGET."""
    event_id = event["event_id"]
    keys = [schedule_key(event_id, p["user_id"]) for p in event["participants"]]
    schedules = await kv_mget(keys)
    return [
        {
            **p,
            "is_admin": p["user_id"] == event["admin"],
            "availability": (s or {}).get("availability", []),
        }
        for p, s in zip(event["participants"], schedules)
    ]
