from schedule_checker.db.core import kv_delete, kv_get, kv_mget, kv_set
from schedule_checker.db.events import (
    add_participant,
    create_event,
    event_key,
    generate_passcode,
    generate_user_id,
    get_event,
    get_participants_with_schedules,
    get_schedule,
    remove_participant,
    save_event,
    schedule_key,
    set_schedule,
)

__all__ = [
    "add_participant",
    "create_event",
    "event_key",
    "generate_passcode",
    "generate_user_id",
    "get_event",
    "get_participants_with_schedules",
    "get_schedule",
    "kv_delete",
    "kv_get",
    "kv_mget",
    "kv_set",
    "remove_participant",
    "save_event",
    "schedule_key",
    "set_schedule",
]
