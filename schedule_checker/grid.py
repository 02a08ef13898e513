"""Weekly availability grid.

Participants mark the hours they are *not* available on a fixed
Monday..Sunday x 00:00..23:00 grid. Each cell is addressed by a slot key
``"<day>-<hour>"`` where ``day`` is 0 (Monday) through 6 (Sunday).

The aggregate view reports, per cell, who is still available and buckets
the available ratio into one of four heat tiers.
"""

import re
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
HOURS: tuple[int, ...] = tuple(range(24))

# ASCII only, no leading zeros: "3-07" and non-Latin digits are not keys
SLOT_RE = re.compile(r"([0-6])-(1?[0-9]|2[0-3])")


class HeatTier(str, Enum):
    NONE_AVAILABLE = "none_available"
    MOST_UNAVAILABLE = "most_unavailable"
    MOST_AVAILABLE = "most_available"
    ALL_AVAILABLE = "all_available"


def slot_key(day: int, hour: int) -> str:
    if not 0 <= day < len(DAYS):
        raise ValueError(f"day out of range: {day}")
    if not 0 <= hour < len(HOURS):
        raise ValueError(f"hour out of range: {hour}")
    return f"{day}-{hour}"


def parse_slot_key(key: str) -> tuple[int, int]:
    """Split a slot key into ``(day, hour)``, rejecting anything off the grid."""
    m = SLOT_RE.fullmatch(key)
    if not m:
        raise ValueError(f"invalid slot key: {key!r}")
    return int(m.group(1)), int(m.group(2))


def all_slot_keys() -> list[str]:
    return [slot_key(d, h) for d in range(len(DAYS)) for h in HOURS]


def format_hour(hour: int) -> str:
    return f"{hour:02d}:00"


def normalize_availability(keys: Iterable[str]) -> list[str]:
    """Validate slot keys and drop duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for key in keys:
        parse_slot_key(key)
        seen.setdefault(key, None)
    return list(seen)


def toggle_slot(availability: Sequence[str], key: str) -> list[str]:
    parse_slot_key(key)
    if key in availability:
        return [k for k in availability if k != key]
    return [*availability, key]


def available_participants(
    participants: Sequence[Mapping[str, Any]], key: str
) -> list[Mapping[str, Any]]:
    return [p for p in participants if key not in p.get("availability", ())]


def heat_tier(available: int, total: int) -> HeatTier:
    """Bucket the share of available participants into a heat tier.

    An event with no participants has nobody blocking any slot, so every
    cell reads as fully available.
    """
    if total <= 0:
        return HeatTier.ALL_AVAILABLE
    ratio = available / total
    if ratio == 0:
        return HeatTier.NONE_AVAILABLE
    if ratio < 0.5:
        return HeatTier.MOST_UNAVAILABLE
    if ratio < 1:
        return HeatTier.MOST_AVAILABLE
    return HeatTier.ALL_AVAILABLE


def summarize(participants: Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Aggregate every participant's unavailability over the full grid."""
    total = len(participants)
    busy = [set(p.get("availability", ())) for p in participants]
    cells: list[dict[str, Any]] = []
    for key in all_slot_keys():
        day, hour = parse_slot_key(key)
        names = [p["user_name"] for p, b in zip(participants, busy) if key not in b]
        available = len(names)
        cells.append(
            {
                "key": key,
                "day": day,
                "hour": hour,
                "time": format_hour(hour),
                "available_count": available,
                "unavailable_count": total - available,
                "available_names": names,
                "tier": heat_tier(available, total),
            }
        )
    return cells


def individual_grid(participant: Mapping[str, Any]) -> list[dict[str, Any]]:
    busy = set(participant.get("availability", ()))
    cells = []
    for key in all_slot_keys():
        day, hour = parse_slot_key(key)
        cells.append({"key": key, "day": day, "hour": hour, "time": format_hour(hour), "unavailable": key in busy})
    return cells
