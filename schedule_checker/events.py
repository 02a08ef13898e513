from typing import Literal, TypedDict, Union


class ParticipantJoinedEvent(TypedDict):
    type: Literal["participant_joined"]
    event_id: str
    user_id: str
    user_name: str
    timestamp: str


class AvailabilityUpdatedEvent(TypedDict):
    type: Literal["availability_updated"]
    event_id: str
    user_id: str
    unavailable_slots: int
    timestamp: str


class ParticipantRemovedEvent(TypedDict):
    type: Literal["participant_removed"]
    event_id: str
    user_id: str
    timestamp: str


class PingEvent(TypedDict):
    type: Literal["ping"]


# Discriminated union of everything a websocket subscriber may receive
ScheduleEvent = Union[
    ParticipantJoinedEvent,
    AvailabilityUpdatedEvent,
    ParticipantRemovedEvent,
    PingEvent,
]
