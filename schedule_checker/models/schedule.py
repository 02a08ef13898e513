"""Pydantic response models for the schedule API."""

from pydantic import BaseModel

from schedule_checker.grid import HeatTier


class JoinResponse(BaseModel):
    """Credentials handed to a participant after creating, joining or logging in."""

    event_id: str
    user_id: str
    is_admin: bool
    passcode: str | None = None


class Participant(BaseModel):
    user_id: str
    user_name: str
    is_admin: bool = False
    availability: list[str] = []


class EventView(BaseModel):
    """Public view of an event; the admin passcode is never included."""

    event_id: str
    event_name: str
    admin: str
    created_at: str
    participants: list[Participant]


class SummaryCell(BaseModel):
    key: str
    day: int
    hour: int
    time: str
    available_count: int
    unavailable_count: int
    available_names: list[str]
    tier: HeatTier


class SummaryResponse(BaseModel):
    event_id: str
    participant_count: int
    days: list[str]
    cells: list[SummaryCell]


class IndividualCell(BaseModel):
    key: str
    day: int
    hour: int
    time: str
    unavailable: bool


class IndividualResponse(BaseModel):
    event_id: str
    participant: Participant
    cells: list[IndividualCell]


class AvailabilityResponse(BaseModel):
    success: bool
    availability: list[str]


class SuccessResponse(BaseModel):
    success: bool
