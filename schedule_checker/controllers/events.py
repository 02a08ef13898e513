import logging
import secrets
from typing import Any, Dict, List

from fastapi import APIRouter
from pydantic import BaseModel, field_validator

from schedule_checker import db, grid
from schedule_checker.config import get_settings
from schedule_checker.dependencies import OptionalBus
from schedule_checker.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from schedule_checker.models.schedule import (
    AvailabilityResponse,
    EventView,
    IndividualResponse,
    JoinResponse,
    Participant,
    SuccessResponse,
    SummaryResponse,
)
from schedule_checker.producers.schedule_producer import (
    build_availability_updated,
    build_participant_joined,
    build_participant_removed,
    publish_schedule_event,
)

logger = logging.getLogger("schedule_checker.events")
router = APIRouter()


def _clean_name(v: str, field: str) -> str:
    v = v.strip()
    limit = get_settings().events.max_name_length
    if not v or len(v) > limit:
        raise ValueError(f"{field} must be 1-{limit} characters")
    return v


def _clean_passcode(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("passcode is required")
    return v


class CreateEventRequest(BaseModel):
    event_name: str
    user_name: str

    @field_validator("event_name")
    @classmethod
    def validate_event_name(cls, v: str) -> str:
        return _clean_name(v, "event_name")

    @field_validator("user_name")
    @classmethod
    def validate_user_name(cls, v: str) -> str:
        return _clean_name(v, "user_name")


class JoinEventRequest(BaseModel):
    user_name: str

    @field_validator("user_name")
    @classmethod
    def validate_user_name(cls, v: str) -> str:
        return _clean_name(v, "user_name")


class AdminLoginRequest(BaseModel):
    passcode: str

    @field_validator("passcode")
    @classmethod
    def validate_passcode(cls, v: str) -> str:
        return _clean_passcode(v)


class AvailabilityRequest(BaseModel):
    user_id: str
    availability: List[str]

    @field_validator("availability")
    @classmethod
    def validate_availability(cls, v: List[str]) -> List[str]:
        return grid.normalize_availability(v)


class ToggleSlotRequest(BaseModel):
    user_id: str
    slot: str

    @field_validator("slot")
    @classmethod
    def validate_slot(cls, v: str) -> str:
        grid.parse_slot_key(v)
        return v


class DeleteParticipantRequest(BaseModel):
    admin_user_id: str
    passcode: str

    @field_validator("passcode")
    @classmethod
    def validate_passcode(cls, v: str) -> str:
        return _clean_passcode(v)


async def _load_event(event_id: str) -> Dict[str, Any]:
    event = await db.get_event(event_id)
    if not event:
        logger.warning("Event not found: %s", event_id)
        raise NotFoundError(detail="Event not found", event_id=event_id)
    return event


def _require_member(event: Dict[str, Any], user_id: str) -> None:
    if not any(p["user_id"] == user_id for p in event["participants"]):
        logger.warning("User %s is not part of event %s", user_id, event["event_id"])
        raise ForbiddenError(detail="User not part of this event")


def _passcode_matches(event: Dict[str, Any], passcode: str) -> bool:
    return secrets.compare_digest(event["passcode"].encode(), passcode.encode())


@router.post("/events", status_code=201, response_model=JoinResponse)
async def create_event(req: CreateEventRequest) -> JoinResponse:
    logger.info("POST /events name=%s", req.event_name)
    event = await db.create_event(req.event_name, req.user_name)
    logger.info("Created event id=%s admin=%s", event["event_id"], event["admin"])
    return JoinResponse(
        event_id=event["event_id"],
        user_id=event["admin"],
        passcode=event["passcode"],
        is_admin=True,
    )


@router.post("/events/{event_id}/join", response_model=JoinResponse, response_model_exclude_none=True)
async def join_event(event_id: str, req: JoinEventRequest, bus: OptionalBus) -> JoinResponse:
    logger.info("POST /events/%s/join user=%s", event_id, req.user_name)
    event = await _load_event(event_id)
    participant = await db.add_participant(event, req.user_name)
    await publish_schedule_event(
        bus, event_id, build_participant_joined(event_id, participant["user_id"], participant["user_name"])
    )
    logger.info("User %s joined event %s", participant["user_id"], event_id)
    return JoinResponse(event_id=event_id, user_id=participant["user_id"], is_admin=False)


@router.post("/events/{event_id}/admin-login", response_model=JoinResponse)
async def admin_login(event_id: str, req: AdminLoginRequest) -> JoinResponse:
    logger.info("POST /events/%s/admin-login", event_id)
    event = await _load_event(event_id)
    if not _passcode_matches(event, req.passcode):
        logger.warning("Invalid passcode for event %s", event_id)
        raise UnauthorizedError(detail="Invalid passcode")
    return JoinResponse(
        event_id=event_id,
        user_id=event["admin"],
        passcode=event["passcode"],
        is_admin=True,
    )


@router.get("/events/{event_id}", response_model=EventView)
async def get_event(event_id: str) -> EventView:
    event = await _load_event(event_id)
    participants = await db.get_participants_with_schedules(event)
    logger.debug("Returning event %s with %d participants", event_id, len(participants))
    return EventView(
        event_id=event["event_id"],
        event_name=event["event_name"],
        admin=event["admin"],
        created_at=event["created_at"],
        participants=[Participant(**p) for p in participants],
    )


@router.get("/events/{event_id}/summary", response_model=SummaryResponse)
async def get_summary(event_id: str) -> SummaryResponse:
    event = await _load_event(event_id)
    participants = await db.get_participants_with_schedules(event)
    return SummaryResponse(
        event_id=event_id,
        participant_count=len(participants),
        days=list(grid.DAYS),
        cells=grid.summarize(participants),
    )


@router.get("/events/{event_id}/participants/{participant_id}", response_model=IndividualResponse)
async def get_participant(event_id: str, participant_id: str) -> IndividualResponse:
    event = await _load_event(event_id)
    participants = await db.get_participants_with_schedules(event)
    participant = next((p for p in participants if p["user_id"] == participant_id), None)
    if participant is None:
        raise NotFoundError(detail="Participant not found", participant_id=participant_id)
    return IndividualResponse(
        event_id=event_id,
        participant=Participant(**participant),
        cells=grid.individual_grid(participant),
    )


@router.post("/events/{event_id}/availability", response_model=AvailabilityResponse)
async def update_availability(event_id: str, req: AvailabilityRequest, bus: OptionalBus) -> AvailabilityResponse:
    logger.info("POST /events/%s/availability user=%s slots=%d", event_id, req.user_id, len(req.availability))
    event = await _load_event(event_id)
    _require_member(event, req.user_id)
    await db.set_schedule(event_id, req.user_id, req.availability)
    await publish_schedule_event(bus, event_id, build_availability_updated(event_id, req.user_id, req.availability))
    return AvailabilityResponse(success=True, availability=req.availability)


@router.post("/events/{event_id}/availability/toggle", response_model=AvailabilityResponse)
async def toggle_availability(event_id: str, req: ToggleSlotRequest, bus: OptionalBus) -> AvailabilityResponse:
    logger.info("POST /events/%s/availability/toggle user=%s slot=%s", event_id, req.user_id, req.slot)
    event = await _load_event(event_id)
    _require_member(event, req.user_id)
    current = await db.get_schedule(event_id, req.user_id)
    updated = grid.toggle_slot(current, req.slot)
    await db.set_schedule(event_id, req.user_id, updated)
    await publish_schedule_event(bus, event_id, build_availability_updated(event_id, req.user_id, updated))
    return AvailabilityResponse(success=True, availability=updated)


@router.delete("/events/{event_id}/participants/{participant_id}", response_model=SuccessResponse)
async def delete_participant(
    event_id: str,
    participant_id: str,
    req: DeleteParticipantRequest,
    bus: OptionalBus,
) -> SuccessResponse:
    logger.info("DELETE /events/%s/participants/%s", event_id, participant_id)
    event = await _load_event(event_id)
    if event["admin"] != req.admin_user_id or not _passcode_matches(event, req.passcode):
        logger.warning("Rejected participant delete on event %s by %s", event_id, req.admin_user_id)
        raise ForbiddenError(detail="Unauthorized: Admin privileges required")
    if participant_id == event["admin"]:
        raise BadRequestError(detail="The event admin cannot be removed")
    if not any(p["user_id"] == participant_id for p in event["participants"]):
        raise NotFoundError(detail="Participant not found", participant_id=participant_id)
    await db.remove_participant(event, participant_id)
    await publish_schedule_event(bus, event_id, build_participant_removed(event_id, participant_id))
    logger.info("Removed participant %s from event %s", participant_id, event_id)
    return SuccessResponse(success=True)
