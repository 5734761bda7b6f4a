"""FastAPI application — entry point for the laboratory booking service."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from fastapi import Depends, FastAPI, HTTPException

from labbook.config import settings
from labbook.domain.bus import EventBus
from labbook.domain.events import (
    BookingCommitted,
    BookingRejected,
    LaboratoryDeleted,
    RoomDeleted,
)
from labbook.domain.handlers import HandlerRegistry
from labbook.domain.models import (
    SLOT_REJECTIONS,
    ActivityEntry,
    Booking,
    BookingCandidate,
    Laboratory,
    LaboratoryCreate,
    LaboratoryDetail,
    LaboratoryUpdate,
    Rejection,
    RejectionReason,
    Room,
    RoomCreate,
    RoomUpdate,
)
from labbook.repos.memory import (
    ActivityRepository,
    BookingRepository,
    LaboratoryRepository,
    RoomRepository,
    seed_demo_data,
)
from labbook.services.calendar import week_bounds
from labbook.services.slots import SlotValidator
from labbook.services.submission import submit_booking

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Laboratory Booking Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
lab_repo = LaboratoryRepository()
room_repo = RoomRepository()
booking_repo = BookingRepository()
activity_repo = ActivityRepository()
slot_validator = SlotValidator(settings.min_duration, settings.max_duration)

handler_registry = HandlerRegistry(
    bus=event_bus,
    room_repo=room_repo,
    booking_repo=booking_repo,
    activity_repo=activity_repo,
)

if settings.seed_demo_data:
    seed_demo_data(lab_repo, room_repo, booking_repo)
    logger.info("Loaded demo laboratories and bookings")


def get_now() -> datetime:
    """Clock dependency; tests override it with a fixed instant."""
    return datetime.now(timezone.utc)


def _rejection_status(reason: RejectionReason) -> int:
    if reason in SLOT_REJECTIONS:
        return 422
    if reason == RejectionReason.PERSISTENCE_FAILURE:
        return 503
    return 409


def _require_lab(lab_id: int) -> Laboratory:
    lab = lab_repo.get(lab_id)
    if lab is None:
        raise HTTPException(status_code=404, detail="Laboratory not found")
    return lab


def _require_room(room_id: int) -> Room:
    room = room_repo.get(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


def _detail(lab: Laboratory) -> LaboratoryDetail:
    return LaboratoryDetail(**lab.model_dump(), rooms=room_repo.list_for_lab(lab.id))


# ── Laboratories ──────────────────────────────────────────────────────


@app.get("/labs", response_model=list[LaboratoryDetail])
def list_labs() -> list[LaboratoryDetail]:
    """Return all laboratories with their rooms."""
    return [_detail(lab) for lab in lab_repo.list_all()]


@app.post("/labs", response_model=LaboratoryDetail, status_code=201)
def create_lab(payload: LaboratoryCreate) -> LaboratoryDetail:
    lab = lab_repo.create(**payload.model_dump())
    logger.info("Created laboratory %s (%s)", lab.id, lab.name)
    return _detail(lab)


@app.get("/labs/{lab_id}", response_model=LaboratoryDetail)
def get_lab(lab_id: int) -> LaboratoryDetail:
    return _detail(_require_lab(lab_id))


@app.put("/labs/{lab_id}", response_model=LaboratoryDetail)
def update_lab(lab_id: int, payload: LaboratoryUpdate) -> LaboratoryDetail:
    _require_lab(lab_id)
    lab = lab_repo.update(lab_id, **payload.model_dump(exclude_unset=True))
    return _detail(lab)


@app.delete("/labs/{lab_id}", status_code=204)
def delete_lab(lab_id: int) -> None:
    """Delete a laboratory together with its rooms and their bookings."""
    _require_lab(lab_id)
    lab_repo.delete(lab_id)
    event_bus.publish(LaboratoryDeleted(lab_id=lab_id))


@app.get(
    "/labs/{lab_id}/rooms/{room_id}/activity",
    response_model=list[ActivityEntry],
)
def room_activity(lab_id: int, room_id: int) -> list[ActivityEntry]:
    """Return the commit/rejection history of a room."""
    _require_lab(lab_id)
    room = _require_room(room_id)
    if room.lab_id != lab_id:
        raise HTTPException(status_code=404, detail="Room not found in laboratory")
    return activity_repo.list_for_room(lab_id, room_id)


# ── Rooms ─────────────────────────────────────────────────────────────


@app.get("/rooms", response_model=list[Room])
def list_rooms(lab_id: int | None = None) -> list[Room]:
    if lab_id is not None:
        return room_repo.list_for_lab(lab_id)
    return room_repo.list_all()


@app.post("/rooms", response_model=Room, status_code=201)
def create_room(payload: RoomCreate) -> Room:
    _require_lab(payload.lab_id)
    room = room_repo.create(**payload.model_dump())
    logger.info("Created room %s in laboratory %s", room.id, room.lab_id)
    return room


@app.get("/rooms/{room_id}", response_model=Room)
def get_room(room_id: int) -> Room:
    return _require_room(room_id)


@app.put("/rooms/{room_id}", response_model=Room)
def update_room(room_id: int, payload: RoomUpdate) -> Room:
    _require_room(room_id)
    return room_repo.update(room_id, **payload.model_dump(exclude_unset=True))


@app.delete("/rooms/{room_id}", status_code=204)
def delete_room(room_id: int) -> None:
    _require_room(room_id)
    room_repo.delete(room_id)
    event_bus.publish(RoomDeleted(room_id=room_id))


# ── Bookings ──────────────────────────────────────────────────────────


@app.get("/bookings", response_model=list[Booking])
def list_bookings(
    lab_id: int | None = None,
    room_id: int | None = None,
    week_of: date | None = None,
) -> list[Booking]:
    """Return bookings in chronological order.

    Pass *week_of* to restrict the result to the Monday-based calendar week
    containing that date.
    """
    start = end = None
    if week_of is not None:
        start, end = week_bounds(week_of)
    return booking_repo.list_all(lab_id=lab_id, room_id=room_id, start=start, end=end)


@app.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: int) -> Booking:
    booking = booking_repo.get(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@app.post("/bookings", response_model=Booking, status_code=201)
def create_booking(
    candidate: BookingCandidate,
    now: datetime = Depends(get_now),
) -> Booking:
    """Validate a candidate booking and commit it if the room is free."""
    _require_lab(candidate.lab_id)
    room = _require_room(candidate.room_id)
    if room.lab_id != candidate.lab_id:
        raise HTTPException(status_code=404, detail="Room not found in laboratory")

    result = submit_booking(candidate, booking_repo, now, validator=slot_validator)

    if result.rejection is not None:
        rejection: Rejection = result.rejection
        witness = rejection.conflicting_booking
        event_bus.publish(
            BookingRejected(
                lab_id=candidate.lab_id,
                room_id=candidate.room_id,
                user_id=candidate.user_id,
                reason=rejection.reason,
                conflicting_booking_id=witness.id if witness else None,
            )
        )
        raise HTTPException(
            status_code=_rejection_status(rejection.reason),
            detail=rejection.model_dump(mode="json"),
        )

    booking = result.booking
    event_bus.publish(
        BookingCommitted(
            booking_id=booking.id, lab_id=booking.lab_id, room_id=booking.room_id
        )
    )
    return booking
