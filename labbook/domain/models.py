"""Domain models for laboratories, rooms and bookings."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

PURPOSE_MIN_LENGTH = 3


class BookingStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class RejectionReason(StrEnum):
    PAST_SLOT = "past_slot"
    NON_POSITIVE_DURATION = "non_positive_duration"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    CONFLICT = "conflict"
    PERSISTENCE_CONFLICT = "persistence_conflict"
    PERSISTENCE_FAILURE = "persistence_failure"
    CANCELLED = "cancelled"


SLOT_REJECTIONS = frozenset(
    {
        RejectionReason.PAST_SLOT,
        RejectionReason.NON_POSITIVE_DURATION,
        RejectionReason.TOO_SHORT,
        RejectionReason.TOO_LONG,
    }
)


class ActivityType(StrEnum):
    COMMITTED = "committed"
    REJECTED = "rejected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Laboratory(BaseModel):
    id: int
    name: str = Field(min_length=1)
    location: str
    capacity: int = Field(gt=0)
    description: str | None = None


class Room(BaseModel):
    id: int
    lab_id: int
    name: str = Field(min_length=1)
    capacity: int = Field(gt=0)
    description: str | None = None


class TimeWindow(BaseModel):
    """A ``[start, end)`` window. Ordering is checked by the slot validator."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


class BookingCandidate(BaseModel):
    """A proposed reservation that has not been accepted by persistence."""

    lab_id: int
    room_id: int
    user_id: int
    purpose: str
    description: str | None = None
    window: TimeWindow

    @field_validator("purpose")
    @classmethod
    def _purpose_long_enough(cls, value: str) -> str:
        value = value.strip()
        if len(value) < PURPOSE_MIN_LENGTH:
            raise ValueError(
                f"purpose must be at least {PURPOSE_MIN_LENGTH} characters"
            )
        return value


class Booking(BookingCandidate):
    id: int
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _end_after_start(self) -> Booking:
        if self.window.end <= self.window.start:
            raise ValueError("window.end must be after window.start")
        return self


class Rejection(BaseModel):
    reason: RejectionReason
    conflicting_booking: Booking | None = None
    detail: str | None = None


class SubmissionResult(BaseModel):
    booking: Booking | None = None
    rejection: Rejection | None = None

    @property
    def ok(self) -> bool:
        return self.booking is not None


class ActivityEntry(BaseModel):
    lab_id: int
    room_id: int
    timestamp: datetime = Field(default_factory=_utcnow)
    type: ActivityType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class LaboratoryCreate(BaseModel):
    name: str = Field(min_length=1)
    location: str
    capacity: int = Field(gt=0)
    description: str | None = None


class LaboratoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    location: str | None = None
    capacity: int | None = Field(default=None, gt=0)
    description: str | None = None

    @field_validator("name", "location", "capacity")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value


class LaboratoryDetail(Laboratory):
    rooms: list[Room] = Field(default_factory=list)


class RoomCreate(BaseModel):
    lab_id: int
    name: str = Field(min_length=1)
    capacity: int = Field(gt=0)
    description: str | None = None


class RoomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    capacity: int | None = Field(default=None, gt=0)
    description: str | None = None

    @field_validator("name", "capacity")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value
