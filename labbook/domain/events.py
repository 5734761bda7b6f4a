"""Domain events emitted while booking rooms and managing laboratories."""

from __future__ import annotations

from pydantic import BaseModel

from labbook.domain.models import RejectionReason


class BookingCommitted(BaseModel):
    """Fired when the store has accepted a booking."""

    booking_id: int
    lab_id: int
    room_id: int


class BookingRejected(BaseModel):
    """Fired when a submission ends without a committed booking."""

    lab_id: int
    room_id: int
    user_id: int
    reason: RejectionReason
    conflicting_booking_id: int | None = None


class LaboratoryDeleted(BaseModel):
    lab_id: int


class RoomDeleted(BaseModel):
    room_id: int
