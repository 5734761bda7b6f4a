"""Service for detecting overlaps between a candidate and existing bookings."""

from __future__ import annotations

from collections.abc import Iterable

from labbook.domain.models import (
    Booking,
    BookingCandidate,
    BookingStatus,
    TimeWindow,
)


def windows_overlap(a: TimeWindow, b: TimeWindow) -> bool:
    """Return True when two half-open windows share at least one instant.

    Exact boundary touches (a.end == b.start) are NOT overlaps, so
    back-to-back bookings are allowed.
    """
    return a.start < b.end and b.start < a.end


def _competing(candidate: BookingCandidate, existing: Iterable[Booking]):
    for booking in existing:
        if booking.lab_id != candidate.lab_id or booking.room_id != candidate.room_id:
            continue
        if booking.status == BookingStatus.CANCELLED:
            continue
        if windows_overlap(candidate.window, booking.window):
            yield booking


def find_conflict(
    candidate: BookingCandidate,
    existing: Iterable[Booking],
) -> Booking | None:
    """Return the first booking in *existing* that blocks the candidate.

    Only bookings of the candidate's lab and room are considered; bookings in
    other rooms never conflict, even inside the same lab.
    """
    return next(_competing(candidate, existing), None)


def find_conflicts(
    candidate: BookingCandidate,
    existing: Iterable[Booking],
) -> list[Booking]:
    """Return every booking in *existing* that blocks the candidate."""
    return list(_competing(candidate, existing))
