"""Orchestrates validation, conflict checking and commit of a booking."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Protocol

from labbook.domain.errors import PersistenceConflictError, PersistenceError
from labbook.domain.models import (
    Booking,
    BookingCandidate,
    Rejection,
    RejectionReason,
    SubmissionResult,
)
from labbook.services.conflicts import find_conflict
from labbook.services.slots import SlotValidator

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    def list_bookings(self, lab_id: int, room_id: int) -> list[Booking]: ...

    def create_booking(self, candidate: BookingCandidate) -> Booking: ...


def _rejected(reason: RejectionReason, **extra) -> SubmissionResult:
    return SubmissionResult(rejection=Rejection(reason=reason, **extra))


def submit_booking(
    candidate: BookingCandidate,
    store: BookingStore,
    now: datetime,
    validator: SlotValidator | None = None,
    is_cancelled: Callable[[], bool] | None = None,
) -> SubmissionResult:
    """Run a candidate through the slot rules, the conflict check and the store.

    The slot rules run first and a failure there returns before the store is
    read. The conflict check only sees the snapshot returned by
    ``store.list_bookings``; ``store.create_booking`` is the authoritative
    check and its rejection comes back as ``PERSISTENCE_CONFLICT`` or
    ``PERSISTENCE_FAILURE``. The candidate is never retried.

    *is_cancelled* is polled just before committing; when it returns True the
    candidate is discarded and nothing is persisted.
    """
    validator = validator or SlotValidator()

    reason = validator.validate(candidate.window, now)
    if reason is not None:
        return _rejected(reason)

    existing = store.list_bookings(candidate.lab_id, candidate.room_id)
    witness = find_conflict(candidate, existing)
    if witness is not None:
        return _rejected(RejectionReason.CONFLICT, conflicting_booking=witness)

    if is_cancelled is not None and is_cancelled():
        logger.debug(
            "Submission for lab %s room %s cancelled before commit",
            candidate.lab_id,
            candidate.room_id,
        )
        return _rejected(RejectionReason.CANCELLED)

    try:
        booking = store.create_booking(candidate)
    except PersistenceConflictError as exc:
        return _rejected(
            RejectionReason.PERSISTENCE_CONFLICT,
            conflicting_booking=exc.conflicting_booking,
            detail=str(exc),
        )
    except PersistenceError as exc:
        logger.warning("Booking store failed to commit candidate: %s", exc)
        return _rejected(RejectionReason.PERSISTENCE_FAILURE, detail=str(exc))

    return SubmissionResult(booking=booking)
