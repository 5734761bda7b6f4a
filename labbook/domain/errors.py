"""Exceptions raised by repositories."""

from __future__ import annotations

from labbook.domain.models import Booking


class NotFoundError(LookupError):
    pass


class PersistenceError(RuntimeError):
    """A store could not commit a booking."""


class PersistenceConflictError(PersistenceError):
    """The commit-time overlap check found a booking committed in the meantime."""

    def __init__(self, message: str, conflicting_booking: Booking | None = None) -> None:
        super().__init__(message)
        self.conflicting_booking = conflicting_booking
