"""Structural checks on a proposed booking window."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from labbook.domain.models import RejectionReason, TimeWindow

MIN_DURATION = timedelta(minutes=30)
MAX_DURATION = timedelta(minutes=480)


class SlotValidator:
    """Decide whether a window may be booked at all, ignoring other bookings.

    Rules are applied in order and the first failure is returned:

    1. the window starts before *now*
    2. the window does not end strictly after it starts
    3. the window is shorter than ``min_duration``
    4. the window is longer than ``max_duration``

    Both bounds are inclusive, so a window of exactly ``min_duration`` or
    ``max_duration`` is accepted.
    """

    def __init__(
        self,
        min_duration: timedelta = MIN_DURATION,
        max_duration: timedelta = MAX_DURATION,
    ) -> None:
        if min_duration > max_duration:
            raise ValueError("min_duration must not exceed max_duration")
        self.min_duration = min_duration
        self.max_duration = max_duration

    def validate(self, window: TimeWindow, now: datetime) -> RejectionReason | None:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if window.start < now:
            return RejectionReason.PAST_SLOT
        if window.end <= window.start:
            return RejectionReason.NON_POSITIVE_DURATION
        if window.duration < self.min_duration:
            return RejectionReason.TOO_SHORT
        if window.duration > self.max_duration:
            return RejectionReason.TOO_LONG
        return None
