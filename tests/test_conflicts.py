"""Tests for the conflict-detection service."""

from datetime import datetime, timezone

from labbook.domain.models import (
    Booking,
    BookingCandidate,
    BookingStatus,
    TimeWindow,
)
from labbook.services.conflicts import find_conflict, find_conflicts, windows_overlap


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 6, 1, hour, minute, tzinfo=timezone.utc)


def _window(start: datetime, end: datetime) -> TimeWindow:
    return TimeWindow(start=start, end=end)


def _candidate(start: datetime, end: datetime, lab_id: int = 1, room_id: int = 1) -> BookingCandidate:
    return BookingCandidate(
        lab_id=lab_id,
        room_id=room_id,
        user_id=7,
        purpose="Candidate",
        window=_window(start, end),
    )


def _booking(
    booking_id: int,
    start: datetime,
    end: datetime,
    lab_id: int = 1,
    room_id: int = 1,
    **overrides,
) -> Booking:
    return Booking(
        id=booking_id,
        lab_id=lab_id,
        room_id=room_id,
        user_id=3,
        purpose=overrides.pop("purpose", "Existing"),
        window=_window(start, end),
        **overrides,
    )


EXISTING = [_booking(1, _at(10), _at(11))]


def test_partial_overlap_conflicts():
    """10:30-11:30 overlaps the existing 10:00-11:00."""
    witness = find_conflict(_candidate(_at(10, 30), _at(11, 30)), EXISTING)
    assert witness is not None
    assert witness.id == 1


def test_back_to_back_after_is_allowed():
    assert find_conflict(_candidate(_at(11), _at(12)), EXISTING) is None


def test_back_to_back_before_is_allowed():
    assert find_conflict(_candidate(_at(9), _at(10)), EXISTING) is None


def test_other_room_same_lab_never_conflicts():
    assert find_conflict(_candidate(_at(10, 30), _at(11, 30), room_id=2), EXISTING) is None


def test_other_lab_with_identical_window_never_conflicts():
    assert find_conflict(_candidate(_at(10), _at(11), lab_id=2), EXISTING) is None


def test_contained_and_containing_windows_conflict():
    assert find_conflict(_candidate(_at(10, 15), _at(10, 45)), EXISTING) is not None
    assert find_conflict(_candidate(_at(9), _at(12)), EXISTING) is not None


def test_identical_window_conflicts():
    assert find_conflict(_candidate(_at(10), _at(11)), EXISTING) is not None


def test_first_witness_in_given_order_is_returned():
    existing = [
        _booking(5, _at(11), _at(12)),
        _booking(4, _at(10), _at(11)),
    ]
    witness = find_conflict(_candidate(_at(10, 30), _at(11, 30)), existing)
    assert witness.id == 5
    assert [b.id for b in find_conflicts(_candidate(_at(10, 30), _at(11, 30)), existing)] == [5, 4]


def test_cancelled_booking_does_not_block():
    existing = [_booking(1, _at(10), _at(11), status=BookingStatus.CANCELLED)]
    assert find_conflict(_candidate(_at(10), _at(11)), existing) is None


def test_empty_existing_set():
    assert find_conflict(_candidate(_at(10), _at(11)), []) is None
    assert find_conflicts(_candidate(_at(10), _at(11)), []) == []


def test_overlap_is_symmetric():
    a = _window(_at(10), _at(11))
    b = _window(_at(10, 30), _at(11, 30))
    c = _window(_at(11), _at(12))
    assert windows_overlap(a, b) and windows_overlap(b, a)
    assert not windows_overlap(a, c) and not windows_overlap(c, a)


def test_overlap_is_pairwise_only():
    """a overlaps b and b overlaps c, but a and c remain free of each other."""
    a = _window(_at(9), _at(10, 30))
    b = _window(_at(10), _at(11))
    c = _window(_at(10, 30), _at(12))
    assert windows_overlap(a, b)
    assert windows_overlap(b, c)
    assert not windows_overlap(a, c)
