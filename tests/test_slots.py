"""Tests for the slot validator."""

from datetime import datetime, timedelta, timezone

import pytest

from labbook.domain.models import RejectionReason, TimeWindow
from labbook.services.slots import SlotValidator

_NOW = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)


def _window(start: datetime, minutes: int) -> TimeWindow:
    return TimeWindow(start=start, end=start + timedelta(minutes=minutes))


@pytest.fixture()
def validator() -> SlotValidator:
    return SlotValidator()


def test_valid_window_passes(validator):
    window = _window(datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), 60)
    assert validator.validate(window, _NOW) is None


def test_past_slot(validator):
    """A window at 08:00-08:30 seen at 09:00 has already started."""
    window = TimeWindow(
        start=datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc),
        end=datetime(2024, 6, 1, 8, 30, tzinfo=timezone.utc),
    )
    assert validator.validate(window, _NOW) == RejectionReason.PAST_SLOT


@pytest.mark.parametrize("minutes", [-60, 0, 15, 60, 600])
def test_past_slot_wins_regardless_of_end(validator, minutes):
    window = _window(_NOW - timedelta(minutes=1), minutes)
    assert validator.validate(window, _NOW) == RejectionReason.PAST_SLOT


def test_start_equal_to_now_is_not_past(validator):
    assert validator.validate(_window(_NOW, 60), _NOW) is None


@pytest.mark.parametrize("minutes", [0, -1, -600])
def test_non_positive_duration_checked_before_bounds(validator, minutes):
    window = _window(datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), minutes)
    assert validator.validate(window, _NOW) == RejectionReason.NON_POSITIVE_DURATION


def test_too_short(validator):
    """10:00-10:15 is only fifteen minutes long."""
    window = _window(datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), 15)
    assert validator.validate(window, _NOW) == RejectionReason.TOO_SHORT


def test_one_second_under_minimum_is_too_short(validator):
    start = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
    window = TimeWindow(start=start, end=start + timedelta(minutes=30, seconds=-1))
    assert validator.validate(window, _NOW) == RejectionReason.TOO_SHORT


def test_exactly_minimum_passes(validator):
    window = _window(datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), 30)
    assert validator.validate(window, _NOW) is None


def test_too_long(validator):
    """09:00-19:00 is ten hours long."""
    window = TimeWindow(
        start=datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc),
        end=datetime(2024, 6, 1, 19, 0, tzinfo=timezone.utc),
    )
    assert validator.validate(window, _NOW) == RejectionReason.TOO_LONG


def test_exactly_maximum_passes(validator):
    window = _window(datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc), 480)
    assert validator.validate(window, _NOW) is None


def test_custom_bounds():
    validator = SlotValidator(
        min_duration=timedelta(minutes=60), max_duration=timedelta(minutes=90)
    )
    start = datetime(2024, 6, 1, 10, 0, tzinfo=timezone.utc)
    assert validator.validate(_window(start, 45), _NOW) == RejectionReason.TOO_SHORT
    assert validator.validate(_window(start, 120), _NOW) == RejectionReason.TOO_LONG
    assert validator.validate(_window(start, 60), _NOW) is None


def test_inverted_bounds_rejected():
    with pytest.raises(ValueError):
        SlotValidator(min_duration=timedelta(hours=2), max_duration=timedelta(hours=1))


def test_naive_datetimes_are_treated_as_utc(validator):
    window = TimeWindow(start=datetime(2024, 6, 1, 10, 0), end=datetime(2024, 6, 1, 11, 0))
    assert window.start.tzinfo is timezone.utc
    assert validator.validate(window, _NOW) is None


def test_naive_now_is_treated_as_utc(validator):
    """A naive clock value compares against the window as UTC."""
    window = TimeWindow(start=datetime(2024, 6, 1, 8, 0), end=datetime(2024, 6, 1, 8, 30))
    assert validator.validate(window, datetime(2024, 6, 1, 9, 0)) == RejectionReason.PAST_SLOT

    later = TimeWindow(start=datetime(2024, 6, 1, 10, 0), end=datetime(2024, 6, 1, 11, 0))
    assert validator.validate(later, datetime(2024, 6, 1, 9, 0)) is None
