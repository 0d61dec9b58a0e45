from datetime import datetime, timedelta

import pytest

from massage_booking.domain.planning.conflicts import (
    check_against_booking,
    check_placement,
    check_within_slot,
    slots_overlap,
)
from massage_booking.exceptions import ConflictError, ValidationError

DAY = datetime(2025, 8, 25)


def at(hour, minute=0):
    return DAY.replace(hour=hour, minute=minute)


def hour_long(hour, minute=0):
    start = at(hour, minute)
    return start, start + timedelta(minutes=60)


SLOT = (at(9), at(17))
EXISTING = [(at(14), at(15))]


def test_overlapping_windows_detected():
    assert slots_overlap(at(9, 30), at(10, 30), at(9), at(10))
    assert slots_overlap(at(8, 30), at(9, 30), at(9), at(10))
    assert slots_overlap(at(8), at(11), at(9), at(10))
    assert slots_overlap(at(9), at(10), at(9), at(10))


def test_adjacent_windows_do_not_overlap():
    assert not slots_overlap(at(10), at(11), at(9), at(10))
    assert not slots_overlap(at(8), at(9), at(9), at(10))


def test_direct_overlap_is_a_conflict():
    with pytest.raises(ConflictError) as exc:
        check_placement(*hour_long(14, 30), *SLOT, EXISTING)
    assert "Conflit d'horaire" in exc.value.message
    assert exc.value.status_code == 409


def test_short_pause_after_existing_booking_is_rejected():
    with pytest.raises(ConflictError) as exc:
        check_placement(*hour_long(15, 15), *SLOT, EXISTING)
    assert "30 minutes de pause minimum" in exc.value.message
    assert "15 minutes" in exc.value.message


def test_short_pause_before_existing_booking_is_rejected():
    with pytest.raises(ConflictError) as exc:
        check_placement(*hour_long(12, 45), *SLOT, EXISTING)
    assert "30 minutes de pause minimum" in exc.value.message


def test_pause_of_exactly_the_buffer_is_accepted():
    check_placement(*hour_long(15, 30), *SLOT, EXISTING)
    check_placement(*hour_long(12, 30), *SLOT, EXISTING)


def test_booking_with_enough_pause_is_accepted():
    check_placement(*hour_long(15, 45), *SLOT, EXISTING)


def test_booking_ending_after_slot_is_rejected():
    with pytest.raises(ValidationError) as exc:
        check_placement(*hour_long(16, 30), *SLOT, [])
    assert "se termine à 17:00" in exc.value.message
    assert "17:30" in exc.value.message
    assert exc.value.status_code == 400


def test_booking_starting_before_slot_is_rejected():
    with pytest.raises(ValidationError) as exc:
        check_within_slot(*hour_long(8, 30), *SLOT)
    assert "commence à 09:00" in exc.value.message


def test_booking_filling_the_end_of_the_slot_is_accepted():
    check_placement(*hour_long(16), *SLOT, [])


def test_custom_buffer():
    check_against_booking(*hour_long(15, 10), at(14), at(15), buffer_minutes=10)
    with pytest.raises(ConflictError) as exc:
        check_against_booking(*hour_long(15, 10), at(14), at(15), buffer_minutes=15)
    assert "15 minutes de pause minimum" in exc.value.message


def test_every_existing_booking_is_checked():
    existing = [(at(10), at(11)), (at(14), at(15))]
    check_placement(*hour_long(12), *SLOT, existing)
    with pytest.raises(ConflictError):
        check_placement(*hour_long(11, 10), *SLOT, existing)
