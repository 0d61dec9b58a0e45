"""
Booking placement rules

Pure functions over datetimes so the scheduling rules can be checked without a
database. All datetimes are naive UTC, as stored.
"""

from datetime import datetime, timedelta
from typing import Iterable

from ...exceptions import ConflictError, ValidationError
from ...shared.validators import format_business_hour

DEFAULT_BUFFER_MINUTES = 30


def slots_overlap(
    new_start: datetime, new_end: datetime, existing_start: datetime, existing_end: datetime
) -> bool:
    """
    Three-way overlap test used for availability windows.

    True when the new start falls in [existing_start, existing_end), the new end
    falls in (existing_start, existing_end], or the new window contains the
    existing one.
    """
    starts_inside = existing_start <= new_start < existing_end
    ends_inside = existing_start < new_end <= existing_end
    contains = new_start <= existing_start and existing_end <= new_end
    return starts_inside or ends_inside or contains


def check_within_slot(
    requested_start: datetime, requested_end: datetime, slot_start: datetime, slot_end: datetime
) -> None:
    """Raise ValidationError when the appointment does not fit inside its slot"""
    if requested_start < slot_start:
        raise ValidationError(
            f"Le créneau commence à {format_business_hour(slot_start)}, "
            "impossible de réserver avant cette heure"
        )
    if requested_end > slot_end:
        raise ValidationError(
            f"Le créneau se termine à {format_business_hour(slot_end)}, "
            f"le massage finirait à {format_business_hour(requested_end)}"
        )


def check_against_booking(
    requested_start: datetime,
    requested_end: datetime,
    booked_start: datetime,
    booked_end: datetime,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> None:
    """Raise ConflictError when the request overlaps a booking or leaves too short a pause"""
    buffer = timedelta(minutes=buffer_minutes)

    if requested_start < booked_end and requested_end > booked_start:
        raise ConflictError(
            f"Conflit d'horaire avec une réservation existante de "
            f"{format_business_hour(booked_start)} à {format_business_hour(booked_end)}"
        )

    if requested_end <= booked_start:
        gap = booked_start - requested_end
    else:
        gap = requested_start - booked_end

    if gap < buffer:
        gap_minutes = int(gap.total_seconds() // 60)
        raise ConflictError(
            f"Il faut {buffer_minutes} minutes de pause minimum entre deux massages "
            f"(seulement {gap_minutes} minutes avec la réservation de "
            f"{format_business_hour(booked_start)} à {format_business_hour(booked_end)})"
        )


def check_placement(
    requested_start: datetime,
    requested_end: datetime,
    slot_start: datetime,
    slot_end: datetime,
    existing: Iterable[tuple[datetime, datetime]],
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> None:
    """
    Validate an appointment against its slot and the bookings already in it.

    Args:
        requested_start: Start of the new appointment
        requested_end: requested_start plus the massage duration
        slot_start: Opening of the availability window
        slot_end: Closing of the availability window
        existing: (start, end) of every booking that still blocks the slot
        buffer_minutes: Minimum pause between two appointments

    Raises:
        ValidationError: The appointment leaves the slot
        ConflictError: Overlap or insufficient pause with an existing booking
    """
    check_within_slot(requested_start, requested_end, slot_start, slot_end)
    for booked_start, booked_end in existing:
        check_against_booking(
            requested_start, requested_end, booked_start, booked_end, buffer_minutes
        )
