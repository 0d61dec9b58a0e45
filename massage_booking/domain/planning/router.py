"""Planning router - FastAPI endpoints for time slots and reservations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import RoleProvider, get_current_user, get_role_provider, require_admin
from ...database import get_db
from ...email_service import NotificationDispatcher
from ...models import Booking, BookingStatus, TimeSlot, User
from ...shared.validators import format_api_datetime
from .schemas import (
    BookingCreate,
    BookingResponse,
    BookingUpdate,
    MassageSummary,
    TimeSlotCreate,
    TimeSlotResponse,
    TimeSlotSummary,
    TimeSlotUpdate,
    UserSummary,
)
from .service import BookingService, TimeSlotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/planning", tags=["Planning"])


def get_notifier(db: Session = Depends(get_db)) -> NotificationDispatcher:
    """Dependency injection for NotificationDispatcher"""
    return NotificationDispatcher(db)


def get_time_slot_service(db: Session = Depends(get_db)) -> TimeSlotService:
    """Dependency injection for TimeSlotService"""
    return TimeSlotService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, notifier=notifier)


def booking_to_response(booking: Booking, include_slot: bool = True) -> BookingResponse:
    user = booking.user
    massage = booking.massage
    slot = booking.time_slot
    return BookingResponse(
        id=booking.id,
        userId=booking.user_id,
        massageId=booking.massage_id,
        timeSlotId=booking.time_slot_id,
        startTime=format_api_datetime(booking.start_time),
        endTime=format_api_datetime(booking.end_time),
        status=booking.status,
        notes=booking.notes,
        createdAt=format_api_datetime(booking.created_at),
        user=UserSummary(
            id=user.id,
            email=user.email,
            firstname=user.firstname,
            name=user.name,
            phoneNumber=user.phone_number,
        )
        if user
        else None,
        massage=MassageSummary(
            id=massage.id, name=massage.name, duration=massage.duration, price=massage.price
        )
        if massage
        else None,
        timeSlot=TimeSlotSummary(
            id=slot.id,
            startTime=format_api_datetime(slot.start_time),
            endTime=format_api_datetime(slot.end_time),
            isActive=slot.is_active,
        )
        if slot and include_slot
        else None,
    )


def slot_to_response(slot: TimeSlot, bookings: Optional[list[Booking]] = None) -> TimeSlotResponse:
    if bookings is None:
        bookings = [b for b in slot.bookings if b.status != BookingStatus.CANCELLED.value]
    return TimeSlotResponse(
        id=slot.id,
        startTime=format_api_datetime(slot.start_time),
        endTime=format_api_datetime(slot.end_time),
        isActive=slot.is_active,
        createdAt=format_api_datetime(slot.created_at),
        bookings=[booking_to_response(b, include_slot=False) for b in bookings],
    )


# ============================================================================
# TIME SLOTS
# ============================================================================


@router.post("/creneaux", response_model=TimeSlotResponse, status_code=201)
async def create_time_slot(
    data: TimeSlotCreate,
    _admin: User = Depends(require_admin),
    service: TimeSlotService = Depends(get_time_slot_service),
):
    """Create a new availability window (admin)"""
    slot = service.create_slot(data)
    return slot_to_response(slot, bookings=[])


@router.get("/creneaux", response_model=list[TimeSlotResponse])
async def get_time_slots(service: TimeSlotService = Depends(get_time_slot_service)):
    """Active availability windows with the bookings they hold"""
    return [slot_to_response(slot) for slot in service.list_slots()]


@router.get("/creneaux/{slot_id}", response_model=TimeSlotResponse)
async def get_time_slot(
    slot_id: str,
    service: TimeSlotService = Depends(get_time_slot_service),
):
    return slot_to_response(service.get_slot(slot_id))


@router.put("/creneaux/{slot_id}", response_model=TimeSlotResponse)
async def update_time_slot(
    slot_id: str,
    data: TimeSlotUpdate,
    _admin: User = Depends(require_admin),
    service: TimeSlotService = Depends(get_time_slot_service),
):
    """Update an availability window (admin)"""
    return slot_to_response(service.update_slot(slot_id, data))


@router.delete("/creneaux/{slot_id}", response_model=TimeSlotResponse)
async def deactivate_time_slot(
    slot_id: str,
    _admin: User = Depends(require_admin),
    service: TimeSlotService = Depends(get_time_slot_service),
):
    """Deactivate an availability window (admin); existing bookings are kept"""
    return slot_to_response(service.deactivate_slot(slot_id))


# ============================================================================
# RESERVATIONS
# ============================================================================


@router.post("/reservations", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Reserve a massage inside a time slot"""
    booking = await service.reserve(current_user.id, data)
    return booking_to_response(booking)


@router.get("/mes-rendez-vous", response_model=list[BookingResponse])
async def get_my_bookings(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings of the current user, earliest slot first"""
    return [booking_to_response(b) for b in service.list_mine(current_user.id)]


@router.get("/reservations", response_model=list[BookingResponse])
async def get_all_bookings(
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Every booking (admin)"""
    return [booking_to_response(b) for b in service.list_all()]


@router.put("/reservations/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    current_user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
    service: BookingService = Depends(get_booking_service),
):
    """Update notes or status of a booking"""
    booking = service.update_booking(booking_id, data, user=current_user, roles=roles)
    return booking_to_response(booking)


@router.delete("/reservations/{booking_id}/annuler", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    roles: RoleProvider = Depends(get_role_provider),
    service: BookingService = Depends(get_booking_service),
):
    """Cancel a booking and email the client"""
    booking = await service.cancel_booking(booking_id, user=current_user, roles=roles)
    return booking_to_response(booking)


@router.delete("/reservations/{booking_id}")
async def delete_booking(
    booking_id: str,
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Delete a booking permanently (admin)"""
    return service.delete_booking(booking_id)
