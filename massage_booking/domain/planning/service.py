"""Planning service - Time slot registry and booking engine"""

import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import RoleProvider
from ...config import BOOKING_BUFFER_MINUTES
from ...email_service import BookingDetails, NotificationDispatcher
from ...exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ...models import (
    BOOKING_STATUS_TRANSITIONS,
    TERMINAL_BOOKING_STATUSES,
    Booking,
    BookingStatus,
    TimeSlot,
    User,
    UserRole,
)
from ...shared.validators import format_business_hour, to_utc_naive
from .conflicts import check_placement
from .locks import SlotLockRegistry, slot_locks
from .repository import BookingRepository, TimeSlotRepository
from .schemas import BookingCreate, BookingUpdate, TimeSlotCreate, TimeSlotUpdate

module_logger = logging.getLogger(__name__)


class TimeSlotService:
    """Service layer for availability windows"""

    def __init__(self, db: Session, logger: Optional[logging.Logger] = None):
        self.db = db
        self.repo = TimeSlotRepository()
        self.bookings = BookingRepository()
        self.logger = logger or module_logger

    def create_slot(self, data: TimeSlotCreate) -> TimeSlot:
        """Create a new availability window, refusing overlap with any active one"""
        start = to_utc_naive(data.startTime)
        end = to_utc_naive(data.endTime)

        if end <= start:
            raise ValidationError("L'heure de fin doit être après l'heure de début")

        existing = self.repo.find_overlapping_active(self.db, start, end)
        if existing:
            self.logger.warning(
                f"⚠️ Slot {start} - {end} overlaps existing slot {existing.id}"
            )
            raise ConflictError("Un créneau existe déjà sur cette période")

        slot = self.repo.create_slot(
            self.db,
            start_time=start,
            end_time=end,
            is_active=True if data.isActive is None else data.isActive,
        )
        self.logger.info(f"📅 Time slot {slot.id} created: {start} - {end}")
        return slot

    def list_slots(self) -> list[TimeSlot]:
        """Active slots ordered by start time"""
        return self.repo.get_active_slots(self.db)

    def get_slot(self, slot_id: str) -> TimeSlot:
        slot = self.repo.get_slot(self.db, slot_id)
        if not slot:
            raise NotFoundError("Ce créneau n'existe pas")
        return slot

    def update_slot(self, slot_id: str, data: TimeSlotUpdate) -> TimeSlot:
        slot = self.get_slot(slot_id)

        updates = {}
        if data.startTime is not None:
            updates["start_time"] = to_utc_naive(data.startTime)
        if data.endTime is not None:
            updates["end_time"] = to_utc_naive(data.endTime)
        if data.isActive is not None:
            updates["is_active"] = data.isActive

        new_start = updates.get("start_time", slot.start_time)
        new_end = updates.get("end_time", slot.end_time)
        if new_end <= new_start:
            raise ValidationError("L'heure de fin doit être après l'heure de début")

        if updates.get("is_active", slot.is_active):
            existing = self.repo.find_overlapping_active(
                self.db, new_start, new_end, exclude_id=slot.id
            )
            if existing:
                raise ConflictError("Un créneau existe déjà sur cette période")

        if "start_time" in updates or "end_time" in updates:
            for booking in self.bookings.get_blocking_bookings(self.db, slot.id):
                if booking.start_time < new_start or booking.end_time > new_end:
                    raise ConflictError(
                        f"La réservation de {format_business_hour(booking.start_time)} à "
                        f"{format_business_hour(booking.end_time)} sortirait du créneau"
                    )

        return self.repo.update_slot(self.db, slot, **updates)

    def deactivate_slot(self, slot_id: str) -> TimeSlot:
        """Soft delete: the slot and its bookings stay in the history"""
        slot = self.get_slot(slot_id)
        slot = self.repo.update_slot(self.db, slot, is_active=False)
        self.logger.info(f"🗑️ Time slot {slot_id} deactivated")
        return slot


class BookingService:
    """Service layer for reservations"""

    def __init__(
        self,
        db: Session,
        notifier: Optional[NotificationDispatcher] = None,
        logger: Optional[logging.Logger] = None,
        locks: Optional[SlotLockRegistry] = None,
        buffer_minutes: int = BOOKING_BUFFER_MINUTES,
    ):
        self.db = db
        self.repo = BookingRepository()
        self.slots = TimeSlotRepository()
        self.notifier = notifier or NotificationDispatcher(db)
        self.logger = logger or module_logger
        self.locks = locks or slot_locks
        self.buffer_minutes = buffer_minutes

    async def reserve(self, user_id: str, data: BookingCreate) -> Booking:
        """
        Reserve a massage inside a slot.

        The conflict check and the insert run under the slot's lock and inside
        one transaction, so two concurrent requests cannot both pass the check.
        Emails go out after the commit and never undo the reservation.
        """
        massage = self.repo.get_massage(self.db, data.massageId)
        if not massage:
            raise NotFoundError("Ce massage n'existe pas")

        requested_start = to_utc_naive(data.startTime)
        requested_end = requested_start + timedelta(minutes=massage.duration)

        with self.locks.lock_for(data.timeSlotId):
            try:
                slot = self.slots.get_slot_for_update(self.db, data.timeSlotId)
                if not slot or not slot.is_active:
                    raise NotFoundError("Ce créneau n'est pas disponible")

                existing = self.repo.get_blocking_bookings(self.db, slot.id)
                check_placement(
                    requested_start,
                    requested_end,
                    slot.start_time,
                    slot.end_time,
                    [(b.start_time, b.end_time) for b in existing],
                    self.buffer_minutes,
                )

                booking = self.repo.add_booking(
                    self.db,
                    user_id=user_id,
                    massage_id=massage.id,
                    time_slot_id=slot.id,
                    start_time=requested_start,
                    end_time=requested_end,
                    status=BookingStatus.PENDING.value,
                    notes=data.notes,
                )
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.logger.info(
            f"✅ Booking {booking.id} created for user {user_id}: "
            f"{requested_start} - {requested_end} in slot {slot.id}"
        )

        booking = self.repo.get_booking(self.db, booking.id)
        details = self._details(booking)

        try:
            await self.notifier.send_booking_confirmation(details)
        except Exception as e:
            self.logger.error(f"❌ Failed to send booking confirmation for {booking.id}: {e}")

        try:
            await self.notifier.notify_admins(details)
        except Exception as e:
            self.logger.error(f"❌ Failed to notify administrators for {booking.id}: {e}")

        return booking

    def list_slot_bookings(self, slot_id: str) -> list[Booking]:
        """Non-cancelled bookings of a slot, in start order"""
        return self.repo.get_slot_bookings(self.db, slot_id)

    def list_mine(self, user_id: str) -> list[Booking]:
        return self.repo.get_user_bookings(self.db, user_id)

    def list_all(self) -> list[Booking]:
        return self.repo.get_all_bookings(self.db)

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundError("Cette réservation n'existe pas")
        return booking

    def update_booking(
        self,
        booking_id: str,
        data: BookingUpdate,
        user: Optional[User] = None,
        roles: Optional[RoleProvider] = None,
    ) -> Booking:
        """
        Update notes or status of a booking.

        Conflict rules are not re-checked: neither field moves the booking in time.
        When a caller is given, only its owner or an administrator may update it,
        and only an administrator may set a status other than CANCELLED.
        """
        booking = self.get_booking(booking_id)
        is_admin = self._check_access(booking, user, roles)

        updates = {}
        if data.notes is not None:
            updates["notes"] = data.notes
        if data.status is not None:
            new_status = data.status.value
            if new_status != booking.status:
                if booking.status in TERMINAL_BOOKING_STATUSES:
                    raise ValidationError(
                        f"Une réservation {booking.status} ne peut plus changer de statut"
                    )
                if new_status not in BOOKING_STATUS_TRANSITIONS.get(booking.status, set()):
                    raise ValidationError(
                        f"Transition de statut impossible : {booking.status} vers {new_status}"
                    )
                if not is_admin and new_status != BookingStatus.CANCELLED.value:
                    raise AuthorizationError("Seul un administrateur peut changer ce statut")
            updates["status"] = new_status

        return self.repo.update_booking(self.db, booking, **updates)

    async def cancel_booking(
        self,
        booking_id: str,
        user: Optional[User] = None,
        roles: Optional[RoleProvider] = None,
    ) -> Booking:
        """Mark a booking CANCELLED and tell the client; cancelling twice is a no-op"""
        booking = self.get_booking(booking_id)
        self._check_access(booking, user, roles)

        if booking.status == BookingStatus.CANCELLED.value:
            return booking
        if booking.status == BookingStatus.COMPLETED.value:
            raise ValidationError("Une réservation terminée ne peut pas être annulée")

        booking = self.repo.update_booking(
            self.db, booking, status=BookingStatus.CANCELLED.value
        )
        self.logger.info(f"🚫 Booking {booking_id} cancelled")

        try:
            await self.notifier.send_booking_cancellation(self._details(booking))
        except Exception as e:
            self.logger.error(f"❌ Failed to send cancellation email for {booking_id}: {e}")

        return booking

    def delete_booking(self, booking_id: str) -> dict:
        """Hard delete, frees the time it occupied"""
        booking = self.get_booking(booking_id)
        self.repo.delete_booking(self.db, booking)
        self.logger.info(f"🗑️ Booking {booking_id} deleted")
        return {"message": "Réservation supprimée", "id": booking_id}

    @staticmethod
    def _check_access(
        booking: Booking, user: Optional[User], roles: Optional[RoleProvider]
    ) -> bool:
        """Returns whether the caller is an administrator; raises when it may not touch the booking"""
        if user is None:
            return True
        is_admin = roles is not None and roles.get_role(user.id) == UserRole.ADMIN.value
        if not is_admin and booking.user_id != user.id:
            raise AuthorizationError("Cette réservation ne vous appartient pas")
        return is_admin

    @staticmethod
    def _details(booking: Booking) -> BookingDetails:
        return BookingDetails(
            client_firstname=booking.user.firstname or "Client",
            client_name=booking.user.name or "",
            client_email=booking.user.email,
            client_phone=booking.user.phone_number,
            massage_name=booking.massage.name,
            massage_duration=booking.massage.duration,
            massage_price=booking.massage.price,
            start_time=booking.start_time,
            end_time=booking.end_time,
            notes=booking.notes,
        )
