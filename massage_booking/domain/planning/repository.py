"""Planning repository - Database operations for time slots and bookings"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from ...models import INACTIVE_BOOKING_STATUSES, Booking, BookingStatus, Massage, TimeSlot


class TimeSlotRepository:
    """Repository for time slot database operations"""

    @staticmethod
    def find_overlapping_active(
        db: Session, start: datetime, end: datetime, exclude_id: Optional[str] = None
    ) -> Optional[TimeSlot]:
        """First active slot overlapping [start, end), using the three-way overlap test"""
        query = db.query(TimeSlot).filter(
            TimeSlot.is_active.is_(True),
            or_(
                and_(TimeSlot.start_time <= start, TimeSlot.end_time > start),
                and_(TimeSlot.start_time < end, TimeSlot.end_time >= end),
                and_(TimeSlot.start_time >= start, TimeSlot.end_time <= end),
            ),
        )
        if exclude_id:
            query = query.filter(TimeSlot.id != exclude_id)
        return query.first()

    @staticmethod
    def create_slot(db: Session, **slot_data) -> TimeSlot:
        slot = TimeSlot(**slot_data)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def get_slot(db: Session, slot_id: str) -> Optional[TimeSlot]:
        return db.query(TimeSlot).filter(TimeSlot.id == slot_id).first()

    @staticmethod
    def get_slot_for_update(db: Session, slot_id: str) -> Optional[TimeSlot]:
        """Load a slot with a row lock held until the transaction ends (no-op on SQLite)"""
        return db.query(TimeSlot).filter(TimeSlot.id == slot_id).with_for_update().first()

    @staticmethod
    def get_active_slots(db: Session) -> list[TimeSlot]:
        return (
            db.query(TimeSlot)
            .filter(TimeSlot.is_active.is_(True))
            .order_by(TimeSlot.start_time.asc())
            .all()
        )

    @staticmethod
    def update_slot(db: Session, slot: TimeSlot, **updates) -> TimeSlot:
        for key, value in updates.items():
            if value is not None and hasattr(slot, key):
                setattr(slot, key, value)

        db.commit()
        db.refresh(slot)
        return slot


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def _with_relations(db: Session):
        return db.query(Booking).options(
            joinedload(Booking.user),
            joinedload(Booking.massage),
            joinedload(Booking.time_slot),
        )

    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
        return BookingRepository._with_relations(db).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_blocking_bookings(db: Session, slot_id: str) -> list[Booking]:
        """Bookings of a slot that still occupy time (not cancelled, not completed)"""
        return (
            db.query(Booking)
            .filter(
                Booking.time_slot_id == slot_id,
                Booking.status.notin_(INACTIVE_BOOKING_STATUSES),
            )
            .order_by(Booking.start_time.asc())
            .all()
        )

    @staticmethod
    def get_slot_bookings(db: Session, slot_id: str) -> list[Booking]:
        """Non-cancelled bookings of a slot, for display"""
        return (
            BookingRepository._with_relations(db)
            .filter(Booking.time_slot_id == slot_id, Booking.status != BookingStatus.CANCELLED.value)
            .order_by(Booking.start_time.asc())
            .all()
        )

    @staticmethod
    def get_user_bookings(db: Session, user_id: str) -> list[Booking]:
        return (
            BookingRepository._with_relations(db)
            .join(TimeSlot, Booking.time_slot_id == TimeSlot.id)
            .filter(Booking.user_id == user_id)
            .order_by(TimeSlot.start_time.asc(), Booking.start_time.asc())
            .all()
        )

    @staticmethod
    def get_all_bookings(db: Session) -> list[Booking]:
        return (
            BookingRepository._with_relations(db)
            .join(TimeSlot, Booking.time_slot_id == TimeSlot.id)
            .order_by(TimeSlot.start_time.asc(), Booking.start_time.asc())
            .all()
        )

    @staticmethod
    def add_booking(db: Session, **booking_data) -> Booking:
        """Stage a booking in the current transaction; the caller commits"""
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def update_booking(db: Session, booking: Booking, **updates) -> Booking:
        for key, value in updates.items():
            if value is not None and hasattr(booking, key):
                setattr(booking, key, value)

        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def delete_booking(db: Session, booking: Booking) -> None:
        db.delete(booking)
        db.commit()

    @staticmethod
    def get_massage(db: Session, massage_id: str) -> Optional[Massage]:
        return db.query(Massage).filter(Massage.id == massage_id).first()
