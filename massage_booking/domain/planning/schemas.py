"""Planning domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models import BookingStatus


class TimeSlotCreate(BaseModel):
    """Schema for creating an availability window"""

    startTime: datetime
    endTime: datetime
    isActive: Optional[bool] = None


class TimeSlotUpdate(BaseModel):
    """Schema for updating an availability window"""

    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    isActive: Optional[bool] = None


class BookingCreate(BaseModel):
    """Schema for reserving a massage inside a slot"""

    massageId: str
    timeSlotId: str
    startTime: datetime
    notes: Optional[str] = None


class BookingUpdate(BaseModel):
    """Schema for updating an existing reservation"""

    notes: Optional[str] = None
    status: Optional[BookingStatus] = None


class UserSummary(BaseModel):
    id: str
    email: str
    firstname: Optional[str] = None
    name: Optional[str] = None
    phoneNumber: Optional[str] = None


class MassageSummary(BaseModel):
    id: str
    name: str
    duration: int
    price: float


class TimeSlotSummary(BaseModel):
    id: str
    startTime: str
    endTime: str
    isActive: bool


class BookingResponse(BaseModel):
    """Schema for booking response, with massage, client and slot denormalized"""

    id: str
    userId: str
    massageId: str
    timeSlotId: str
    startTime: str
    endTime: str
    status: BookingStatus
    notes: Optional[str] = None
    createdAt: Optional[str] = None
    user: Optional[UserSummary] = None
    massage: Optional[MassageSummary] = None
    timeSlot: Optional[TimeSlotSummary] = None


class TimeSlotResponse(BaseModel):
    """Schema for slot response with the bookings that occupy it"""

    id: str
    startTime: str
    endTime: str
    isActive: bool
    createdAt: Optional[str] = None
    bookings: list[BookingResponse] = []
