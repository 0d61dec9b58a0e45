"""Massage domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field


class MassageCreate(BaseModel):
    """Schema for adding a massage to the catalogue"""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    duration: int = Field(gt=0, description="Duration in minutes")
    price: float = Field(ge=0)
    position: Optional[int] = None
    image: Optional[str] = None


class MassageUpdate(BaseModel):
    """Schema for editing a catalogue entry"""

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    position: Optional[int] = None
    image: Optional[str] = None


class MassageResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    duration: int
    price: float
    position: int
    image: Optional[str] = None
    createdAt: Optional[str] = None
