"""
Planning Domain

Availability windows (time slots) and reservations, including the placement
rules that keep bookings inside their slot, apart from each other and
separated by the mandatory pause.
"""

from .router import router

__all__ = ["router"]
