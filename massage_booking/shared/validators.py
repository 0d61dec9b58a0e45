"""Shared validation utilities"""

import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..config import BUSINESS_TIMEZONE

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """Trim and lower-case an email address so lookups are case-insensitive"""
    if email is None:
        return None
    return email.strip().lower()


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Normalized email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        raise ValueError("email must be a valid email address")

    email = normalize_email(email)
    if not EMAIL_PATTERN.match(email):
        raise ValueError("email must be a valid email address")

    return email


def to_utc_naive(value: datetime) -> datetime:
    """
    Convert a datetime to naive UTC for storage.

    Naive values are assumed to already be UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def format_api_datetime(value: Optional[datetime]) -> Optional[str]:
    """Render a stored naive UTC datetime as ISO 8601 with milliseconds and a Z suffix"""
    if value is None:
        return None
    value = to_utc_naive(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def to_business_time(value: datetime) -> datetime:
    """Convert a stored naive UTC datetime to the business timezone"""
    return value.replace(tzinfo=timezone.utc).astimezone(ZoneInfo(BUSINESS_TIMEZONE))


def format_business_hour(value: datetime) -> str:
    """HH:MM in the business timezone, used in user-facing messages"""
    return to_business_time(value).strftime("%H:%M")
