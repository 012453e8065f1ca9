"""Shared validation utilities"""

import re
from datetime import date, datetime, timezone
from typing import Optional


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Ten-digit numbers are treated as US numbers; anything else must already
    carry its country code.

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    has_plus = phone.strip().startswith("+")
    digits = re.sub(r"\D", "", phone)

    if not has_plus and len(digits) == 10:
        return f"+1{digits}"

    if len(digits) < 8 or len(digits) > 15:
        raise ValueError("Phone number must contain 8 to 15 digits including country code")

    return f"+{digits}"


def validate_iso_date(value: str) -> str:
    """
    Ensure a booking date is zero-padded ISO-8601 (``YYYY-MM-DD`` optionally
    followed by a time part). Dates are compared as strings, so anything else
    would sort incorrectly.
    """
    value = (value or "").strip()
    if not re.match(r"^\d{4}-\d{2}-\d{2}", value):
        raise ValueError("date must be an ISO-8601 date (YYYY-MM-DD)")
    try:
        date.fromisoformat(value[:10])
        if len(value) > 10:
            datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError("date must be an ISO-8601 date (YYYY-MM-DD)") from e
    return value


def to_naive_utc(value: datetime) -> datetime:
    """Normalize aware datetimes to naive UTC for storage and comparison"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
