"""Shared validation utilities"""

import re
from datetime import date, datetime, time
from typing import Optional, Union

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def validate_time_of_day(value: Union[str, time]) -> str:
    """
    Validate a time of day and normalize it to zero-padded HH:MM.

    Args:
        value: "9:30", "09:30" or a datetime.time

    Returns:
        Normalized "HH:MM" string

    Raises:
        ValueError: If the value is not a valid 24h HH:MM time
    """
    if isinstance(value, time):
        return value.strftime("%H:%M")

    value = (value or "").strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must have a valid HH:MM format")

    hours, minutes = value.split(":")
    return f"{int(hours):02d}:{minutes}"


def combine_date_time(day: date, time_of_day: Union[str, time]) -> datetime:
    """Combine a calendar day and an HH:MM time into a naive datetime"""
    hours, minutes = validate_time_of_day(time_of_day).split(":")
    return datetime.combine(day, time(int(hours), int(minutes)))


def validate_national_id(national_id: str) -> str:
    """
    Validate a patient national ID number.

    Raises:
        ValueError: If the ID is not numeric or has fewer than 7 digits
    """
    national_id = (national_id or "").strip()
    if not national_id.isdigit():
        raise ValueError("National ID must be a number")
    if len(national_id) < 7:
        raise ValueError("National ID must have at least 7 digits")
    return national_id


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_required_text(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Field is required")
    return value
