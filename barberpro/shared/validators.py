"""Shared validation utilities"""

import re
import uuid
from typing import Optional

PHONE_PATTERN = re.compile(r"^\(\d{2}\)\s?\d{5}-\d{4}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

VALIDATION_MESSAGES = {
    "phone": "Invalid phone number. Use the format (99) 99999-9999",
    "email": "Invalid email. Use the format example@email.com",
    "required": "This field is required",
    "time": "Invalid time. Use the 24h format HH:MM",
}


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def format_phone(value: str) -> str:
    """
    Apply the phone mask (99) 99999-9999 to whatever digits were typed.

    Extra digits beyond 11 are dropped, partial input is partially masked.
    """
    digits = re.sub(r"\D", "", value or "")

    if len(digits) <= 2:
        return f"({digits}" if digits else ""
    if len(digits) <= 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:11]}"


def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(phone) and bool(PHONE_PATTERN.match(phone))


def validate_phone(phone: Optional[str]) -> str:
    """
    Normalize a phone number to the fixed mask and validate it.

    Args:
        phone: Phone number in any format (digits, dashes, spaces, parentheses)

    Returns:
        Masked phone number, e.g. (11) 98765-4321

    Raises:
        ValueError: If the number does not have a 2-digit area code and 9-digit line
    """
    formatted = format_phone(phone or "")
    if not is_valid_phone(formatted):
        raise ValueError(VALIDATION_MESSAGES["phone"])
    return formatted


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Stripped email address, or None when empty (email is optional)

    Raises:
        ValueError: If email format is invalid
    """
    if not email or not email.strip():
        return None

    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValueError(VALIDATION_MESSAGES["email"])

    return email


def validate_time_of_day(value: str) -> str:
    """Validate a fixed-width HH:MM time label (accepts HH:MM:SS and drops seconds)"""
    if value and len(value) == 8 and value[5] == ":":
        value = value[:5]
    if not value or not TIME_PATTERN.match(value):
        raise ValueError(VALIDATION_MESSAGES["time"])
    return value


def validate_webhook_url(url: Optional[str]) -> Optional[str]:
    """Empty means disabled; anything else must be an absolute http(s) URL"""
    if not url or not url.strip():
        return None
    url = url.strip()
    if not re.match(r"^https?://[^\s/$.?#].[^\s]*$", url, re.IGNORECASE):
        raise ValueError("Webhook URL must start with http:// or https://")
    return url
