"""Shared validation utilities"""

import re
from typing import Optional

PHONE_PATTERN = re.compile(r"^[0-9]{10,11}$")
COLOR_CODE_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a customer phone number.

    Args:
        phone: Phone number string, spaces allowed (e.g. "090 123 4567")

    Returns:
        The phone number without spaces

    Raises:
        ValueError: If the number is not 10-11 digits
    """
    if phone is None:
        return phone

    digits = re.sub(r"\s", "", phone)
    if not digits:
        raise ValueError("Phone number is required")
    if not PHONE_PATTERN.match(digits):
        raise ValueError("Invalid phone number format")
    return digits


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


def validate_customer_name(name: Optional[str]) -> Optional[str]:
    """Trim a customer name and enforce the 2-100 character range"""
    if name is None:
        return name

    name = name.strip()
    if not name:
        raise ValueError("Customer name is required")
    if len(name) < 2 or len(name) > 100:
        raise ValueError("Customer name must be 2-100 characters")
    return name


def validate_color_code(color_code: Optional[str]) -> Optional[str]:
    if color_code is None:
        return color_code
    if not COLOR_CODE_PATTERN.match(color_code):
        raise ValueError("Color code must be in #RRGGBB format")
    return color_code.upper()
