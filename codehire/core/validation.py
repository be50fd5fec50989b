# codehire/core/validation.py
"""
Field checks shared by the auth forms.

Each check returns an error message or None so callers can collect every
failing field before responding, instead of stopping at the first one.
"""

import re

from codehire.core.errors import FieldValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_PATTERN = re.compile(r"^[0-9]{6}$")
MIN_PASSWORD_LENGTH = 6


def check_email(email: str | None) -> str | None:
    value = (email or "").strip().lower()
    if not value:
        return "Email is required"
    if not EMAIL_PATTERN.match(value):
        return "Please enter a valid email address"
    return None


def check_password(password: str | None, field_label: str = "Password") -> str | None:
    if not password:
        return f"{field_label} is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"{field_label} must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def check_name(name: str | None) -> str | None:
    if not (name or "").strip():
        return "Name is required"
    return None


def check_otp(otp: str | None) -> str | None:
    value = (otp or "").strip()
    if not value:
        return "Verification code is required"
    if not OTP_PATTERN.match(value):
        return "Enter the 6-digit code"
    return None


def collect(**checks: str | None) -> dict[str, str]:
    """Keep only the fields that produced an error."""
    return {field: message for field, message in checks.items() if message}


def raise_for_errors(errors: dict[str, str]) -> None:
    if errors:
        raise FieldValidationError(errors=errors)
