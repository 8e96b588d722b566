"""
Validation Utilities
====================

Input validation for values that end up in the vault or get typed into
the client window.
"""

from __future__ import annotations


MAX_USERNAME_LENGTH = 128
MAX_PASSWORD_LENGTH = 256


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


def validate_string_safe(value: str, max_length: int, field_name: str = "value") -> str:
    """
    Check that ``value`` is a non-empty string of at most ``max_length``
    characters without NUL bytes.

    Raises:
        ValidationError: If any check fails
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value:
        raise ValidationError(f"{field_name} cannot be empty")
    if len(value) > max_length:
        raise ValidationError(f"{field_name} is longer than {max_length} characters")
    if "\x00" in value:
        raise ValidationError(f"{field_name} contains invalid characters")
    return value


def validate_username(username: str) -> str:
    """
    Validate a vault username.

    Control characters are rejected because the username is typed into a
    text field and a tab or newline would move focus.
    """
    validate_string_safe(username, MAX_USERNAME_LENGTH, field_name="username")
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in username):
        raise ValidationError("username contains control characters")
    return username


def validate_password(password: str) -> str:
    """Validate a password before it is stored or derived."""
    validate_string_safe(password, MAX_PASSWORD_LENGTH, field_name="password")
    if any(c in "\t\r\n" for c in password):
        raise ValidationError("password cannot contain tab or newline characters")
    return password
