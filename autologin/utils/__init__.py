"""
Utils module - File and validation helpers.
"""

from autologin.utils.paths import atomic_write_bytes, atomic_write_text
from autologin.utils.validators import (
    ValidationError,
    validate_string_safe,
    validate_username,
    validate_password,
)

__all__ = [
    "atomic_write_bytes",
    "atomic_write_text",
    "ValidationError",
    "validate_string_safe",
    "validate_username",
    "validate_password",
]
