"""
Vault Exceptions
================

Every failure of the credential vault and the default-user pointer is a
VaultError. Low-level OSError and JSON errors are wrapped, never leaked.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base exception for vault errors."""
    pass


class VaultIOError(VaultError):
    """Raised when a vault file cannot be read, parsed or written."""
    pass


class DuplicateUserError(VaultError):
    """Raised when saving a username that is already stored."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"User '{username}' already exists")


class UserNotFoundError(VaultError):
    """Raised when a username is not stored in the vault."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"User '{username}' not found")


class EncodingMismatchError(VaultError):
    """Raised when a credential's encoding differs from the vault's."""
    pass


class CredentialExpiredError(VaultError):
    """
    Raised when the vault file outlived the retention window.

    The file has already been deleted; the user must enroll again.
    """
    pass


class DefaultUserError(VaultIOError):
    """Raised when the default-user file cannot be read or written."""
    pass
