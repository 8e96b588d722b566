"""
KDF Salt Storage
================

One random salt per installation, stored next to the vault.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Final, Optional

from autologin.utils.paths import atomic_write_bytes


DEFAULT_SALT_LENGTH: Final[int] = 16

_log = logging.getLogger("autologin.auth")


class SaltError(Exception):
    """Raised when the salt file cannot be read or written."""
    pass


class SaltStore:
    """
    Loads the installation salt, creating it on first use.

    Usage:
        salt = SaltStore(config.paths.salt_file).load_or_create()
    """

    __slots__ = ("_path", "_length")

    def __init__(self, path: Path | str, length: int = DEFAULT_SALT_LENGTH) -> None:
        if length < 8:
            raise ValueError("Salt length must be at least 8 bytes")
        self._path = Path(path)
        self._length = length

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> bytes:
        """
        Return the stored salt.

        Raises:
            SaltError: If the salt file is missing, unreadable or corrupt
        """
        salt = self._read()
        if salt is None:
            raise SaltError(
                f"Salt file is missing: {self._path}. "
                "Stored hashed passwords can no longer be verified; create your user again."
            )
        return salt

    def load_or_create(self) -> bytes:
        """Return the stored salt, generating and persisting a new one if absent."""
        salt = self._read()
        if salt is not None:
            return salt

        salt = secrets.token_bytes(self._length)
        try:
            atomic_write_bytes(self._path, salt)
        except OSError as exc:
            raise SaltError(f"Failed to write salt file: {exc}") from exc
        _log.info("Created new KDF salt at %s", self._path)
        return salt

    def _read(self) -> Optional[bytes]:
        try:
            salt = self._path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SaltError(f"Failed to read salt file: {exc}") from exc

        if len(salt) < 8:
            raise SaltError(f"Salt file is corrupt: {self._path}")
        return salt
