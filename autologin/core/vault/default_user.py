"""
Default User Pointer
====================

A single UTF-8 file holding the username used for unattended login.

The pointer is not checked against the vault when written. A dangling
pointer surfaces later as UserNotFoundError from the vault.
"""

from __future__ import annotations

import logging
from pathlib import Path

from autologin.core.config import AutologinConfig
from autologin.core.vault.errors import DefaultUserError
from autologin.utils.paths import atomic_write_text


class DefaultUserPointer:
    """
    Reads and writes the default-user file.

    Usage:
        pointer = DefaultUserPointer.from_config(config)
        pointer.set("alice")
        username = pointer.get()
        if not username:
            ...  # no default set
    """

    __slots__ = ("_path", "_log")

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._log = logging.getLogger("autologin.vault")

    @classmethod
    def from_config(cls, config: AutologinConfig) -> DefaultUserPointer:
        return cls(config.paths.default_user_file)

    @property
    def path(self) -> Path:
        return self._path

    def set(self, username: str) -> None:
        """
        Replace the file's contents with ``username``.

        Raises:
            DefaultUserError: If the file cannot be written
        """
        try:
            atomic_write_text(self._path, username, mode=0o644)
        except OSError as exc:
            raise DefaultUserError(f"Failed to save default user: {exc}") from exc
        self._log.info("Default user set to '%s'", username)

    def get(self) -> str:
        """
        Return the file's contents verbatim.

        An empty string means no default is set; callers must check for it.

        Raises:
            DefaultUserError: If the file is missing or unreadable
        """
        try:
            return self._path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DefaultUserError(f"Failed to read default user: {exc}") from exc
