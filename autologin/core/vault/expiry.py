"""
Credential Expiry
=================

A vault file whose last modification is older than the retention window
is expired. The policy applies to the whole file: every save rewrites the
file, so enrolling any user renews all of them.
"""

from __future__ import annotations

import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, Final, Optional


DEFAULT_RETENTION: Final[timedelta] = timedelta(days=30)


class ExpiryPolicy:
    """
    Decides whether a vault file has outlived its retention window.

    Usage:
        policy = ExpiryPolicy(timedelta(days=30))
        if policy.is_expired(vault_path):
            ...
    """

    __slots__ = ("_retention", "_clock")

    def __init__(
        self,
        retention: timedelta = DEFAULT_RETENTION,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if retention <= timedelta(0):
            raise ValueError("retention must be positive")
        self._retention = retention
        self._clock = clock

    @property
    def retention(self) -> timedelta:
        return self._retention

    def age(self, path: Path | str) -> Optional[timedelta]:
        """Age of the file measured from its mtime, or None if it does not exist."""
        try:
            mtime = Path(path).stat().st_mtime
        except FileNotFoundError:
            return None
        return timedelta(seconds=max(0.0, self._clock() - mtime))

    def is_expired(self, path: Path | str) -> bool:
        age = self.age(path)
        return age is not None and age > self._retention
