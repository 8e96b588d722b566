"""
Path Utilities
==============

OS-aware file helpers for the vault, the default-user pointer and the
salt file.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path


def atomic_write_bytes(path: Path | str, data: bytes, mode: int = 0o600) -> None:
    """
    Replace ``path`` with ``data`` so readers never see a partial file.

    The data goes to a temporary file in the same directory, is flushed and
    fsynced, then renamed over the target with ``os.replace``. The temporary
    file is removed if anything fails.

    Args:
        path: Target file
        data: Full new contents
        mode: Permissions of the new file on POSIX systems
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        if platform.system().lower() != "windows":
            os.chmod(tmp_name, mode)

        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise


def atomic_write_text(path: Path | str, text: str, mode: int = 0o600) -> None:
    """Text variant of :func:`atomic_write_bytes` (UTF-8)."""
    atomic_write_bytes(path, text.encode("utf-8"), mode=mode)

