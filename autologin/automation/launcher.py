"""
Process Launcher
================

Starts the external client. The process is detached from the login
flow: nothing waits on it and it keeps running whatever happens next.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Protocol, Sequence

from autologin.automation.errors import LaunchFailedError


class ProcessHandle(Protocol):
    """What the sequencer keeps of a launched process."""

    pid: int

    def poll(self) -> Optional[int]: ...


class ProcessLauncher:
    """Launches executables with ``subprocess.Popen``."""

    __slots__ = ("_log",)

    def __init__(self) -> None:
        self._log = logging.getLogger("autologin.automation")

    def launch(self, executable_path: str, args: Sequence[str] = ()) -> ProcessHandle:
        """
        Start ``executable_path`` with ``args``.

        Raises:
            LaunchFailedError: If the process could not be started
        """
        command = [executable_path, *args]
        self._log.info("Launching %s", executable_path)
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as exc:
            raise LaunchFailedError(f"Failed to start {executable_path}: {exc}") from exc

        self._log.debug("Started process %d", process.pid)
        return process
