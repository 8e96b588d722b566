"""
Window Search and Wait
======================

Finds the client window by title and races a polling search against a
timeout.

The wait runs one background poller thread while the caller blocks. The
first of "window found" and "deadline passed" decides the outcome. On
timeout the poller is cancelled through an Event it checks on every
iteration, so no thread outlives the wait.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Final, Optional, Protocol

from autologin.automation.errors import WindowSearchError


DEFAULT_POLL_INTERVAL: Final[float] = 0.5
DEFAULT_WINDOW_TIMEOUT: Final[float] = 60.0

# How long to wait for a cancelled poller to notice and exit
_POLLER_JOIN_TIMEOUT: Final[float] = 5.0

_log = logging.getLogger("autologin.automation")


class WindowSource(Protocol):
    """Looks up a top-level window by title."""

    def find_window(self, title: str) -> Optional[Any]:
        """Return a handle for the window, or None if there is none."""
        ...


class PyAutoGUIWindowSource:
    """
    Window lookup through ``pyautogui.getWindowsWithTitle``.

    Only the exact title matches. pyautogui provides window lookup on
    Windows only.
    """

    __slots__ = ()

    def find_window(self, title: str) -> Optional[Any]:
        try:
            import pyautogui
        except Exception as exc:
            raise WindowSearchError(f"Window search is unavailable: {exc}") from exc

        get_windows = getattr(pyautogui, "getWindowsWithTitle", None)
        if get_windows is None:
            raise WindowSearchError("Window search is not supported on this platform")

        for window in get_windows(title):
            if window.title == title:
                return window
        return None


@dataclass(frozen=True)
class WindowWaitResult:
    """Outcome of a window wait."""
    found: bool
    handle: Optional[Any]
    elapsed: float

    def __bool__(self) -> bool:
        return self.found


class WindowPoller:
    """
    Background thread that searches for a window until found or cancelled.

    Usage:
        poller = WindowPoller(source, "Riot Client Main")
        poller.start()
        if poller.done.wait(timeout):
            ...
        poller.cancel()
    """

    def __init__(
        self,
        source: WindowSource,
        title: str,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self._source = source
        self._title = title
        self._poll_interval = poll_interval
        self._cancel = threading.Event()
        self.done = threading.Event()
        self.handle: Optional[Any] = None
        self.error: Optional[BaseException] = None
        self.attempts = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("WindowPoller can only be started once")
        self._thread = threading.Thread(
            target=self._run, name="autologin-window-poller", daemon=True
        )
        self._thread.start()

    def cancel(self, join_timeout: float = _POLLER_JOIN_TIMEOUT) -> None:
        """Signal the poller to stop and wait briefly for it to exit."""
        self._cancel.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=join_timeout)

    def _run(self) -> None:
        try:
            while not self._cancel.is_set():
                self.attempts += 1
                handle = self._source.find_window(self._title)
                if handle:
                    self.handle = handle
                    return
                # Interruptible sleep: cancel() wakes this immediately
                self._cancel.wait(self._poll_interval)
        except Exception as exc:
            self.error = exc
        finally:
            self.done.set()


def wait_for_window(
    source: WindowSource,
    title: str,
    timeout: float = DEFAULT_WINDOW_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> WindowWaitResult:
    """
    Wait until a window titled ``title`` exists or ``timeout`` seconds pass.

    Args:
        source: Window lookup
        title: Exact window title
        timeout: Deadline in seconds
        poll_interval: Seconds between searches

    Returns:
        WindowWaitResult; ``found`` is False on timeout

    Raises:
        WindowSearchError: If the window search itself failed
    """
    if timeout <= 0:
        raise ValueError("timeout must be positive")

    poller = WindowPoller(source, title, poll_interval)
    started = time.monotonic()
    poller.start()

    finished = poller.done.wait(timeout)
    # Cancel before returning in every case; on timeout this stops the search
    poller.cancel()
    elapsed = time.monotonic() - started

    if finished and poller.error is not None:
        if isinstance(poller.error, WindowSearchError):
            raise poller.error
        raise WindowSearchError(f"Window search failed: {poller.error}") from poller.error

    if finished and poller.handle is not None:
        _log.info("Window '%s' found after %.1fs", title, elapsed)
        return WindowWaitResult(found=True, handle=poller.handle, elapsed=elapsed)

    _log.warning("Window '%s' not found within %gs", title, timeout)
    return WindowWaitResult(found=False, handle=None, elapsed=elapsed)
