"""
Automation Exceptions
=====================
"""

from __future__ import annotations


class AutomationError(Exception):
    """Base exception for login automation failures."""
    pass


class LaunchFailedError(AutomationError):
    """Raised when the client process cannot be started."""
    pass


class WindowNotFoundError(AutomationError):
    """Raised when the client window did not appear before the deadline."""

    def __init__(self, title: str, timeout: float, session: object = None) -> None:
        self.title = title
        self.timeout = timeout
        self.session = session
        super().__init__(f"Timeout: window '{title}' not found after {timeout:g} seconds")


class WindowSearchError(AutomationError):
    """Raised when searching for the window itself failed."""
    pass


class KeyboardError(AutomationError):
    """Raised when synthetic keystrokes cannot be sent."""
    pass
