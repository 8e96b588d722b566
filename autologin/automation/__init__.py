"""
Autologin Automation Module
===========================

Launches the client, waits for its window and types the credentials:
- ProcessLauncher: starts the client executable
- wait_for_window: bounded, cancellable window-wait race
- LoginSequencer: the ordered launch/wait/inject protocol
"""

from autologin.automation.errors import (
    AutomationError,
    LaunchFailedError,
    WindowNotFoundError,
    WindowSearchError,
    KeyboardError,
)
from autologin.automation.keyboard import KeyboardBackend, PyAutoGUIKeyboard
from autologin.automation.launcher import ProcessLauncher
from autologin.automation.sequencer import LoginSequencer, LoginSession, LoginState
from autologin.automation.windows import (
    PyAutoGUIWindowSource,
    WindowPoller,
    WindowSource,
    WindowWaitResult,
    wait_for_window,
)

__all__ = [
    "AutomationError",
    "LaunchFailedError",
    "WindowNotFoundError",
    "WindowSearchError",
    "KeyboardError",
    "KeyboardBackend",
    "PyAutoGUIKeyboard",
    "ProcessLauncher",
    "LoginSequencer",
    "LoginSession",
    "LoginState",
    "PyAutoGUIWindowSource",
    "WindowPoller",
    "WindowSource",
    "WindowWaitResult",
    "wait_for_window",
]
