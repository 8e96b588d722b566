"""
Synthetic Keyboard Input
========================

Sends keystrokes to whatever window has focus. Nothing confirms that a
keystroke reached a particular field.
"""

from __future__ import annotations

import logging
from typing import Final, Protocol

from autologin.automation.errors import KeyboardError


KEY_ENTER: Final[str] = "enter"
KEY_TAB: Final[str] = "tab"

# Delay between typed characters; some login forms drop faster input
DEFAULT_TYPE_INTERVAL: Final[float] = 0.02


class KeyboardBackend(Protocol):
    """Minimal keyboard interface used by the login sequencer."""

    def type_text(self, text: str) -> None: ...

    def press(self, key: str) -> None: ...


class PyAutoGUIKeyboard:
    """
    Keyboard backend built on ``pyautogui``.

    pyautogui is imported on first use because importing it needs a
    display and the rest of the package does not.
    """

    __slots__ = ("_interval", "_log")

    def __init__(self, interval: float = DEFAULT_TYPE_INTERVAL) -> None:
        self._interval = interval
        self._log = logging.getLogger("autologin.automation")

    @staticmethod
    def _pyautogui():
        try:
            import pyautogui
        except Exception as exc:  # no display, missing backend, ...
            raise KeyboardError(f"Keyboard automation is unavailable: {exc}") from exc

        # The login fields need exact input; never abort on a corner mouse.
        pyautogui.FAILSAFE = False
        pyautogui.PAUSE = 0.005
        return pyautogui

    def type_text(self, text: str) -> None:
        gui = self._pyautogui()
        self._log.debug("Typing %d characters", len(text))
        try:
            gui.write(text, interval=self._interval)
        except Exception as exc:
            raise KeyboardError(f"Failed to type text: {exc}") from exc

    def press(self, key: str) -> None:
        gui = self._pyautogui()
        self._log.debug("Pressing %s", key)
        try:
            gui.press(key)
        except Exception as exc:
            raise KeyboardError(f"Failed to press {key}: {exc}") from exc
