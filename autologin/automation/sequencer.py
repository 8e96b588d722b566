"""
Login Sequencer
===============

Drives the external client through one login attempt:

    IDLE -> POST_LAUNCH_DELAY -> WAIT_WINDOW -> INJECT -> DONE
                                      |
                                      +--> ABORTED (timeout)

1. Launch the client process.
2. Sleep briefly, then press Enter to dismiss a splash or dialog.
3. Race a window poller against the timeout.
4. On "found": type username, Tab, password, Enter.
   On timeout: stop, inject nothing, leave the process running.

There are no retries. Every failure aborts the rest of the sequence.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional, Sequence

from autologin.automation.errors import WindowNotFoundError
from autologin.automation.keyboard import KEY_ENTER, KEY_TAB, KeyboardBackend, PyAutoGUIKeyboard
from autologin.automation.launcher import ProcessHandle, ProcessLauncher
from autologin.automation.windows import PyAutoGUIWindowSource, WindowSource, wait_for_window
from autologin.core.config import LauncherConfig
from autologin.core.logging import register_secret, unregister_secret


class LoginState(Enum):
    """States of a login attempt."""
    IDLE = auto()
    POST_LAUNCH_DELAY = auto()
    WAIT_WINDOW = auto()
    INJECT = auto()
    DONE = auto()
    ABORTED = auto()


@dataclass
class LoginSession:
    """
    One login attempt. Not persisted.

    ``deadline`` is a ``time.monotonic()`` value set when the window wait
    starts.
    """
    window_title: str
    process: Optional[ProcessHandle] = None
    deadline: Optional[float] = None
    window_handle: Optional[Any] = None
    state: LoginState = LoginState.IDLE
    history: list[LoginState] = field(default_factory=lambda: [LoginState.IDLE])

    def transition(self, state: LoginState) -> None:
        self.state = state
        self.history.append(state)

    @property
    def succeeded(self) -> bool:
        return self.state is LoginState.DONE


class LoginSequencer:
    """
    Launches the client and types a username and password into it.

    Usage:
        sequencer = LoginSequencer.from_config(config.launcher)
        session = sequencer.run("alice", "secret")

    The launcher, keyboard, window source and sleep function are injected
    so the sequence can run against fakes.
    """

    def __init__(
        self,
        executable_path: str,
        launch_args: Sequence[str] = (),
        window_title: str = "Riot Client Main",
        window_timeout: float = 60.0,
        poll_interval: float = 0.5,
        post_launch_delay: float = 0.5,
        launcher: Optional[ProcessLauncher] = None,
        keyboard: Optional[KeyboardBackend] = None,
        window_source: Optional[WindowSource] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._executable_path = executable_path
        self._launch_args = tuple(launch_args)
        self._window_title = window_title
        self._window_timeout = window_timeout
        self._poll_interval = poll_interval
        self._post_launch_delay = post_launch_delay
        self._launcher = launcher or ProcessLauncher()
        self._keyboard = keyboard or PyAutoGUIKeyboard()
        self._window_source = window_source or PyAutoGUIWindowSource()
        self._sleep = sleep
        self._log = logging.getLogger("autologin.automation")

    @classmethod
    def from_config(cls, config: LauncherConfig, **overrides: Any) -> LoginSequencer:
        return cls(
            executable_path=config.executable_path,
            launch_args=config.launch_args,
            window_title=config.window_title,
            window_timeout=config.window_timeout_seconds,
            poll_interval=config.poll_interval_seconds,
            post_launch_delay=config.post_launch_delay_seconds,
            **overrides,
        )

    def run(self, username: str, password: str) -> LoginSession:
        """
        Run the whole login sequence.

        Returns:
            The finished session, in state DONE

        Raises:
            LaunchFailedError: If the client could not be started
            WindowNotFoundError: If the window did not appear in time
                (the session is ABORTED and nothing was typed)
            WindowSearchError: If the window search failed
            KeyboardError: If keystrokes could not be sent
        """
        session = LoginSession(window_title=self._window_title)

        session.process = self._launcher.launch(self._executable_path, self._launch_args)

        session.transition(LoginState.POST_LAUNCH_DELAY)
        self._sleep(self._post_launch_delay)
        self._keyboard.press(KEY_ENTER)

        session.transition(LoginState.WAIT_WINDOW)
        session.deadline = time.monotonic() + self._window_timeout
        result = wait_for_window(
            self._window_source,
            self._window_title,
            timeout=self._window_timeout,
            poll_interval=self._poll_interval,
        )
        if not result.found:
            session.transition(LoginState.ABORTED)
            raise WindowNotFoundError(self._window_title, self._window_timeout, session=session)

        session.window_handle = result.handle
        session.transition(LoginState.INJECT)
        self._inject(username, password)

        session.transition(LoginState.DONE)
        self._log.info("Credentials for '%s' sent to '%s'", username, self._window_title)
        return session

    def _inject(self, username: str, password: str) -> None:
        register_secret(password)
        try:
            self._keyboard.type_text(username)
            self._keyboard.press(KEY_TAB)
            self._keyboard.type_text(password)
            self._keyboard.press(KEY_ENTER)
        finally:
            unregister_secret(password)
