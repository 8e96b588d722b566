"""
Shared pytest fixtures for the autologin test suite.

Every test gets a configuration rooted in its own temp directory, cheap
KDF parameters and fast automation timings. AUTOLOGIN_* environment
variables are removed so a developer's overrides never leak in.
"""

import os
import threading
import time

import pytest

from autologin.automation.errors import LaunchFailedError
from autologin.core.config import (
    AutologinConfig,
    KdfConfig,
    LauncherConfig,
    LoggingConfig,
    PathConfig,
    VaultConfig,
)


FAST_KDF = KdfConfig(time_cost=1, memory_cost=1024, parallelism=1, hash_length=32, salt_length=16)


@pytest.fixture(autouse=True)
def _clear_autologin_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("AUTOLOGIN_"):
            monkeypatch.delenv(key, raising=False)


def make_config(tmp_path, encoding="plaintext", **launcher_overrides):
    launcher_kwargs = dict(
        executable_path="/opt/client/RiotClientServices",
        window_title="Riot Client Main",
        window_timeout_seconds=1.0,
        poll_interval_seconds=0.05,
        post_launch_delay_seconds=0.0,
    )
    launcher_kwargs.update(launcher_overrides)
    return AutologinConfig(
        paths=PathConfig(data_dir=tmp_path / "data", log_dir=tmp_path / "logs"),
        kdf=FAST_KDF,
        vault=VaultConfig(encoding=encoding),
        launcher=LauncherConfig(**launcher_kwargs),
        logging=LoggingConfig(enable_console=False, enable_file=False),
    )


@pytest.fixture
def config(tmp_path):
    return make_config(tmp_path)


@pytest.fixture
def vault_path(tmp_path):
    return tmp_path / "credentials.json"


class FakeProcess:
    pid = 4242

    def poll(self):
        return None


class FakeLauncher:
    """Records launches instead of starting processes."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def launch(self, executable_path, args=()):
        self.calls.append((executable_path, tuple(args)))
        if self.fail:
            raise LaunchFailedError(f"Failed to start {executable_path}: not found")
        return FakeProcess()


class FakeKeyboard:
    """Records keystrokes as ("type", text) and ("press", key) events."""

    def __init__(self, fail_on=None):
        self.events = []
        self.fail_on = fail_on

    def type_text(self, text):
        self.events.append(("type", text))

    def press(self, key):
        if self.fail_on == key:
            from autologin.automation.errors import KeyboardError
            raise KeyboardError(f"Failed to press {key}")
        self.events.append(("press", key))


class FakeWindowSource:
    """
    Reports a window ``appear_after`` seconds after construction.

    ``appear_after=None`` means the window never appears.
    """

    def __init__(self, appear_after=0.0, title="Riot Client Main", handle="hwnd-1"):
        self.appear_after = appear_after
        self.title = title
        self.handle = handle
        self.calls = 0
        self._lock = threading.Lock()
        self._created = time.monotonic()

    def find_window(self, title):
        with self._lock:
            self.calls += 1
        if self.appear_after is None or title != self.title:
            return None
        if time.monotonic() - self._created >= self.appear_after:
            return self.handle
        return None


@pytest.fixture
def fake_launcher():
    return FakeLauncher()


@pytest.fixture
def fake_keyboard():
    return FakeKeyboard()
