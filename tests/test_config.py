"""Tests for configuration loading, validation and immutability."""

import dataclasses
import os
from pathlib import Path

import pytest

from autologin.core.config import (
    DEFAULT_LAUNCH_ARGS,
    AutologinConfig,
    KdfConfig,
    LauncherConfig,
    LoggingConfig,
    PathConfig,
    VaultConfig,
)

from conftest import make_config


def test_defaults():
    config = AutologinConfig()

    assert config.launcher.executable_path.endswith("RiotClientServices.exe")
    assert config.launcher.launch_args == DEFAULT_LAUNCH_ARGS
    assert config.launcher.window_title == "Riot Client Main"
    assert config.launcher.window_timeout_seconds == 60.0
    assert config.launcher.poll_interval_seconds == 0.5
    assert config.vault.encoding == "plaintext"
    assert config.vault.retention_days == 30
    assert config.kdf.algorithm == "argon2id"


def test_derived_paths(tmp_path):
    paths = PathConfig(data_dir=tmp_path / "data", log_dir=tmp_path / "logs")

    assert paths.vault_file == tmp_path / "data" / "credentials.json"
    assert paths.default_user_file == tmp_path / "data" / "default_user.txt"
    assert paths.salt_file == tmp_path / "data" / "kdf_salt.bin"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AUTOLOGIN_PATHS__DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("AUTOLOGIN_PATHS__LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("AUTOLOGIN_LAUNCHER__EXECUTABLE_PATH", "/usr/bin/client")
    monkeypatch.setenv("AUTOLOGIN_LAUNCHER__LAUNCH_ARGS", "--one --two")
    monkeypatch.setenv("AUTOLOGIN_LAUNCHER__WINDOW_TIMEOUT_SECONDS", "90")
    monkeypatch.setenv("AUTOLOGIN_VAULT__ENCODING", "DERIVED-KEY")
    monkeypatch.setenv("AUTOLOGIN_KDF__TIME_COST", "2")
    monkeypatch.setenv("AUTOLOGIN_LOGGING__LEVEL", "debug")
    monkeypatch.setenv("AUTOLOGIN_LOGGING__ENABLE_FILE", "true")

    config = AutologinConfig.load()

    assert config.paths.data_dir == tmp_path / "data"
    assert config.launcher.executable_path == "/usr/bin/client"
    assert config.launcher.launch_args == ("--one", "--two")
    assert config.launcher.window_timeout_seconds == 90.0
    assert config.vault.encoding == "derived-key"
    assert config.kdf.time_cost == 2
    assert config.logging.level == "DEBUG"
    assert config.logging.enable_file is True


def test_sensitive_keys_are_not_read_from_environment(monkeypatch):
    monkeypatch.setenv("AUTOLOGIN_KDF__SALT_LENGTH", "4")
    monkeypatch.setenv("AUTOLOGIN_VAULT__PASSWORD", "hunter2")

    assert AutologinConfig._parse_env_overrides("AUTOLOGIN") == {}
    assert AutologinConfig.load().kdf.salt_length == 16


def test_custom_prefix(monkeypatch):
    monkeypatch.setenv("MYAPP_LAUNCHER__WINDOW_TITLE", "Other Client")
    assert AutologinConfig.load(env_prefix="MYAPP").launcher.window_title == "Other Client"


def test_invalid_override_is_rejected(monkeypatch):
    monkeypatch.setenv("AUTOLOGIN_VAULT__ENCODING", "rot13")
    with pytest.raises(ValueError, match="Invalid vault encoding"):
        AutologinConfig.load()


@pytest.mark.parametrize("factory", [
    lambda: PathConfig(data_dir=Path("relative"), log_dir=Path("/abs")),
    lambda: KdfConfig(algorithm="md5"),
    lambda: KdfConfig(time_cost=0),
    lambda: KdfConfig(memory_cost=8, parallelism=4),
    lambda: KdfConfig(salt_length=4),
    lambda: VaultConfig(retention_days=0),
    lambda: LauncherConfig(executable_path=""),
    lambda: LauncherConfig(window_timeout_seconds=0),
    lambda: LauncherConfig(poll_interval_seconds=-1),
    lambda: LauncherConfig(post_launch_delay_seconds=-0.1),
    lambda: LoggingConfig(level="LOUD"),
])
def test_validation(factory):
    with pytest.raises(ValueError):
        factory()


def test_config_is_immutable(config):
    with pytest.raises(AttributeError):
        config.launcher = LauncherConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.launcher.window_title = "Other"


def test_config_hash_tracks_content(tmp_path):
    assert make_config(tmp_path).config_hash == make_config(tmp_path).config_hash
    assert make_config(tmp_path).config_hash != make_config(tmp_path, encoding="derived-key").config_hash
    assert repr(make_config(tmp_path)).startswith("AutologinConfig(hash=")


def test_ensure_directories(config):
    config.ensure_directories()

    assert config.paths.data_dir.is_dir()
    assert config.paths.log_dir.is_dir()
    if os.name != "nt":
        assert config.paths.data_dir.stat().st_mode & 0o777 == 0o700
