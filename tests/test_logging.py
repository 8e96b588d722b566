"""Tests for secret redaction and logger setup."""

import logging

import pytest

from autologin.core.config import LoggingConfig
from autologin.core.logging import (
    SecureLogFilter,
    configure_root_logger,
    register_secret,
    unregister_secret,
)


def _record(msg, *args):
    return logging.LogRecord("autologin.test", logging.INFO, __file__, 1, msg, args, None)


def _close_handlers(logger):
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def autologin_logger():
    logger = logging.getLogger("autologin")
    yield logger
    _close_handlers(logger)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


class TestSecureLogFilter:

    @pytest.mark.parametrize("message", [
        "password=hunter2",
        "login with PASSWORD: hunter2",
        "pwd='hunter2'",
        "derived_key=hunter2",
        "token: hunter2",
    ])
    def test_assignments_are_redacted(self, message):
        record = _record(message)
        assert SecureLogFilter().filter(record)
        assert "hunter2" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()

    def test_long_hex_is_redacted(self):
        record = _record("key %s", "ab" * 32)
        SecureLogFilter().filter(record)
        assert "ab" * 32 not in record.getMessage()

    def test_plain_messages_untouched(self):
        record = _record("Logging in as %s", "alice")
        SecureLogFilter().filter(record)
        assert record.getMessage() == "Logging in as alice"

    def test_registered_secret_redacted_in_args(self):
        register_secret("correct horse")
        try:
            record = _record("typing %s now", "correct horse")
            SecureLogFilter().filter(record)
            assert record.getMessage() == "typing [REDACTED] now"
        finally:
            unregister_secret("correct horse")

        record = _record("typing %s now", "correct horse")
        SecureLogFilter().filter(record)
        assert record.getMessage() == "typing correct horse now"

    def test_empty_secret_is_ignored(self):
        register_secret("")
        record = _record("nothing to hide")
        SecureLogFilter().filter(record)
        assert record.getMessage() == "nothing to hide"


def test_log_file_is_filtered(tmp_path, autologin_logger):
    config = LoggingConfig(level="INFO", enable_console=False, enable_file=True)

    configure_root_logger(config, log_dir=tmp_path)
    logging.getLogger("autologin.cli").info("user alice password=hunter2")
    content = (tmp_path / "autologin.log").read_text(encoding="utf-8")

    assert "user alice" in content
    assert "hunter2" not in content
    assert "password=[REDACTED]" in content


def test_configure_root_logger(tmp_path, autologin_logger):
    config = LoggingConfig(level="WARNING", enable_console=False, enable_file=True)

    configure_root_logger(config, log_dir=tmp_path, level="DEBUG")
    logging.getLogger("autologin.vault").debug("Saved credentials for %s", "alice")

    assert autologin_logger.level == logging.DEBUG
    assert not autologin_logger.propagate
    assert "Saved credentials for alice" in (tmp_path / "autologin.log").read_text(encoding="utf-8")


def test_configure_root_logger_replaces_handlers(tmp_path, autologin_logger):
    config = LoggingConfig(enable_console=True, enable_file=False)

    configure_root_logger(config)
    configure_root_logger(config)

    assert len(autologin_logger.handlers) == 1
    assert autologin_logger.level == logging.WARNING
