"""
Secure Logging Module
=====================

Logging with secret filtering for a tool that handles plaintext passwords.

Features:
- Pattern-based redaction of password/secret/token assignments
- Exact-value redaction of secrets registered at runtime
- Rotating log files with size limits
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Pattern

from autologin.core.config import LoggingConfig


_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)(secret|derived[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("token", re.compile(r'(?i)(token|bearer)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    # Hex encoded keys (longer than 32 chars)
    ("hex_secret", re.compile(r'(?i)(?:0x)?[a-f0-9]{32,}')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"
_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_FILE_LOG_FORMAT: Final[str] = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)

_registered_secrets: set[str] = set()
_registered_lock = threading.Lock()


def register_secret(value: str) -> None:
    """
    Redact every later occurrence of ``value`` in log output.

    Used for the password while it is being typed into the client.
    """
    if not value:
        return
    with _registered_lock:
        _registered_secrets.add(value)


def unregister_secret(value: str) -> None:
    with _registered_lock:
        _registered_secrets.discard(value)


class SecureLogFilter(logging.Filter):
    """
    Redacts secrets from a record's message and string arguments.

    Two passes: exact registered values first (longest first, so a
    password containing another registered value is fully hidden), then
    the assignment patterns. Records are modified in place, never dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        if isinstance(record.args, dict):
            record.args = {key: self._clean(value) for key, value in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(self._clean(arg) for arg in record.args)

        return True

    def _clean(self, value: object) -> object:
        return self._sanitize(value) if isinstance(value, str) else value

    @staticmethod
    def _sanitize(text: str) -> str:
        with _registered_lock:
            secrets = sorted(_registered_secrets, key=len, reverse=True)
        for secret in secrets:
            text = text.replace(secret, _REDACTED_TEXT)

        for label, pattern in _SENSITIVE_PATTERNS:
            text = pattern.sub(f"{label}={_REDACTED_TEXT}", text)
        return text


class SecureRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that creates its directory and rejects
    traversal in the log path.
    """

    def __init__(
        self,
        filename: str | Path,
        mode: str = "a",
        maxBytes: int = 10 * 1024 * 1024,
        backupCount: int = 5,
        encoding: str = "utf-8",
    ) -> None:
        if ".." in Path(filename).parts:
            raise ValueError("Log path cannot contain path traversal sequences")

        log_path = Path(filename).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            str(log_path),
            mode=mode,
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
        )


def configure_root_logger(
    config: LoggingConfig,
    log_dir: Optional[Path] = None,
    level: Optional[str] = None,
) -> None:
    """
    Configure the ``autologin`` logger hierarchy once at startup.

    Args:
        config: Logging configuration
        log_dir: Directory for the rotating log file
        level: Overrides ``config.level`` (used by --verbose)
    """
    root_logger = logging.getLogger("autologin")
    root_logger.setLevel(getattr(logging, (level or config.level).upper()))
    root_logger.handlers.clear()

    _attach_handlers(
        root_logger,
        log_file=(log_dir / "autologin.log") if (config.enable_file and log_dir) else None,
        enable_console=config.enable_console,
        max_file_size=config.max_file_size_bytes,
        backup_count=config.backup_count,
    )
    root_logger.propagate = False


def _attach_handlers(
    logger: logging.Logger,
    log_file: Optional[Path],
    enable_console: bool,
    max_file_size: int,
    backup_count: int,
) -> None:
    secure_filter = SecureLogFilter()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%H:%M:%S"))
        console_handler.addFilter(secure_filter)
        logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = SecureRotatingFileHandler(
            filename=log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.addFilter(secure_filter)
        logger.addHandler(file_handler)
