"""
Autologin Configuration Module
==============================

Provides immutable, environment-aware configuration for the vault,
the key derivation function and the login automation.

Features:
- Immutable configuration after initialization
- Environment variable override support
- No secrets in default values
- OS-aware path handling
"""

from __future__ import annotations

import hashlib
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Any, Optional


# Keys that are never read from the environment
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "token", "credential", "salt",
})

CREDENTIALS_FILE_NAME: Final[str] = "credentials.json"
DEFAULT_USER_FILE_NAME: Final[str] = "default_user.txt"
SALT_FILE_NAME: Final[str] = "kdf_salt.bin"

DEFAULT_EXECUTABLE_PATH: Final[str] = r"C:\Riot Games\Riot Client\RiotClientServices.exe"
DEFAULT_LAUNCH_ARGS: Final[tuple[str, ...]] = (
    "--launch-product=league_of_legends",
    "--launch-patchline=live",
)
DEFAULT_WINDOW_TITLE: Final[str] = "Riot Client Main"

ENCODING_PLAINTEXT: Final[str] = "plaintext"
ENCODING_DERIVED_KEY: Final[str] = "derived-key"


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _get_default_data_dir() -> Path:
    """Get OS-appropriate default data directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
    elif system == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:  # Linux and others
        base = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))

    return base / "Autologin"


def _get_default_log_dir() -> Path:
    """Get OS-appropriate default log directory."""
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return base / "Autologin" / "Logs"
    elif system == "darwin":
        return Path.home() / "Library" / "Logs" / "Autologin"
    else:  # Linux and others
        return Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state")) / "Autologin" / "logs"


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Immutable path configuration with OS-aware defaults."""

    data_dir: Path = field(default_factory=_get_default_data_dir)
    log_dir: Path = field(default_factory=_get_default_log_dir)

    def __post_init__(self) -> None:
        """Validate paths after initialization."""
        for field_name in ["data_dir", "log_dir"]:
            path = getattr(self, field_name)
            if not path.is_absolute():
                raise ValueError(f"{field_name} must be an absolute path: {path}")

    @property
    def vault_file(self) -> Path:
        return self.data_dir / CREDENTIALS_FILE_NAME

    @property
    def default_user_file(self) -> Path:
        return self.data_dir / DEFAULT_USER_FILE_NAME

    @property
    def salt_file(self) -> Path:
        return self.data_dir / SALT_FILE_NAME


@dataclass(frozen=True, slots=True)
class KdfConfig:
    """
    Immutable key derivation configuration.

    The cost factors trade login latency for brute-force resistance.
    ``memory_cost`` is in KiB.
    """

    algorithm: str = "argon2id"
    time_cost: int = 3
    memory_cost: int = 65536  # 64 MB
    parallelism: int = 4
    hash_length: int = 32
    salt_length: int = 16

    def __post_init__(self) -> None:
        """Validate KDF settings."""
        if self.algorithm not in {"argon2id", "scrypt"}:
            raise ValueError(f"Unsupported KDF algorithm: {self.algorithm}")
        if self.time_cost < 1:
            raise ValueError("time_cost must be at least 1")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("memory_cost must be at least 8 KiB per lane")
        if self.parallelism < 1:
            raise ValueError("parallelism must be at least 1")
        if self.hash_length < 16:
            raise ValueError("hash_length must be at least 16 bytes")
        if self.salt_length < 8:
            raise ValueError("salt_length must be at least 8 bytes")


@dataclass(frozen=True, slots=True)
class VaultConfig:
    """Immutable vault configuration."""

    encoding: str = ENCODING_PLAINTEXT
    retention_days: int = 30

    def __post_init__(self) -> None:
        """Validate vault settings."""
        if self.encoding not in {ENCODING_PLAINTEXT, ENCODING_DERIVED_KEY}:
            raise ValueError(f"Invalid vault encoding: {self.encoding}")
        if self.retention_days < 1:
            raise ValueError("retention_days must be at least 1")


@dataclass(frozen=True, slots=True)
class LauncherConfig:
    """Immutable configuration of the external client and the login automation."""

    executable_path: str = DEFAULT_EXECUTABLE_PATH
    launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS
    window_title: str = DEFAULT_WINDOW_TITLE
    window_timeout_seconds: float = 60.0
    poll_interval_seconds: float = 0.5
    post_launch_delay_seconds: float = 0.5

    def __post_init__(self) -> None:
        """Validate automation timings."""
        if not self.executable_path:
            raise ValueError("executable_path cannot be empty")
        if not self.window_title:
            raise ValueError("window_title cannot be empty")
        if self.window_timeout_seconds <= 0:
            raise ValueError("window_timeout_seconds must be positive")
        if self.poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        if self.post_launch_delay_seconds < 0:
            raise ValueError("post_launch_delay_seconds cannot be negative")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5
    enable_console: bool = True
    enable_file: bool = False

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Immutable application configuration."""

    app_name: str = "Autologin"
    version: str = "0.1.0"


class AutologinConfig:
    """
    Immutable configuration with environment override support.

    Built once at startup and passed down to the vault, the pointer and
    the sequencer. Nothing reads it from a module global.

    Usage:
        config = AutologinConfig.load()
        vault_path = config.paths.vault_file
        timeout = config.launcher.window_timeout_seconds
    """

    __slots__ = (
        "_paths", "_kdf", "_vault", "_launcher", "_logging", "_app",
        "_frozen", "_config_hash",
    )

    def __init__(
        self,
        paths: Optional[PathConfig] = None,
        kdf: Optional[KdfConfig] = None,
        vault: Optional[VaultConfig] = None,
        launcher: Optional[LauncherConfig] = None,
        logging: Optional[LoggingConfig] = None,
        app: Optional[AppConfig] = None,
    ) -> None:
        """Initialize configuration. Use AutologinConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_paths", paths or PathConfig())
        object.__setattr__(self, "_kdf", kdf or KdfConfig())
        object.__setattr__(self, "_vault", vault or VaultConfig())
        object.__setattr__(self, "_launcher", launcher or LauncherConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_app", app or AppConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Compute a short fingerprint of the configuration."""
        config_str = (
            f"{self._paths}|{self._kdf}|{self._vault}|"
            f"{self._launcher}|{self._logging}|{self._app}"
        )
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def paths(self) -> PathConfig:
        return self._paths

    @property
    def kdf(self) -> KdfConfig:
        return self._kdf

    @property
    def vault(self) -> VaultConfig:
        return self._vault

    @property
    def launcher(self) -> LauncherConfig:
        return self._launcher

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def app(self) -> AppConfig:
        return self._app

    @property
    def config_hash(self) -> str:
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "AUTOLOGIN") -> AutologinConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables use the AUTOLOGIN_ prefix and double
        underscores between section and key.

        Examples:
            AUTOLOGIN_PATHS__DATA_DIR=/custom/path
            AUTOLOGIN_LAUNCHER__WINDOW_TIMEOUT_SECONDS=90
            AUTOLOGIN_VAULT__ENCODING=derived-key
            AUTOLOGIN_LOGGING__LEVEL=DEBUG

        Args:
            env_prefix: Prefix for environment variables (default: AUTOLOGIN)

        Returns:
            Configured AutologinConfig instance
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        paths_kwargs: dict[str, Any] = {}
        if "paths.data_dir" in env_overrides:
            paths_kwargs["data_dir"] = Path(env_overrides["paths.data_dir"])
        if "paths.log_dir" in env_overrides:
            paths_kwargs["log_dir"] = Path(env_overrides["paths.log_dir"])

        kdf_kwargs: dict[str, Any] = {}
        if "kdf.algorithm" in env_overrides:
            kdf_kwargs["algorithm"] = env_overrides["kdf.algorithm"].lower()
        for name in ("time_cost", "memory_cost", "parallelism", "hash_length"):
            if f"kdf.{name}" in env_overrides:
                kdf_kwargs[name] = int(env_overrides[f"kdf.{name}"])

        vault_kwargs: dict[str, Any] = {}
        if "vault.encoding" in env_overrides:
            vault_kwargs["encoding"] = env_overrides["vault.encoding"].lower()
        if "vault.retention_days" in env_overrides:
            vault_kwargs["retention_days"] = int(env_overrides["vault.retention_days"])

        launcher_kwargs: dict[str, Any] = {}
        if "launcher.executable_path" in env_overrides:
            launcher_kwargs["executable_path"] = env_overrides["launcher.executable_path"]
        if "launcher.launch_args" in env_overrides:
            launcher_kwargs["launch_args"] = tuple(env_overrides["launcher.launch_args"].split())
        if "launcher.window_title" in env_overrides:
            launcher_kwargs["window_title"] = env_overrides["launcher.window_title"]
        for name in (
            "window_timeout_seconds",
            "poll_interval_seconds",
            "post_launch_delay_seconds",
        ):
            if f"launcher.{name}" in env_overrides:
                launcher_kwargs[name] = float(env_overrides[f"launcher.{name}"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() == "true"
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() == "true"

        return cls(
            paths=PathConfig(**paths_kwargs) if paths_kwargs else None,
            kdf=KdfConfig(**kdf_kwargs) if kdf_kwargs else None,
            vault=VaultConfig(**vault_kwargs) if vault_kwargs else None,
            launcher=LauncherConfig(**launcher_kwargs) if launcher_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # AUTOLOGIN_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    def ensure_directories(self) -> None:
        """Create the data and log directories with owner-only permissions."""
        import stat

        for directory in (self._paths.data_dir, self._paths.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

            if platform.system().lower() != "windows":
                directory.chmod(stat.S_IRWXU)  # 700 - owner only

    def __repr__(self) -> str:
        return f"AutologinConfig(hash={self._config_hash}, app={self._app.app_name})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("AutologinConfig is immutable after initialization")
        super().__setattr__(name, value)
