"""
Core module - Configuration, logging, credential storage and verification.
"""

from autologin.core.config import AutologinConfig
from autologin.core.logging import configure_root_logger, SecureLogFilter

__all__ = ["AutologinConfig", "configure_root_logger", "SecureLogFilter"]
