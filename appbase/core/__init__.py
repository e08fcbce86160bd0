"""
Core module - Secure data, configuration and logging.
"""

from appbase.core.config import ConfigurationError, ConfigurationFile, LoggingConfig
from appbase.core.logging import SecureLogFilter, configure_logging
from appbase.core.secure_data import SecureData, SecureDataState

__all__ = [
    "ConfigurationError",
    "ConfigurationFile",
    "LoggingConfig",
    "SecureData",
    "SecureDataState",
    "SecureLogFilter",
    "configure_logging",
]
