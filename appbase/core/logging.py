"""
Logging Module
==============

Builds the application logger from an explicit LoggingConfig.

Features:
- Logging disabled by default; a disabled config discards everything
- Text or JSON (structured) output
- Console (stderr) or file target
- Source locations at debug level
- Automatic redaction of secret-looking values, hex keys included
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Final, Optional, Pattern, TextIO

from appbase.core.config import ConfigurationError, LoggingConfig

APP_LOGGER_NAME: Final[str] = "appbase"

# Patterns for sensitive data detection
_SENSITIVE_PATTERNS: Final[list[tuple[str, Pattern[str]]]] = [
    ("password", re.compile(r'(?i)(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("secret", re.compile(r'(?i)(secret|master[_-]?key|private[_-]?key)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    ("token", re.compile(r'(?i)(token|bearer)\s*[=:]\s*["\']?[^\s"\']+["\']?')),
    # Hex encoded keys, nonces and payloads (32 chars or longer)
    ("hex_secret", re.compile(r'(?i)\b(?:0x)?[a-f0-9]{32,}\b')),
]

_REDACTED_TEXT: Final[str] = "[REDACTED]"

_TEXT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_TEXT_FORMAT_SOURCE: Final[str] = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


class SecureLogFilter(logging.Filter):
    """
    Log filter that removes sensitive information from log messages.

    Records are always kept, only sanitized.
    """

    def __init__(self, name: str = "", additional_patterns: Optional[list[Pattern[str]]] = None) -> None:
        super().__init__(name)
        self._additional_patterns = additional_patterns or []

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg and isinstance(record.msg, str):
            record.msg = self._sanitize(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self._sanitize(v) if isinstance(v, str) else v
                               for k, v in record.args.items()}
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._sanitize(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True

    def _sanitize(self, text: str) -> str:
        result = text
        for name, pattern in _SENSITIVE_PATTERNS:
            result = pattern.sub(f"{name}={_REDACTED_TEXT}", result)
        for pattern in self._additional_patterns:
            result = pattern.sub(_REDACTED_TEXT, result)
        return result


class StructuredLogFormatter(logging.Formatter):
    """
    Formatter that outputs one JSON object per record.

    Source fields are only emitted when ``add_source`` is set.
    """

    def __init__(self, add_source: bool = False) -> None:
        super().__init__()
        self._add_source = add_source

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if self._add_source:
            log_data["source"] = {
                "module": record.module,
                "function": record.funcName,
                "line": record.lineno,
            }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def _open_target(config: LoggingConfig, stream: Optional[TextIO]) -> logging.Handler:
    if config.to_console:
        return logging.StreamHandler(stream or sys.stderr)

    log_path = Path(config.target).expanduser().resolve()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, mode="a", encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"could not open log target {config.target}: {e}") from e


def configure_logging(
    config: LoggingConfig,
    stream: Optional[TextIO] = None,
    name: str = APP_LOGGER_NAME,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Module loggers below ``name`` (``appbase.core.secure_data`` and so on)
    propagate into it. Calling this again replaces the previous handlers.

    Args:
        config: Logging configuration value
        stream: Console stream override, stderr if omitted
        name: Logger name

    Returns:
        The configured logger

    Raises:
        ConfigurationError: If a file target cannot be opened
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Prevent propagation to root logger
    logger.propagate = False

    if not config.enabled:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    logger.setLevel(config.log_level)

    handler = _open_target(config, stream)
    handler.setLevel(config.log_level)
    if config.is_json:
        handler.setFormatter(StructuredLogFormatter(add_source=config.add_source))
    else:
        handler.setFormatter(logging.Formatter(
            _TEXT_FORMAT_SOURCE if config.add_source else _TEXT_FORMAT,
            datefmt=_DATE_FORMAT,
        ))
    handler.addFilter(SecureLogFilter())
    logger.addHandler(handler)

    return logger
