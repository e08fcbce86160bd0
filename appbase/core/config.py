"""
Configuration Module
====================

Explicit, immutable configuration values for the application scaffold.

Provides:
- LoggingConfig: logging switches built once at startup and passed around
- ConfigurationFile: discovery, loading and saving of the YAML/JSON
  document that holds secure data records
- Environment variable defaults prefixed with APPBASE_

Nothing here is a process-wide singleton; callers construct the values
they need and hand them on.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Final, Iterator, Optional, Sequence

import yaml

from appbase.utils.paths import (
    clean_path,
    clean_search_paths,
    expand_path,
    get_default_config_dir,
)
from appbase.utils.validators import ValidationError, validate_string_safe

logger = logging.getLogger(__name__)

ENV_PREFIX: Final[str] = "APPBASE"

# Keys never taken from the environment as configuration
_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "private", "credential", "salt",
})

LOG_LEVELS: Final[dict[str, int]] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}
LOG_FORMATS: Final[frozenset[str]] = frozenset({"text", "json"})
CONSOLE_TARGET: Final[str] = "console"

DEFAULT_CONFIG_TYPE: Final[str] = "yaml"
SUPPORTED_CONFIG_TYPES: Final[tuple[str, ...]] = ("yaml", "yml", "json")
DEFAULT_SEARCH_PATHS: Final[tuple[str, ...]] = (".", str(get_default_config_dir()))


class ConfigurationError(Exception):
    """Raised when configuration values or files are invalid."""
    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when no configuration file can be located."""
    pass


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_env_overrides(prefix: str = ENV_PREFIX) -> dict[str, str]:
    """
    Collect environment variables with the given prefix.

    ``APPBASE_LOGLEVEL=debug`` becomes ``{"loglevel": "debug"}``. Keys that
    look like secrets are skipped, so a master key exported as
    ``APPBASE_MASTER_KEY`` never leaks into configuration values.
    """
    overrides: dict[str, str] = {}
    prefix_upper = f"{prefix.upper()}_"

    for key, value in os.environ.items():
        if key.startswith(prefix_upper):
            config_key = key[len(prefix_upper):].lower().replace("__", ".")
            if _is_sensitive_key(config_key):
                continue
            overrides[config_key] = value

    return overrides


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """
    Immutable logging configuration.

    Attributes:
        enabled: When False all log output is discarded
        level: error, warn, info or debug; anything else means info
        format: text or json
        target: "console" for stderr, otherwise a log file path
    """

    enabled: bool = False
    level: str = "error"
    format: str = "json"
    target: str = CONSOLE_TARGET

    def __post_init__(self) -> None:
        if self.format.lower() not in LOG_FORMATS:
            raise ConfigurationError(f"invalid logFormat value {self.format}")
        if not self.target:
            raise ConfigurationError("log target cannot be empty")

    @property
    def log_level(self) -> int:
        return LOG_LEVELS.get(self.level.lower(), logging.INFO)

    @property
    def add_source(self) -> bool:
        """Source locations are included at debug level."""
        return self.log_level == logging.DEBUG

    @property
    def is_json(self) -> bool:
        return self.format.lower() == "json"

    @property
    def to_console(self) -> bool:
        return self.target.lower() == CONSOLE_TARGET

    def with_target(self, target: Optional[str]) -> LoggingConfig:
        """Return a copy logging to ``target``, or self if target is empty."""
        if not target:
            return self
        return replace(self, target=target)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> LoggingConfig:
        """
        Build a logging configuration from environment variables.

        Examples:
            APPBASE_LOG=true
            APPBASE_LOGLEVEL=debug
            APPBASE_LOGFORMAT=text
            APPBASE_LOGTARGET=/var/log/appbase.log
        """
        env = _parse_env_overrides(prefix)
        kwargs: dict[str, Any] = {}
        if "log" in env:
            kwargs["enabled"] = _parse_bool(env["log"])
        if "loglevel" in env:
            kwargs["level"] = env["loglevel"]
        if "logformat" in env:
            kwargs["format"] = env["logformat"]
        if "logtarget" in env:
            kwargs["target"] = env["logtarget"]
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class ConfigurationFile:
    """
    Location of the application configuration document.

    A file given with a directory (``./config.yaml``, ``/etc/app/config.yaml``)
    is used as is. A bare file name is looked up in each search path, trying
    its own extension first and then every supported one.
    """

    filename: str
    path: str = ""
    search_paths: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def new(cls, file: str, search_paths: Optional[Sequence[str]] = None) -> ConfigurationFile:
        """
        Split ``file`` into directory and name and clean the search paths.

        Search paths containing ``..`` are dropped.
        """
        directory, filename = os.path.split(file)
        if directory:
            directory = clean_path(directory)
        return cls(
            filename=filename,
            path=directory,
            search_paths=tuple(clean_search_paths(search_paths)),
        )

    def name_and_type(self) -> tuple[str, str]:
        """Return the file name without extension and the config type."""
        stem, ext = os.path.splitext(self.filename)
        config_type = ext.lstrip(".") if ext else DEFAULT_CONFIG_TYPE
        return stem, config_type

    def candidates(self) -> Iterator[Path]:
        """Yield every path that would be tried, in order."""
        if self.path:
            yield Path(self.path) / self.filename
            return

        name, config_type = self.name_and_type()
        types = [config_type] + [t for t in SUPPORTED_CONFIG_TYPES if t != config_type]
        for search_path in self.search_paths:
            base = expand_path(search_path)
            for t in types:
                yield base / f"{name}.{t}"

    def resolve(self) -> Path:
        """
        Locate the configuration file.

        Raises:
            ConfigFileNotFoundError: If no candidate exists
        """
        for candidate in self.candidates():
            logger.debug("Trying config file %s", candidate)
            if candidate.is_file():
                logger.debug("Using config file %s", candidate)
                return candidate
        raise ConfigFileNotFoundError(
            f"config file {self.filename!r} not found "
            f"(searched: {', '.join(self.search_paths) or self.path or '-'})"
        )

    def load(self, path: Optional[Path] = None) -> dict[str, Any]:
        """
        Read and parse the configuration document.

        Args:
            path: Already resolved file, located with :meth:`resolve` if omitted

        Raises:
            ConfigFileNotFoundError: If the file cannot be located
            ConfigurationError: If it cannot be read or parsed
        """
        path = path or self.resolve()
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"could not read {path}: {e}") from e

        try:
            if _config_type(path) == "json":
                data = json.loads(content) if content.strip() else {}
            else:
                data = yaml.safe_load(content) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"could not parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping at the top level")
        return data

    def save(self, data: dict[str, Any], path: Optional[Path] = None) -> Path:
        """
        Write the configuration document back to disk.

        Args:
            data: Document to write
            path: Target path, the resolved file if omitted

        Returns:
            The path written
        """
        target = path or self.resolve()
        if _config_type(target) == "json":
            content = json.dumps(data, indent=2) + "\n"
        else:
            content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"could not write {target}: {e}") from e
        logger.debug("Saved config file %s", target)
        return target


def _config_type(path: Path) -> str:
    config_type = path.suffix.lstrip(".").lower() or DEFAULT_CONFIG_TYPE
    if config_type not in SUPPORTED_CONFIG_TYPES:
        raise ConfigurationError(f"unsupported config type {config_type!r}")
    return config_type


def _split_field_path(field_path: str) -> list[str]:
    try:
        validate_string_safe(field_path, max_length=256, field_name="field path")
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
    parts = field_path.split(".")
    if any(not part for part in parts):
        raise ConfigurationError(f"invalid field path {field_path!r}")
    return parts


_MISSING: Final[Any] = object()


def get_field(document: dict[str, Any], field_path: str, default: Any = _MISSING) -> Any:
    """
    Look up a dotted field path such as ``database.password``.

    Raises:
        ConfigurationError: If any element of the path is missing and no
            default was given
    """
    node: Any = document
    for part in _split_field_path(field_path):
        if not isinstance(node, dict) or part not in node:
            if default is not _MISSING:
                return default
            raise ConfigurationError(f"field {field_path!r} not found")
        node = node[part]
    return node


def set_field(document: dict[str, Any], field_path: str, value: Any) -> None:
    """Assign a dotted field path, creating intermediate mappings."""
    parts = _split_field_path(field_path)
    node = document
    for part in parts[:-1]:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            raise ConfigurationError(f"field {part!r} in {field_path!r} is not a mapping")
        node = child
    node[parts[-1]] = value
