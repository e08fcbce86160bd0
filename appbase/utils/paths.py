"""
Path Utilities
==============

Cleaning and expansion of configuration search paths.
"""

from __future__ import annotations

import os
import platform
import posixpath
from pathlib import Path
from typing import Iterable


def clean_path(path: str) -> str:
    """
    Lexically clean a path.

    Duplicate and trailing separators and ``.`` elements are removed, and
    a leading ``//`` collapses to a single ``/``. Environment references
    such as ``$PWD`` are left untouched.
    """
    if not path:
        return "."
    cleaned = posixpath.normpath(path.replace(os.sep, "/"))
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def clean_search_paths(paths: Iterable[str] | None) -> list[str]:
    """
    Clean a list of search paths, dropping any that contain ``..``.

    Args:
        paths: Candidate search paths, possibly None

    Returns:
        Cleaned paths in their original order
    """
    return [clean_path(p) for p in (paths or []) if ".." not in p]


def expand_path(path: str) -> Path:
    """Expand ``~`` and environment variables in a search path."""
    return Path(os.path.expandvars(os.path.expanduser(path)))


def get_default_config_dir(app_name: str = "appbase") -> Path:
    """
    Get the OS-appropriate configuration directory for the application.

    Args:
        app_name: Name of the application

    Returns:
        Path to the application configuration directory
    """
    system = platform.system().lower()

    if system == "windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif system == "darwin":
        base = Path.home() / "Library" / "Preferences"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    return base / app_name
