"""
Detection service — what OS and tools this machine has.

Read-only probes. No side effects.
"""

from __future__ import annotations

import platform
import shutil

MACOS = "macos"
LINUX = "linux"
UNKNOWN = "unknown"


def detect_os() -> str:
    """Return ``"macos"``, ``"linux"`` or ``"unknown"``."""
    system = platform.system()
    if system == "Darwin":
        return MACOS
    if system == "Linux":
        return LINUX
    return UNKNOWN


def is_macos() -> bool:
    return detect_os() == MACOS


def tool_path(tool: str) -> str | None:
    """Absolute path of ``tool`` on PATH, or None."""
    return shutil.which(tool)


def is_installed(tool: str) -> bool:
    return tool_path(tool) is not None
