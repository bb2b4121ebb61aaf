"""
Homebrew — locate ``brew`` and install formulae with it.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from dotctl.adapters.shell.command import run_command
from dotctl.core.errors import DependencyMissingError, InstallFailedError

logger = logging.getLogger(__name__)

HOMEBREW_PATHS = (
    "/opt/homebrew/bin/brew",                # Apple Silicon
    "/usr/local/bin/brew",                   # Intel Mac
    "/home/linuxbrew/.linuxbrew/bin/brew",   # Linuxbrew
)

HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

_INSTALL_TIMEOUT = 1800


def detect_homebrew() -> Path | None:
    """Path of the ``brew`` binary, checking the standard prefixes first."""
    for candidate in HOMEBREW_PATHS:
        path = Path(candidate)
        if path.exists():
            return path
    found = shutil.which("brew")
    return Path(found) if found else None


def is_installed() -> bool:
    return detect_homebrew() is not None


def install_homebrew() -> None:
    """Run the official Homebrew installer (no-op if already present)."""
    if is_installed():
        logger.info("Homebrew already installed")
        return

    logger.info("Installing Homebrew")
    result = run_command(
        ["/bin/bash", "-c", f'NONINTERACTIVE=1 /bin/bash -c "$(curl -fsSL {HOMEBREW_INSTALL_URL})"'],
        timeout=_INSTALL_TIMEOUT,
    )
    if not result["ok"]:
        raise InstallFailedError(f"Homebrew installation failed: {result['error']}")


def _brew() -> str:
    brew = detect_homebrew()
    if brew is None:
        raise DependencyMissingError("Homebrew")
    return str(brew)


def is_package_installed(package: str) -> bool:
    """True if ``brew list`` knows ``package``. False when brew is missing."""
    brew = detect_homebrew()
    if brew is None:
        return False
    # Tap formulae (owner/tap/name) are listed by their short name
    name = package.rsplit("/", 1)[-1]
    return run_command([str(brew), "list", name], timeout=60)["ok"]


def install_package(package: str) -> None:
    """``brew install <package>``.

    Raises:
        DependencyMissingError: If Homebrew is not installed.
        InstallFailedError: If brew exits non-zero.
    """
    brew = _brew()
    logger.info("Installing %s", package)
    result = run_command([brew, "install", package], timeout=_INSTALL_TIMEOUT)
    if not result["ok"]:
        detail = (result.get("stderr") or result["error"]).strip()
        raise InstallFailedError(f"Failed to install {package}: {detail}")
