"""
Git repositories — clone the dotfiles repo and helper repos.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotctl.adapters.shell.command import run_command
from dotctl.core.errors import InstallFailedError

logger = logging.getLogger(__name__)

TPM_URL = "https://github.com/tmux-plugins/tpm"

_CLONE_TIMEOUT = 600


def is_git_repo(path: Path) -> bool:
    return (path / ".git").exists()


def clone_repo(url: str, target: Path, *, name: str = "repository") -> bool:
    """``git clone url target``.

    Returns:
        True if cloned, False if ``target`` already existed (no-op).

    Raises:
        InstallFailedError: If git is missing or the clone fails.
    """
    if target.exists():
        logger.info("%s already exists at %s", name, target)
        return False

    target.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Cloning %s from %s into %s", name, url, target)
    result = run_command(["git", "clone", url, str(target)], timeout=_CLONE_TIMEOUT)
    if not result["ok"]:
        detail = (result.get("stderr") or result["error"]).strip()
        raise InstallFailedError(f"Failed to clone {name}: {detail}")
    return True


def tpm_path(home_dir: Path) -> Path:
    return home_dir / ".tmux" / "plugins" / "tpm"

