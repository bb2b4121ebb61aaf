"""
Shell rc wiring — make sure a helper script is sourced from ~/.zshrc.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER = "added by dotctl"


def is_script_sourced(content: str, script_path: Path) -> bool:
    """True if ``content`` has ``source <path>`` or ``. <path>``."""
    script = str(script_path)
    return f"source {script}" in content or f". {script}" in content


def ensure_script_sourced(shell_rc: Path, script_path: Path, script_name: str) -> bool:
    """Append a marked ``source`` line to ``shell_rc`` unless already present.

    Returns:
        True if the file was changed.
    """
    content = shell_rc.read_text(encoding="utf-8") if shell_rc.exists() else ""
    if is_script_sourced(content, script_path):
        logger.info("%s already sourced in %s", script_name, shell_rc)
        return False

    block = f"\n# Source {script_name} ({MARKER})\nsource {script_path}\n"
    shell_rc.write_text(content + block, encoding="utf-8")
    logger.info("Added %s to %s", script_name, shell_rc)
    return True
