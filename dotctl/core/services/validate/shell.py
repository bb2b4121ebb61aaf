"""
Shell integration checks — the sync script is sourced from the shell rc.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.core.models.check import CheckResult
from dotctl.core.services.install.shell_rc import is_script_sourced


def check_script_sourced(shell_rc: Path, script_path: Path) -> CheckResult:
    script_name = script_path.name
    if not shell_rc.exists():
        return CheckResult.warn(
            "Shell RC", f"{shell_rc} not found", "Create it or set shell_rc in config.yml",
        )
    if not script_path.exists():
        return CheckResult.warn(
            "Sync Script",
            f"{script_name} not found in dotfiles",
            f"Ensure the script exists at {script_path}",
        )

    try:
        content = shell_rc.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return CheckResult.error("Shell RC", f"Failed to read {shell_rc.name}: {e}")

    if is_script_sourced(content, script_path) or script_name in content:
        return CheckResult.ok("Sync Script", f"{script_name} is sourced")
    return CheckResult.error(
        "Sync Script",
        f"{script_name} not sourced in {shell_rc.name}",
        "Run: dotctl setup to add the source line",
    )
