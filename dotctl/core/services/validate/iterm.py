"""
iTerm2 checks (macOS) — preferences tracked in the dotfiles and loaded
from there.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.adapters.shell.command import run_command
from dotctl.core.models.check import CheckReport, CheckResult

PLIST_NAME = "com.googlecode.iterm2.plist"

# Relative to the dotfiles directory, first match wins
PLIST_LOCATIONS = (
    ".config/iterm2",
    "iterm",
    "iterm2",
)


def validate_iterm_config(dotfiles_dir: Path) -> CheckReport:
    report = CheckReport()
    report.add(check_plist(dotfiles_dir))
    report.add(check_custom_prefs_folder())
    return report


def find_plist(dotfiles_dir: Path) -> Path | None:
    for location in PLIST_LOCATIONS:
        path = dotfiles_dir / location / PLIST_NAME
        if path.exists():
            return path
    return None


def check_plist(dotfiles_dir: Path) -> CheckResult:
    path = find_plist(dotfiles_dir)
    if path is not None:
        return CheckResult.ok("iTerm:plist", f"iTerm config found: {path}")
    return CheckResult.warn(
        "iTerm:plist", "iTerm configuration not found in dotfiles",
        f"Export iTerm preferences to {dotfiles_dir / PLIST_LOCATIONS[0]}",
    )


def check_custom_prefs_folder() -> CheckResult:
    result = run_command(
        ["defaults", "read", "com.googlecode.iterm2", "PrefsCustomFolder"], timeout=15,
    )
    if result["ok"] and result["stdout"].strip():
        return CheckResult.ok(
            "iTerm:prefs", f"Custom preferences folder: {result['stdout'].strip()}",
        )
    return CheckResult.warn(
        "iTerm:prefs", "iTerm is not loading preferences from a custom folder",
        "In iTerm2: Settings > General > Settings > Load settings from a custom folder",
    )
