"""
~/.claude checks — present, a git checkout, with a remote, committed.

The directory mixes tracked config with runtime data, so its files are
linked one by one (see the individual file links section); these
checks cover the checkout itself.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.adapters.shell.command import run_command
from dotctl.core.models.check import CheckReport, CheckResult
from dotctl.core.services.install.repos import is_git_repo

CLAUDE_DIR = ".claude"


def validate_claude_directory(home_dir: Path) -> CheckReport:
    claude_dir = home_dir / CLAUDE_DIR
    report = CheckReport()

    if not claude_dir.is_dir():
        report.add(CheckResult.error(
            "Claude", f"{claude_dir} not found",
            f"Clone it: git clone <repo-url> {claude_dir} (or run: dotctl setup)",
        ))
        return report
    report.add(CheckResult.ok("Claude", f"{claude_dir} exists"))

    if not is_git_repo(claude_dir):
        report.add(CheckResult.error(
            "Claude:git", f"{claude_dir} is not a git repository",
            f"Initialize: git -C {claude_dir} init",
        ))
        return report
    report.add(CheckResult.ok("Claude:git", f"{claude_dir} is a git repository"))

    report.add(check_remote(claude_dir))
    report.add(check_uncommitted(claude_dir))
    return report


def check_remote(claude_dir: Path) -> CheckResult:
    result = run_command(
        ["git", "-C", str(claude_dir), "remote", "get-url", "origin"], timeout=15,
    )
    if result["ok"]:
        return CheckResult.ok("Claude:remote", f"Remote configured: {result['stdout'].strip()}")
    return CheckResult.warn(
        "Claude:remote", "No git remote configured",
        f"Add one: git -C {claude_dir} remote add origin <url>",
    )


def check_uncommitted(claude_dir: Path) -> CheckResult:
    """Uncommitted changes warn; a failing ``git status`` is not held against it."""
    result = run_command(["git", "-C", str(claude_dir), "status", "--porcelain"], timeout=15)
    if not result["ok"]:
        return CheckResult.ok("Claude:status", "Unable to check git status")
    if result["stdout"].strip():
        return CheckResult.warn(
            "Claude:status", f"Uncommitted changes in {claude_dir}",
            f"Review and commit: git -C {claude_dir} status",
        )
    return CheckResult.ok("Claude:status", "No uncommitted changes")
