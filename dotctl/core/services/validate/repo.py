"""
Dotfiles repository checks — present, a git checkout, with a remote.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.adapters.shell.command import run_command
from dotctl.core.models.check import CheckReport, CheckResult
from dotctl.core.services.install.repos import is_git_repo


def validate_repo(dotfiles_dir: Path) -> CheckReport:
    report = CheckReport()
    if not dotfiles_dir.is_dir():
        report.add(CheckResult.error(
            "Repo", f"{dotfiles_dir} not found", "Run: dotctl init <repo-url>",
        ))
        return report
    report.add(CheckResult.ok("Repo", f"{dotfiles_dir} exists"))

    if not is_git_repo(dotfiles_dir):
        report.add(CheckResult.warn(
            "Repo:git", f"{dotfiles_dir} is not a git repository",
            f"Initialize: git -C {dotfiles_dir} init",
        ))
        return report

    result = run_command(
        ["git", "-C", str(dotfiles_dir), "remote", "get-url", "origin"], timeout=15,
    )
    if result["ok"]:
        report.add(CheckResult.ok("Repo:git", f"Remote configured: {result['stdout'].strip()}"))
    else:
        report.add(CheckResult.warn(
            "Repo:git", "No git remote configured",
            f"Add one: git -C {dotfiles_dir} remote add origin <url>",
        ))
    return report
