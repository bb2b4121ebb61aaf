"""
Doctor — run every health validator and collect one report.

Sections run in a fixed order; those that depend on a directory that
does not exist are skipped rather than reported as failures (the
``Repo`` section already reports a missing dotfiles directory).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from dotctl.core.models.check import CheckReport
from dotctl.core.models.config import Settings
from dotctl.core.services import detection
from dotctl.core.services.validate import (
    claude,
    configs,
    dependencies,
    iterm,
    paths,
    repo,
    secrets,
    shell,
    symlinks,
)

logger = logging.getLogger(__name__)


def doctor_sections(
    settings: Settings,
    *,
    check_packages: bool = True,
) -> list[tuple[str, Callable[[], CheckReport]]]:
    """(title, thunk) pairs for each applicable section, in run order."""
    home = settings.home_dir
    dotfiles = settings.dotfiles_dir
    config_dir = settings.xdg_config_home

    sections: list[tuple[str, Callable[[], CheckReport]]] = [
        ("dependencies", dependencies.validate_all),
    ]
    if check_packages:
        sections.append(("packages", dependencies.validate_packages))

    sections.append(("repository", lambda: repo.validate_repo(dotfiles)))

    if dotfiles.is_dir():
        sections += [
            ("symlinks", lambda: symlinks.validate_symlinks(
                dotfiles, home, exclude=settings.exclusions,
            )),
            ("individual file links", lambda: symlinks.validate_individual_files(
                dotfiles, home, settings.individual_file_dirs,
            )),
            ("secrets", lambda: secrets.validate_secrets(
                dotfiles, secrets_file=settings.secrets_file,
            )),
        ]
        # only for setups that use ~/.claude
        if (dotfiles / claude.CLAUDE_DIR).exists() or (home / claude.CLAUDE_DIR).exists():
            sections.append(("claude directory", lambda: claude.validate_claude_directory(home)))
        sections.append(("shell integration", lambda: _single(
            shell.check_script_sourced(settings.shell_rc_path, settings.sync_script_path)
        )))
        if detection.is_macos():
            sections.append(("iterm2", lambda: iterm.validate_iterm_config(dotfiles)))

    if config_dir.is_dir():
        sections += [
            ("hardcoded paths", lambda: paths.scan_directory(config_dir)),
            ("config syntax", lambda: configs.scan_directory(config_dir)),
        ]
    return sections


def _single(result) -> CheckReport:
    report = CheckReport()
    report.add(result)
    return report


def run_doctor(settings: Settings, *, check_packages: bool = True) -> CheckReport:
    """Run all applicable validators and merge their results."""
    report = CheckReport()
    for title, run in doctor_sections(settings, check_packages=check_packages):
        logger.info("Checking %s...", title)
        report.extend(run())
    logger.info("Doctor finished: %s", report.summary())
    return report
