"""
Setup — bootstrap a workstation from the configured dotfiles.

Non-interactive: everything comes from ``Settings`` and
``SetupOptions``. Steps run in order and each one records a
``SetupStep``; a failing step is recorded and the remaining steps
still run, so one broken package does not block the links.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotctl.core.errors import DotfilesError
from dotctl.core.models.config import LanguageManager, Settings
from dotctl.core.models.link import ReconciliationReport
from dotctl.core.services import detection
from dotctl.core.services.install import (
    homebrew,
    languages,
    packages,
    repos,
    shell_rc,
    version_manager,
)
from dotctl.core.services.install.version_manager import VersionManager
from dotctl.core.services.symlink_ops import link_dotfiles

logger = logging.getLogger(__name__)

OH_MY_ZSH_URL = "https://github.com/ohmyzsh/ohmyzsh.git"

OK = "ok"
PLANNED = "planned"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class SetupOptions:
    dry_run: bool = False
    force: bool = False
    categories: tuple[str, ...] = ("essential",)
    languages: tuple[str, ...] = ()
    install_packages: bool = True
    link: bool = True


@dataclass(frozen=True)
class SetupStep:
    name: str
    status: str
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "status": self.status, "message": self.message}


@dataclass
class SetupResult:
    dry_run: bool = False
    steps: list[SetupStep] = field(default_factory=list)
    link_report: ReconciliationReport | None = None

    def record(self, name: str, status: str, message: str = "") -> None:
        if status == FAILED:
            logger.warning("Setup step %s failed: %s", name, message)
        else:
            logger.info("Setup step %s: %s %s", name, status, message)
        self.steps.append(SetupStep(name, status, message))

    @property
    def failed(self) -> list[SetupStep]:
        return [s for s in self.steps if s.status == FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "dry_run": self.dry_run,
            "steps": [s.to_dict() for s in self.steps],
            "links": self.link_report.to_dict() if self.link_report else None,
        }


# ── Steps ───────────────────────────────────────────────────────


def _step_homebrew(result: SetupResult, dry_run: bool) -> None:
    if not detection.is_macos():
        result.record("homebrew", SKIPPED, "not on macOS")
    elif homebrew.is_installed():
        result.record("homebrew", OK, f"installed at {homebrew.detect_homebrew()}")
    elif dry_run:
        result.record("homebrew", PLANNED, "would install Homebrew")
    else:
        try:
            homebrew.install_homebrew()
        except DotfilesError as e:
            result.record("homebrew", FAILED, str(e))
        else:
            result.record("homebrew", OK, "installed")


def _step_version_manager(result: SetupResult, settings: Settings, dry_run: bool) -> None:
    if settings.language_manager == LanguageManager.NONE:
        result.record("version_manager", SKIPPED, "disabled in config")
        return
    existing = version_manager.detect()
    if existing is not None:
        result.record("version_manager", OK, f"{existing.display_name} already installed")
    elif dry_run:
        result.record("version_manager", PLANNED, f"would install {settings.language_manager}")
    else:
        try:
            vm = version_manager.install_preferred(VersionManager(settings.language_manager))
        except DotfilesError as e:
            result.record("version_manager", FAILED, str(e))
        else:
            result.record("version_manager", OK, f"{vm.display_name} installed")


def _step_packages(result: SetupResult, categories: tuple[str, ...], dry_run: bool) -> None:
    for category in categories:
        name = f"packages:{category}"
        try:
            summary = packages.install_packages(category, dry_run=dry_run)
        except DotfilesError as e:
            result.record(name, FAILED, str(e))
            continue
        if summary.failed:
            result.record(name, FAILED, f"failed: {', '.join(summary.failed)}")
        elif dry_run and summary.installed:
            result.record(name, PLANNED, f"would install {', '.join(summary.installed)}")
        else:
            result.record(name, OK, f"{len(summary.installed)} installed")


def _step_languages(result: SetupResult, names: tuple[str, ...], dry_run: bool) -> None:
    if not names:
        return
    vm = version_manager.detect()
    for lang_name in names:
        step = f"language:{lang_name}"
        language = languages.get_language(lang_name)
        if language is None:
            result.record(step, FAILED, "unknown language")
            continue
        if dry_run:
            result.record(step, PLANNED, f"would install {language.display_name} {language.default_version}")
            continue
        if vm is None:
            result.record(step, FAILED, f"no version manager. {language.fallback_instructions}")
            continue
        try:
            language.install(vm)
        except DotfilesError as e:
            result.record(step, FAILED, f"{e}. {language.fallback_instructions}")
        else:
            result.record(step, OK, f"{language.display_name} {language.default_version}")


def _step_links(result: SetupResult, settings: Settings, options: SetupOptions) -> None:
    try:
        report = link_dotfiles(settings, dry_run=options.dry_run, force=options.force)
    except DotfilesError as e:
        result.record("links", FAILED, str(e))
        return
    result.link_report = report
    result.record("links", OK if report.is_success else FAILED, report.summary())


def _step_shell(result: SetupResult, settings: Settings, dry_run: bool) -> None:
    script = settings.sync_script_path
    if not script.exists():
        result.record("shell", SKIPPED, f"{script.name} not in dotfiles")
    elif dry_run:
        result.record("shell", PLANNED, f"would source {script.name} from {settings.shell_rc}")
    else:
        changed = shell_rc.ensure_script_sourced(settings.shell_rc_path, script, script.name)
        result.record("shell", OK, "source line added" if changed else "already sourced")


def _step_clone(result: SetupResult, name: str, url: str, target: Path, dry_run: bool) -> None:
    if target.exists():
        result.record(name, OK, f"already at {target}")
    elif dry_run:
        result.record(name, PLANNED, f"would clone into {target}")
    else:
        try:
            repos.clone_repo(url, target, name=name)
        except DotfilesError as e:
            result.record(name, FAILED, str(e))
        else:
            result.record(name, OK, f"cloned into {target}")


# ── Orchestration ───────────────────────────────────────────────


def run_setup(settings: Settings, options: SetupOptions | None = None) -> SetupResult:
    """Run every setup step and return what happened."""
    options = options or SetupOptions()
    result = SetupResult(dry_run=options.dry_run)

    if options.install_packages:
        _step_homebrew(result, options.dry_run)
    _step_version_manager(result, settings, options.dry_run)
    if options.install_packages:
        _step_packages(result, options.categories, options.dry_run)
    _step_languages(result, options.languages, options.dry_run)

    if options.link:
        _step_links(result, settings, options)
    _step_shell(result, settings, options.dry_run)

    if (settings.dotfiles_dir / ".tmux.conf").exists():
        _step_clone(result, "tpm", repos.TPM_URL, repos.tpm_path(settings.home_dir), options.dry_run)
    if settings.install_oh_my_zsh:
        _step_clone(
            result, "oh-my-zsh", OH_MY_ZSH_URL, settings.home_dir / ".oh-my-zsh", options.dry_run,
        )

    logger.info("Setup finished: %d step(s), %d failed", len(result.steps), len(result.failed))
    return result
