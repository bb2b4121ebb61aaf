"""
Symlink operations — link a dotfiles repository into the home directory.

Top-level entries of the dotfiles directory are linked as whole units,
except the names in ``EXCLUSIONS``. Directories listed in
``INDIVIDUAL_FILE_SYMLINK_DIRS`` hold a mix of tracked config and
runtime data, so their files are linked one by one into a real
directory at the target.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotctl.adapters.base import Symlinker
from dotctl.adapters.symlink.native import NativeSymlinker
from dotctl.adapters.symlink.stow import StowSymlinker
from dotctl.core.models.config import (
    DEFAULT_EXCLUSIONS,
    DEFAULT_INDIVIDUAL_FILE_DIRS,
    Settings,
    SymlinkMethod,
)
from dotctl.core.models.link import ReconciliationReport

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════

EXCLUSIONS = tuple(DEFAULT_EXCLUSIONS)

INDIVIDUAL_FILE_SYMLINK_DIRS = tuple(DEFAULT_INDIVIDUAL_FILE_DIRS)


# ═══════════════════════════════════════════════════════════════════
#  Symlinker selection
# ═══════════════════════════════════════════════════════════════════


def select_symlinker(
    method: SymlinkMethod | str = SymlinkMethod.AUTO,
    *,
    dry_run: bool = False,
    force: bool = False,
    exclude: tuple[str, ...] | list[str] | None = EXCLUSIONS,
) -> Symlinker:
    """Pick a symlinker for ``method``.

    ``auto`` prefers GNU Stow when it is installed and falls back to
    native links. An explicit method is returned as-is even if it is
    unavailable; the failure surfaces when it is used.
    """
    method = SymlinkMethod(method)
    kwargs = {"dry_run": dry_run, "force": force, "exclude": exclude}

    if method == SymlinkMethod.STOW:
        return StowSymlinker(**kwargs)
    if method == SymlinkMethod.NATIVE:
        return NativeSymlinker(**kwargs)

    stow = StowSymlinker(**kwargs)
    if stow.is_available():
        logger.debug("Using GNU Stow for links")
        return stow
    logger.debug("stow not found, using native links")
    return NativeSymlinker(**kwargs)


# ═══════════════════════════════════════════════════════════════════
#  Linking
# ═══════════════════════════════════════════════════════════════════


def link_individual_files(
    symlinker: Symlinker,
    dotfiles_dir: Path,
    home_dir: Path,
    dirs: tuple[str, ...] | list[str] = INDIVIDUAL_FILE_SYMLINK_DIRS,
) -> ReconciliationReport:
    """Link the files of each special directory one by one.

    Special directories missing from the dotfiles repository are
    skipped. The target directory is created first (unless dry-run).
    """
    report = ReconciliationReport()
    for name in dirs:
        source = dotfiles_dir / name
        target = home_dir / name
        if not source.is_dir():
            logger.debug("No %s in %s, skipping", name, dotfiles_dir)
            continue
        if not symlinker.dry_run:
            target.mkdir(parents=True, exist_ok=True)
        report.merge(symlinker.apply(source, target))
    return report


def link_dotfiles(
    settings: Settings,
    *,
    dry_run: bool = False,
    force: bool = False,
    method: SymlinkMethod | str | None = None,
) -> ReconciliationReport:
    """Link the configured dotfiles directory into the home directory.

    Returns one merged report for the top-level pass and every
    individual-file directory.
    """
    method = method or settings.symlink_method
    symlinker = select_symlinker(
        method, dry_run=dry_run, force=force, exclude=settings.exclusions,
    )
    logger.info("Linking %s -> %s with %s", settings.dotfiles_dir, settings.home_dir, symlinker.name)

    report = symlinker.apply(settings.dotfiles_dir, settings.home_dir)

    # Stow links whole packages, so file-level links are always native
    file_linker = NativeSymlinker(dry_run=dry_run, force=force)
    report.merge(
        link_individual_files(
            file_linker, settings.dotfiles_dir, settings.home_dir, settings.individual_file_dirs,
        )
    )
    return report


def unlink_dotfiles(settings: Settings, *, dry_run: bool = False) -> ReconciliationReport:
    """Remove the links made by ``link_dotfiles`` (native links only)."""
    symlinker = NativeSymlinker(dry_run=dry_run, exclude=settings.exclusions)
    report = symlinker.remove(settings.dotfiles_dir, settings.home_dir)
    for name in settings.individual_file_dirs:
        source = settings.dotfiles_dir / name
        if source.is_dir():
            report.merge(NativeSymlinker(dry_run=dry_run).remove(source, settings.home_dir / name))
    return report
