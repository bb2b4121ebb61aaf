"""
Native symlinker — links made directly with the OS symlink call.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotctl.adapters.base import Symlinker
from dotctl.adapters.symlink.common import inspect_target, source_entries
from dotctl.core.errors import UnsupportedPlatformError
from dotctl.core.models.link import (
    ConflictReason,
    LinkOutcome,
    OutcomeKind,
    ReconciliationReport,
)

logger = logging.getLogger(__name__)


class NativeSymlinker(Symlinker):
    """Creates one symlink per top-level entry of the source.

    Partial progress is kept if a filesystem error interrupts a pass;
    re-running is safe because correct links come back as
    ``already_correct``.
    """

    @property
    def name(self) -> str:
        return "native"

    def is_available(self) -> bool:
        # Windows needs a privilege for symlinks, so treat it as unsupported
        return os.name == "posix" and hasattr(os, "symlink")

    def apply(self, source: Path, target: Path) -> ReconciliationReport:
        entries = source_entries(source, self.exclude)
        if not self.dry_run and not self.is_available():
            raise UnsupportedPlatformError(
                f"Native symlinks are not supported on this platform ({os.name})"
            )

        report = ReconciliationReport()
        for entry in entries:
            report.add(self._link_entry(entry, target / entry.name))

        logger.info("Linked %s -> %s: %s", source, target, report.summary())
        return report

    def _link_entry(self, entry: Path, dest: Path) -> LinkOutcome:
        state = inspect_target(entry, dest)

        if state is None:
            if not self.dry_run:
                dest.parent.mkdir(parents=True, exist_ok=True)
                dest.symlink_to(entry.absolute())
            logger.debug("Created %s -> %s", dest, entry)
            return LinkOutcome.created(entry, dest)

        if state.kind == OutcomeKind.ALREADY_CORRECT:
            return state

        if state.reason == ConflictReason.WRONG_LINK_TARGET and self.force:
            if not self.dry_run:
                dest.unlink()
                dest.symlink_to(entry.absolute())
            logger.info("Replaced link %s (was -> %s)", dest, state.detail)
            return LinkOutcome.created(entry, dest)

        logger.debug("Conflict at %s: %s", dest, state.describe())
        return state

    def remove(self, source: Path, target: Path) -> ReconciliationReport:
        report = ReconciliationReport()
        for entry in source_entries(source, self.exclude):
            dest = target / entry.name
            if dest.is_symlink():
                if not self.dry_run:
                    dest.unlink()
                report.add(LinkOutcome.removed(dest))
            elif dest.exists():
                report.add(LinkOutcome.conflict(dest, ConflictReason.NOT_A_LINK))
            else:
                report.add(LinkOutcome.skipped(dest, "does not exist"))

        logger.info("Unlinked %s from %s: %s", source, target, report.summary())
        return report
