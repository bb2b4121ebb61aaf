"""
GNU Stow symlinker — delegates the link farm to ``stow``.

The source directory is treated as a Stow package: its parent is the
stow directory and its name is the package name. Stow only reports
success or failure, so a successful run is recorded as a single
outcome for the whole package.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from dotctl.adapters.base import Symlinker
from dotctl.adapters.shell.command import run_command
from dotctl.core.errors import DependencyMissingError, SourceMissingError
from dotctl.core.models.link import ConflictReason, LinkOutcome, ReconciliationReport

logger = logging.getLogger(__name__)

_CONFLICT_MARKERS = ("existing target", "conflict")


class StowSymlinker(Symlinker):
    """Symlinker backed by the external ``stow`` tool."""

    timeout = 120

    @property
    def name(self) -> str:
        return "stow"

    def is_available(self) -> bool:
        return shutil.which("stow") is not None

    def apply(self, source: Path, target: Path) -> ReconciliationReport:
        return self._run(source, target, delete=False)

    def remove(self, source: Path, target: Path) -> ReconciliationReport:
        return self._run(source, target, delete=True)

    def build_command(self, source: Path, target: Path, *, delete: bool) -> list[str]:
        """The stow invocation for linking (or unlinking) ``source``."""
        cmd = ["stow", "-d", str(source.parent), "-t", str(target)]
        for pattern in sorted(self.exclude):
            cmd += ["--ignore", re.escape(pattern)]
        if delete:
            cmd.append("-D")
        if self.dry_run:
            cmd.append("-n")
        if logger.isEnabledFor(logging.DEBUG):
            cmd.append("-v")
        cmd.append(source.name)
        return cmd

    def _run(self, source: Path, target: Path, *, delete: bool) -> ReconciliationReport:
        if not source.exists():
            raise SourceMissingError(source)
        if not self.is_available():
            raise DependencyMissingError("stow")

        result = run_command(
            self.build_command(source, target, delete=delete),
            timeout=self.timeout,
            output_tail=None,
        )
        report = parse_stow_result(result, source, target, delete=delete)
        logger.info("%s %s: %s", "unstow" if delete else "stow", source.name, report.summary())
        return report


def parse_stow_result(
    result: dict,
    source: Path,
    target: Path,
    *,
    delete: bool = False,
) -> ReconciliationReport:
    """Turn a ``run_command`` result for stow into a report."""
    report = ReconciliationReport()

    if result["ok"]:
        if delete:
            report.add(LinkOutcome.removed(target))
        else:
            report.add(LinkOutcome.created(source, target))
        return report

    stderr = result.get("stderr") or result.get("error", "")
    conflict_lines = [
        line.strip()
        for line in stderr.splitlines()
        if any(marker in line for marker in _CONFLICT_MARKERS)
    ]
    if conflict_lines:
        for line in conflict_lines:
            report.add(LinkOutcome.conflict(target, ConflictReason.TOOL_REPORTED, line))
    else:
        report.add(LinkOutcome.conflict(target, ConflictReason.TOOL_REPORTED, stderr.strip()))
    return report
