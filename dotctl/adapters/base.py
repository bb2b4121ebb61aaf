"""
Symlinker base — the contract every link strategy implements.

Callers never care whether links are made with ``os.symlink`` or by
delegating to GNU Stow. They pick an implementation at runtime with
``is_available()`` and then talk to it only through this interface.

To create a new symlinker:
    1. Subclass Symlinker
    2. Implement name, is_available, apply, remove
    3. Teach ``select_symlinker`` about it
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from dotctl.adapters.symlink.common import detect_conflicts, validate_links
from dotctl.core.models.link import LinkIssue, LinkOutcome, ReconciliationReport


class Symlinker(ABC):
    """Abstract base class for link strategies.

    Conflicts are returned in the report, never raised. Only
    environmental failures (missing source, missing tool, unsupported
    platform, filesystem errors) raise.

    Args:
        dry_run: Compute and report every decision without touching
            the filesystem. Reports still say ``created`` for links
            that *would* be made.
        force: Replace links that point somewhere else. Never
            replaces plain files or directories.
        exclude: Entry names of the source directory to ignore.
    """

    def __init__(
        self,
        *,
        dry_run: bool = False,
        force: bool = False,
        exclude: Iterable[str] | None = None,
    ) -> None:
        self.dry_run = dry_run
        self.force = force
        self.exclude = frozenset(exclude or ())

    @property
    @abstractmethod
    def name(self) -> str:
        """The symlinker identifier (e.g., 'native', 'stow')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this strategy can run on this machine.

        Should be fast and never raise.
        """

    @abstractmethod
    def apply(self, source: Path, target: Path) -> ReconciliationReport:
        """Link every entry of ``source`` into ``target``."""

    @abstractmethod
    def remove(self, source: Path, target: Path) -> ReconciliationReport:
        """Remove links in ``target`` for every entry of ``source``."""

    def plan(self, source: Path, target: Path) -> list[LinkOutcome]:
        """Read-only conflict detection (one outcome per blocked entry)."""
        return detect_conflicts(source, target, exclude=self.exclude)

    def validate(self, source: Path, target: Path) -> list[LinkIssue]:
        """Report entries of ``target`` that are not correct links."""
        return validate_links(source, target, exclude=self.exclude)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} name={self.name!r} "
            f"dry_run={self.dry_run} force={self.force}>"
        )
