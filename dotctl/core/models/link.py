"""
Link outcomes — the data produced by link reconciliation.

Every entry of a source directory considered by a symlinker yields
exactly one ``LinkOutcome``. Outcomes are appended to a
``ReconciliationReport`` in directory-iteration order, which is
filesystem dependent: callers that need a stable order must sort.

Conflicts are first-class outcomes, not exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any


class OutcomeKind(StrEnum):
    """What happened (or would happen) to one target path."""

    CREATED = "created"
    ALREADY_CORRECT = "already_correct"
    CONFLICT = "conflict"
    SKIPPED = "skipped"
    REMOVED = "removed"


class ConflictReason(StrEnum):
    """Why a target path blocks a link operation."""

    FILE_EXISTS = "file exists"
    DIRECTORY_EXISTS = "directory exists"
    WRONG_LINK_TARGET = "wrong link target"
    NOT_A_LINK = "not a link, will not remove"
    TOOL_REPORTED = "reported by link tool"


@dataclass(frozen=True)
class LinkOutcome:
    """Outcome for a single (source entry, target path) pair."""

    kind: OutcomeKind
    target: Path
    source: Path | None = None
    reason: ConflictReason | None = None
    detail: str = ""

    @classmethod
    def created(cls, source: Path, target: Path) -> LinkOutcome:
        return cls(OutcomeKind.CREATED, target, source=source)

    @classmethod
    def already_correct(cls, target: Path) -> LinkOutcome:
        return cls(OutcomeKind.ALREADY_CORRECT, target)

    @classmethod
    def conflict(cls, target: Path, reason: ConflictReason, detail: str = "") -> LinkOutcome:
        return cls(OutcomeKind.CONFLICT, target, reason=reason, detail=detail)

    @classmethod
    def skipped(cls, target: Path, detail: str) -> LinkOutcome:
        return cls(OutcomeKind.SKIPPED, target, detail=detail)

    @classmethod
    def removed(cls, target: Path) -> LinkOutcome:
        return cls(OutcomeKind.REMOVED, target)

    @property
    def is_success(self) -> bool:
        return self.kind in (
            OutcomeKind.CREATED,
            OutcomeKind.ALREADY_CORRECT,
            OutcomeKind.REMOVED,
        )

    @property
    def is_conflict(self) -> bool:
        return self.kind == OutcomeKind.CONFLICT

    def describe(self) -> str:
        """Short human text: the reason, with detail when present."""
        if self.reason is not None:
            return f"{self.reason}: {self.detail}" if self.detail else str(self.reason)
        return self.detail

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "target": str(self.target),
            "source": str(self.source) if self.source else None,
            "reason": str(self.reason) if self.reason else None,
            "detail": self.detail,
        }


@dataclass
class ReconciliationReport:
    """Ordered, append-only sequence of link outcomes.

    The buckets are derived views over ``outcomes``; nothing is stored
    twice. ``is_success`` only looks at conflicts: a report full of
    skipped entries is still a success.
    """

    outcomes: list[LinkOutcome] = field(default_factory=list)

    def add(self, outcome: LinkOutcome) -> None:
        self.outcomes.append(outcome)

    def merge(self, other: ReconciliationReport) -> None:
        self.outcomes.extend(other.outcomes)

    def _bucket(self, kind: OutcomeKind) -> list[LinkOutcome]:
        return [o for o in self.outcomes if o.kind == kind]

    @property
    def created(self) -> list[LinkOutcome]:
        return self._bucket(OutcomeKind.CREATED)

    @property
    def already_correct(self) -> list[LinkOutcome]:
        return self._bucket(OutcomeKind.ALREADY_CORRECT)

    @property
    def conflicts(self) -> list[LinkOutcome]:
        return self._bucket(OutcomeKind.CONFLICT)

    @property
    def skipped(self) -> list[LinkOutcome]:
        return self._bucket(OutcomeKind.SKIPPED)

    @property
    def removed(self) -> list[LinkOutcome]:
        return self._bucket(OutcomeKind.REMOVED)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def is_success(self) -> bool:
        return not self.conflicts

    def summary(self) -> str:
        parts = [
            f"Created: {len(self.created)}",
            f"Already correct: {len(self.already_correct)}",
            f"Conflicts: {len(self.conflicts)}",
            f"Skipped: {len(self.skipped)}",
        ]
        if self.removed:
            parts.append(f"Removed: {len(self.removed)}")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.is_success,
            "summary": {
                "created": len(self.created),
                "already_correct": len(self.already_correct),
                "conflicts": len(self.conflicts),
                "skipped": len(self.skipped),
                "removed": len(self.removed),
                "total": self.total,
            },
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


@dataclass(frozen=True)
class LinkIssue:
    """A problem found when validating an existing link farm."""

    target: Path
    issue: str

    def to_dict(self) -> dict[str, str]:
        return {"target": str(self.target), "issue": self.issue}
