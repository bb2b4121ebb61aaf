"""
Health check results — the data model behind ``dotctl doctor``.

Validators return ``CheckResult`` values; the doctor collects them into
a ``CheckReport``. Rendering (colors, grouping) is left to the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class CheckStatus(StrEnum):
    """Severity of a single check."""

    PASS = "pass"
    WARN = "warn"
    ERROR = "error"


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check.

    ``name`` may carry a category prefix separated by a colon
    (``"Symlink:.zshrc"``); checks are grouped on that prefix.
    """

    name: str
    status: CheckStatus
    message: str
    suggestion: str | None = None

    @classmethod
    def ok(cls, name: str, message: str) -> CheckResult:
        return cls(name, CheckStatus.PASS, message)

    @classmethod
    def warn(cls, name: str, message: str, suggestion: str | None = None) -> CheckResult:
        return cls(name, CheckStatus.WARN, message, suggestion)

    @classmethod
    def error(cls, name: str, message: str, suggestion: str | None = None) -> CheckResult:
        return cls(name, CheckStatus.ERROR, message, suggestion)

    @property
    def is_pass(self) -> bool:
        return self.status == CheckStatus.PASS

    @property
    def is_warn(self) -> bool:
        return self.status == CheckStatus.WARN

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @property
    def category(self) -> str:
        return self.name.split(":", 1)[0] or "General"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": str(self.status),
            "message": self.message,
            "suggestion": self.suggestion,
        }


@dataclass
class CheckReport:
    """Collection of check results with aggregate counts."""

    checks: list[CheckResult] = field(default_factory=list)

    def add(self, result: CheckResult) -> None:
        self.checks.append(result)

    def extend(self, other: CheckReport) -> None:
        self.checks.extend(other.checks)

    @property
    def pass_count(self) -> int:
        return sum(1 for c in self.checks if c.is_pass)

    @property
    def warn_count(self) -> int:
        return sum(1 for c in self.checks if c.is_warn)

    @property
    def error_count(self) -> int:
        return sum(1 for c in self.checks if c.is_error)

    @property
    def total(self) -> int:
        return len(self.checks)

    @property
    def is_clean(self) -> bool:
        """True when there are neither warnings nor errors."""
        return self.warn_count == 0 and self.error_count == 0

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    def grouped(self) -> dict[str, list[CheckResult]]:
        """Checks grouped by category, categories sorted by name."""
        groups: dict[str, list[CheckResult]] = {}
        for check in self.checks:
            groups.setdefault(check.category, []).append(check)
        return {name: groups[name] for name in sorted(groups)}

    def summary(self) -> str:
        return (
            f"Passed: {self.pass_count}, "
            f"Warnings: {self.warn_count}, "
            f"Errors: {self.error_count}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "passed": self.pass_count,
                "warnings": self.warn_count,
                "errors": self.error_count,
                "total": self.total,
            },
            "checks": [c.to_dict() for c in self.checks],
        }
