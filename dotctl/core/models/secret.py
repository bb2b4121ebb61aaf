"""
Secret model — a credential-shaped assignment found in a config file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Secret:
    """A key/value pair whose key name suggests it holds a credential.

    Created by a single-pass line scan of one file and never mutated.
    ``source_file`` is the file name (not the full path) and
    ``line_number`` is 1-based.
    """

    key: str
    value: str
    source_file: str
    line_number: int

    def redacted(self) -> str:
        """Value preview safe to print: first and last characters only."""
        if len(self.value) > 8:
            return self.value[:2] + "****" + self.value[-2:]
        return "****"

    def to_dict(self, *, include_value: bool = False) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value if include_value else self.redacted(),
            "file": self.source_file,
            "line": self.line_number,
        }
