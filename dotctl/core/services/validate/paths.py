"""
Hardcoded path checks — config files should say ``$HOME`` or ``~``,
not ``/Users/alice``.
"""

from __future__ import annotations

import re
from pathlib import Path

from dotctl.core.models.check import CheckReport, CheckResult

HOME_PATH_RE = re.compile(r"/(?:Users|home)/[a-zA-Z0-9_-]+")

PATH_SCAN_EXTENSIONS = frozenset({
    "sh", "bash", "zsh", "fish", "rc", "conf", "config", "toml", "yaml", "yml",
})


def find_hardcoded_paths(content: str) -> list[int]:
    """1-based numbers of non-comment lines containing a home path."""
    return [
        line_num
        for line_num, line in enumerate(content.splitlines(), 1)
        if not line.lstrip().startswith("#") and HOME_PATH_RE.search(line)
    ]


def scan_file(path: Path) -> CheckResult:
    name = f"Paths:{path.name}"
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return CheckResult.error(name, f"Failed to read file: {e}")

    hits = find_hardcoded_paths(content)
    if not hits:
        return CheckResult.ok(name, "No hardcoded paths found")
    lines = ", ".join(str(n) for n in hits[:5])
    return CheckResult.warn(
        name,
        f"Found {len(hits)} hardcoded path(s) (line {lines})",
        "Use $HOME or ~ instead of absolute paths",
    )


def _should_scan(path: Path) -> bool:
    if path.suffix:
        return path.suffix[1:] in PATH_SCAN_EXTENSIONS
    return path.name.startswith(".")


def scan_directory(directory: Path) -> CheckReport:
    report = CheckReport()
    if not directory.exists():
        report.add(CheckResult.error("Paths", f"Directory does not exist: {directory}"))
        return report

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        report.add(CheckResult.error("Paths", f"Failed to read directory: {e}"))
        return report

    for path in entries:
        if path.is_file() and _should_scan(path):
            report.add(scan_file(path))

    if report.total == 0:
        report.add(CheckResult.ok("Paths", f"No config files found in {directory}"))
    return report
