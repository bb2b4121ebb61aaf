"""
Committed secret checks — credentials should live in the gitignored
``.env``, not in tracked dotfiles.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.core.models.check import CheckReport, CheckResult
from dotctl.core.services import secrets_scan

INLINE_SCAN_EXTENSIONS = frozenset({".yaml", ".yml", ".json", ".toml", ".conf"})


def validate_secrets(dotfiles_dir: Path, *, secrets_file: str = ".env") -> CheckReport:
    report = CheckReport()
    try:
        found = [
            s for s in secrets_scan.scan_directory(dotfiles_dir)
            if s.source_file != secrets_file
        ]
    except OSError as e:
        report.add(CheckResult.error("Secrets", f"Failed to scan {dotfiles_dir}: {e}"))
        return report

    for source_file, secrets in secrets_scan.group_by_file(found).items():
        keys = ", ".join(sorted({s.key for s in secrets}))
        report.add(CheckResult.error(
            f"Secrets:{source_file}",
            f"{len(secrets)} secret(s) committed ({keys})",
            "Run: dotctl secrets extract",
        ))

    candidates = sorted(dotfiles_dir.iterdir()) if dotfiles_dir.is_dir() else []
    for path in candidates:
        if not path.is_file() or path.suffix.lower() not in INLINE_SCAN_EXTENSIONS:
            continue
        try:
            inline = secrets_scan.scan_inline_credentials(path)
        except (OSError, UnicodeDecodeError):
            continue
        if inline:
            lines = ", ".join(str(s.line_number) for s in inline)
            report.add(CheckResult.warn(
                f"Secrets:{path.name}",
                f"Possible inline credential(s) on line {lines}",
                "Reference an environment variable instead",
            ))

    if report.total == 0:
        report.add(CheckResult.ok("Secrets", f"No secrets found in {dotfiles_dir}"))
    return report
