"""
Symlink checks — every dotfiles entry should be a correct link in $HOME.
"""

from __future__ import annotations

from pathlib import Path

from dotctl.adapters.symlink.common import validate_links
from dotctl.core.errors import SourceMissingError
from dotctl.core.models.check import CheckReport, CheckResult


def validate_symlinks(
    source: Path,
    target: Path,
    *,
    exclude: list[str] | tuple[str, ...] = (),
) -> CheckReport:
    report = CheckReport()
    try:
        issues = validate_links(source, target, exclude=exclude)
    except (SourceMissingError, OSError) as e:
        report.add(CheckResult.error("Symlinks", f"Failed to validate symlinks: {e}"))
        return report

    if not issues:
        report.add(CheckResult.ok("Symlinks", f"All symlinks from {source} to {target} are valid"))
        return report

    for issue in issues:
        report.add(CheckResult.error(
            f"Symlink:{issue.target.name}",
            issue.issue,
            f"Run: dotctl link apply (or fix {issue.target} by hand)",
        ))
    return report


def check_symlink(target: Path, expected_source: Path) -> CheckResult:
    """Check a single link, with a shell one-liner to fix it."""
    name = f"Symlink:{target.name}"
    if not target.is_symlink():
        if target.exists():
            return CheckResult.error(
                name,
                "Path exists but is not a symlink",
                f"mv {target} {target}.bak && ln -s {expected_source} {target}",
            )
        return CheckResult.error(
            name, "Symlink does not exist", f"ln -s {expected_source} {target}",
        )

    actual = Path(target.readlink())
    if not actual.is_absolute():
        actual = target.parent / actual
    if actual.resolve() == expected_source.resolve():
        return CheckResult.ok(name, f"Points to {actual}")
    return CheckResult.error(
        name,
        f"Points to {actual} instead of {expected_source}",
        f"ln -sfn {expected_source} {target}",
    )


def validate_individual_files(
    dotfiles_dir: Path,
    home_dir: Path,
    dirs: list[str] | tuple[str, ...],
) -> CheckReport:
    """Check file-by-file links inside directories like ``~/.claude``."""
    report = CheckReport()
    for name in dirs:
        source_dir = dotfiles_dir / name
        if not source_dir.is_dir():
            continue
        target_dir = home_dir / name
        if not target_dir.is_dir():
            report.add(CheckResult.error(
                f"Symlink:{name}", f"{target_dir} does not exist", "Run: dotctl link apply",
            ))
            continue
        for entry in sorted(source_dir.iterdir()):
            report.add(check_symlink(target_dir / entry.name, entry))
    return report
