"""
Migration — move an existing configuration directory under link management.

Steps, in order:

    1. back up the source (skipped in dry-run)
    2. scan the source for secrets and extract them to ``target/.env``
    3. detect link conflicts between source and target
    4. link the source into the target, unless conflicts block it

Conflicts abort step 4 unless ``force`` or ``dry_run`` is set. A forced
run still never overwrites plain files; those stay conflicts in the
report.

The secrets file is local to the target: steps 3 and 4 never link a
source entry of the same name over it. If the target's secrets file is
already a symlink, extraction is skipped so the file it points at is
never overwritten.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotctl.adapters.symlink.common import detect_conflicts, validate_links
from dotctl.adapters.symlink.native import NativeSymlinker
from dotctl.core.errors import BackupError, SourceMissingError
from dotctl.core.models.link import LinkIssue, LinkOutcome, ReconciliationReport
from dotctl.core.services import backup_ops, secrets_scan

logger = logging.getLogger(__name__)


@dataclass
class MigrationOptions:
    source: Path
    target: Path
    extract_secrets: bool = True
    create_backup: bool = True
    dry_run: bool = False
    force: bool = False
    secrets_file: str = ".env"


@dataclass
class MigrationResult:
    """What a migration did (or would do, for a dry run)."""

    backup_path: Path | None = None
    secrets_found: int = 0
    secrets_written: int = 0
    secrets_path: Path | None = None
    secrets_skipped: bool = False
    conflicts: list[LinkOutcome] = field(default_factory=list)
    symlink_report: ReconciliationReport | None = None
    aborted: bool = False

    @property
    def ok(self) -> bool:
        if self.aborted:
            return False
        return self.symlink_report is None or self.symlink_report.is_success

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "aborted": self.aborted,
            "backup_path": str(self.backup_path) if self.backup_path else None,
            "secrets_found": self.secrets_found,
            "secrets_written": self.secrets_written,
            "secrets_path": str(self.secrets_path) if self.secrets_path else None,
            "secrets_skipped": self.secrets_skipped,
            "conflicts": [c.to_dict() for c in self.conflicts],
            "symlinks": self.symlink_report.to_dict() if self.symlink_report else None,
        }


def migrate(options: MigrationOptions, backup_dir: Path | None = None) -> MigrationResult:
    """Run the migration workflow.

    Raises:
        SourceMissingError: If ``options.source`` does not exist.
        BackupError: If the pre-migration backup fails.
    """
    if not options.source.exists():
        raise SourceMissingError(options.source)

    result = MigrationResult()
    local_only = (options.secrets_file,)

    # ── 1. Backup ───────────────────────────────────────────────
    if options.create_backup and not options.dry_run:
        result.backup_path = backup_ops.create_backup(options.source, backup_dir)

    # ── 2. Secrets ──────────────────────────────────────────────
    if options.extract_secrets:
        found = secrets_scan.scan_directory(options.source)
        result.secrets_found = len(found)
        env_path = options.target / options.secrets_file
        if found and env_path.is_symlink():
            logger.warning(
                "%s is a symlink; not extracting %d secret(s) over it",
                env_path, len(found),
            )
            result.secrets_skipped = True
        elif found:
            logger.info(secrets_scan.summarize(found))
            result.secrets_path = env_path
            if not options.dry_run:
                options.target.mkdir(parents=True, exist_ok=True)
                result.secrets_written = secrets_scan.extract_to_file(found, env_path)

    # ── 3. Conflicts ────────────────────────────────────────────
    result.conflicts = detect_conflicts(options.source, options.target, exclude=local_only)
    if result.conflicts:
        logger.warning("Found %d conflict(s) in %s", len(result.conflicts), options.target)

    # ── 4. Link ─────────────────────────────────────────────────
    if result.conflicts and not (options.force or options.dry_run):
        logger.warning("Migration aborted due to conflicts")
        result.aborted = True
        return result

    symlinker = NativeSymlinker(
        dry_run=options.dry_run, force=options.force, exclude=local_only,
    )
    result.symlink_report = symlinker.apply(options.source, options.target)
    logger.info("Migration links: %s", result.symlink_report.summary())
    return result


def rollback(target: Path, backup_dir: Path | None = None) -> backup_ops.BackupInfo:
    """Restore ``target`` from the newest backup.

    Raises:
        BackupError: If there is no backup to restore.
    """
    backup = backup_ops.get_latest_backup(backup_dir)
    if backup is None:
        raise BackupError("No backup found to roll back from")
    backup_ops.restore_backup(backup, target, backup_dir)
    logger.info("Rolled back %s to %s", target, backup.path.name)
    return backup


def verify_migration(
    source: Path,
    target: Path,
    *,
    exclude: Iterable[str] = (),
) -> list[LinkIssue]:
    """Every entry of ``source`` should now be a correct link in ``target``.

    Pass the secrets file name in ``exclude`` to check a migrated target,
    where that file is kept local.
    """
    issues = validate_links(source, target, exclude=exclude)
    if issues:
        logger.warning("Found %d link issue(s) after migration", len(issues))
    return issues
