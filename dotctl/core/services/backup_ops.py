"""
Backup & Restore operations — timestamped directory snapshots.

A backup is a plain recursive copy of a directory named
``.dotfiles-backup-YYYYmmdd-HHMMSS`` inside a backup parent directory
(the home directory unless configured). Symlinks inside the source are
copied as links, not followed. Two backups taken within the same second
get a ``-N`` suffix.
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from dotctl.core.errors import BackupError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════

BACKUP_PREFIX = ".dotfiles-backup-"

TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

_BACKUP_NAME_RE = re.compile(r"^\.dotfiles-backup-(\d{8}-\d{6})(?:-(\d+))?$")


# ═══════════════════════════════════════════════════════════════════
#  Model
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class BackupInfo:
    """A backup directory found on disk."""

    path: Path
    timestamp: str
    sequence: int = 0

    @classmethod
    def from_path(cls, path: Path) -> BackupInfo | None:
        """Parse a backup directory name; None if it is not one."""
        match = _BACKUP_NAME_RE.match(path.name)
        if not match:
            return None
        return cls(path, match.group(1), int(match.group(2) or 0))

    @property
    def created_at(self) -> datetime:
        return datetime.strptime(self.timestamp, TIMESTAMP_FORMAT)

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.timestamp, self.sequence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "name": self.path.name,
            "timestamp": self.timestamp,
            "created_at": self.created_at.isoformat(),
        }


# ═══════════════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════════════


def default_backup_dir() -> Path:
    return Path.home()


def _next_backup_path(parent: Path) -> Path:
    stamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    candidate = parent / f"{BACKUP_PREFIX}{stamp}"
    seq = 1
    while candidate.exists():
        candidate = parent / f"{BACKUP_PREFIX}{stamp}-{seq}"
        seq += 1
    return candidate


def _copy_tree(src: Path, dst: Path) -> None:
    shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)


# ═══════════════════════════════════════════════════════════════════
#  Operations
# ═══════════════════════════════════════════════════════════════════


def create_backup(source: Path, backup_dir: Path | None = None) -> Path:
    """Copy ``source`` into a new timestamped backup directory.

    Returns:
        Path of the new backup.

    Raises:
        BackupError: If ``source`` is missing or the backup would land
            inside ``source``.
    """
    if not source.exists():
        raise BackupError(f"Source directory does not exist: {source}")

    parent = backup_dir or default_backup_dir()
    backup_path = _next_backup_path(parent)

    if source.is_dir() and backup_path.resolve().is_relative_to(source.resolve()):
        raise BackupError(f"Backup location {parent} is inside {source}")

    parent.mkdir(parents=True, exist_ok=True)
    if source.is_dir():
        _copy_tree(source, backup_path)
    else:
        backup_path.mkdir()
        shutil.copy2(source, backup_path / source.name, follow_symlinks=False)

    logger.info("Created backup of %s at %s", source, backup_path)
    return backup_path


def list_backups(backup_dir: Path | None = None) -> list[BackupInfo]:
    """All backups in ``backup_dir``, newest first."""
    parent = backup_dir or default_backup_dir()
    if not parent.is_dir():
        return []

    backups = [
        info
        for entry in parent.iterdir()
        if entry.is_dir() and not entry.is_symlink()
        and (info := BackupInfo.from_path(entry)) is not None
    ]
    backups.sort(key=lambda b: b.sort_key, reverse=True)
    return backups


def get_latest_backup(backup_dir: Path | None = None) -> BackupInfo | None:
    backups = list_backups(backup_dir)
    return backups[0] if backups else None


def find_backup(name: str, backup_dir: Path | None = None) -> BackupInfo | None:
    """Look a backup up by directory name or bare timestamp."""
    for backup in list_backups(backup_dir):
        if name in (backup.path.name, backup.timestamp):
            return backup
    return None


def verify_backup(backup_path: Path) -> bool:
    """A usable backup exists, is a directory and is not empty."""
    if not backup_path.is_dir():
        return False
    return any(backup_path.iterdir())


def restore_backup(
    backup: BackupInfo,
    target: Path,
    backup_dir: Path | None = None,
) -> Path | None:
    """Replace ``target`` with the contents of ``backup``.

    The current ``target`` is itself backed up first. Returns the path
    of that safety snapshot (None when ``target`` did not exist). A
    dangling link at ``target`` has nothing to snapshot and is removed.

    Raises:
        BackupError: If the backup directory is gone.
    """
    if not backup.path.is_dir():
        raise BackupError(f"Backup does not exist: {backup.path}")

    snapshot = None
    if target.exists():
        snapshot = create_backup(target, backup_dir)
    if target.exists() or target.is_symlink():
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()

    _copy_tree(backup.path, target)
    logger.info("Restored %s from backup %s", target, backup.timestamp)
    return snapshot


def cleanup_old_backups(keep: int, backup_dir: Path | None = None) -> list[Path]:
    """Delete all but the ``keep`` newest backups. Returns deleted paths."""
    deleted: list[Path] = []
    for backup in list_backups(backup_dir)[keep:]:
        shutil.rmtree(backup.path)
        deleted.append(backup.path)
        logger.info("Deleted old backup %s", backup.path.name)
    return deleted
