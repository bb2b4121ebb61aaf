"""
Tests for backup & restore.
"""

from pathlib import Path

import pytest

from dotctl.core.errors import BackupError
from dotctl.core.services.backup_ops import (
    BACKUP_PREFIX,
    BackupInfo,
    cleanup_old_backups,
    create_backup,
    find_backup,
    get_latest_backup,
    list_backups,
    restore_backup,
    verify_backup,
)


@pytest.fixture
def source(tmp_path: Path) -> Path:
    src = tmp_path / "config"
    src.mkdir()
    (src / "a.conf").write_text("a=1\n")
    (src / "sub").mkdir()
    (src / "sub" / "b.conf").write_text("b=2\n")
    (src / "link").symlink_to(src / "a.conf")
    return src


@pytest.fixture
def backups(tmp_path: Path) -> Path:
    return tmp_path / "backups"


def _fake_backup(parent: Path, stamp: str, seq: int = 0) -> Path:
    name = f"{BACKUP_PREFIX}{stamp}" + (f"-{seq}" if seq else "")
    path = parent / name
    path.mkdir(parents=True)
    (path / "marker").write_text(name)
    return path


class TestBackupInfo:
    def test_parse(self):
        info = BackupInfo.from_path(Path("/x/.dotfiles-backup-20240102-030405"))
        assert info is not None
        assert info.timestamp == "20240102-030405"
        assert info.sequence == 0
        assert info.created_at.year == 2024

    def test_parse_with_sequence(self):
        info = BackupInfo.from_path(Path("/x/.dotfiles-backup-20240102-030405-2"))
        assert info.sequence == 2

    @pytest.mark.parametrize("name", ["backup", ".dotfiles-backup-2024", ".dotfiles-backup-x"])
    def test_not_a_backup(self, name: str):
        assert BackupInfo.from_path(Path(name)) is None


class TestCreateBackup:
    def test_copies_tree(self, source: Path, backups: Path):
        path = create_backup(source, backups)
        assert path.parent == backups
        assert path.name.startswith(BACKUP_PREFIX)
        assert (path / "sub" / "b.conf").read_text() == "b=2\n"

    def test_symlinks_copied_as_links(self, source: Path, backups: Path):
        path = create_backup(source, backups)
        assert (path / "link").is_symlink()

    def test_same_second_gets_suffix(self, source: Path, backups: Path):
        first = create_backup(source, backups)
        second = create_backup(source, backups)
        assert first != second
        assert len(list_backups(backups)) == 2

    def test_missing_source(self, tmp_path: Path, backups: Path):
        with pytest.raises(BackupError, match="does not exist"):
            create_backup(tmp_path / "nope", backups)

    def test_inside_source_refused(self, source: Path):
        with pytest.raises(BackupError, match="inside"):
            create_backup(source, source / "backups")

    def test_single_file(self, source: Path, backups: Path):
        path = create_backup(source / "a.conf", backups)
        assert (path / "a.conf").read_text() == "a=1\n"


class TestListBackups:
    def test_newest_first(self, backups: Path):
        _fake_backup(backups, "20240101-000000")
        _fake_backup(backups, "20240301-000000")
        _fake_backup(backups, "20240301-000000", seq=1)
        (backups / "unrelated").mkdir()
        names = [b.path.name for b in list_backups(backups)]
        assert names == [
            ".dotfiles-backup-20240301-000000-1",
            ".dotfiles-backup-20240301-000000",
            ".dotfiles-backup-20240101-000000",
        ]

    def test_missing_dir(self, tmp_path: Path):
        assert list_backups(tmp_path / "nope") == []

    def test_latest(self, backups: Path):
        assert get_latest_backup(backups) is None
        _fake_backup(backups, "20240101-000000")
        newest = _fake_backup(backups, "20250101-000000")
        assert get_latest_backup(backups).path == newest

    def test_find_by_name_or_timestamp(self, backups: Path):
        path = _fake_backup(backups, "20240101-000000")
        assert find_backup(path.name, backups).path == path
        assert find_backup("20240101-000000", backups).path == path
        assert find_backup("19990101-000000", backups) is None


class TestVerifyBackup:
    def test_valid(self, backups: Path):
        assert verify_backup(_fake_backup(backups, "20240101-000000"))

    def test_empty(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        assert not verify_backup(empty)

    def test_missing(self, tmp_path: Path):
        assert not verify_backup(tmp_path / "nope")


class TestRestoreBackup:
    def test_replaces_target_and_snapshots_it(self, source: Path, backups: Path, tmp_path: Path):
        info = BackupInfo.from_path(create_backup(source, backups))
        target = tmp_path / "target"
        target.mkdir()
        (target / "local.conf").write_text("local")

        snapshot = restore_backup(info, target, backups)

        assert (target / "a.conf").read_text() == "a=1\n"
        assert not (target / "local.conf").exists()
        assert snapshot is not None
        assert (snapshot / "local.conf").read_text() == "local"

    def test_absent_target(self, source: Path, backups: Path, tmp_path: Path):
        info = BackupInfo.from_path(create_backup(source, backups))
        target = tmp_path / "fresh"
        assert restore_backup(info, target, backups) is None
        assert (target / "sub" / "b.conf").exists()

    def test_dangling_link_target(self, source: Path, backups: Path, tmp_path: Path):
        info = BackupInfo.from_path(create_backup(source, backups))
        target = tmp_path / "target"
        target.symlink_to(tmp_path / "gone")

        assert restore_backup(info, target, backups) is None
        assert not target.is_symlink()
        assert (target / "a.conf").read_text() == "a=1\n"
        assert len(list_backups(backups)) == 1

    def test_backup_gone(self, tmp_path: Path):
        info = BackupInfo(tmp_path / ".dotfiles-backup-20240101-000000", "20240101-000000")
        with pytest.raises(BackupError):
            restore_backup(info, tmp_path / "target", tmp_path)


class TestCleanup:
    def test_keeps_newest(self, backups: Path):
        for day in ("01", "02", "03", "04"):
            _fake_backup(backups, f"202401{day}-000000")
        deleted = cleanup_old_backups(2, backups)
        assert [p.name for p in deleted] == [
            ".dotfiles-backup-20240102-000000",
            ".dotfiles-backup-20240101-000000",
        ]
        assert [b.timestamp for b in list_backups(backups)] == [
            "20240104-000000", "20240103-000000",
        ]

    def test_nothing_to_delete(self, backups: Path):
        _fake_backup(backups, "20240101-000000")
        assert cleanup_old_backups(5, backups) == []
