"""
Tests for the migration workflow.
"""

from pathlib import Path

import pytest

from dotctl.core.errors import BackupError, SourceMissingError
from dotctl.core.models.link import ConflictReason
from dotctl.core.services.backup_ops import list_backups
from dotctl.core.services.migrate_ops import (
    MigrationOptions,
    migrate,
    rollback,
    verify_migration,
)


@pytest.fixture
def source(tmp_path: Path) -> Path:
    src = tmp_path / "old-config"
    src.mkdir()
    (src / ".zshrc").write_text("export EDITOR=nvim\nexport API_TOKEN=abc123\n")
    (src / ".tmux.conf").write_text("set -g mouse on\n")
    return src


@pytest.fixture
def target(tmp_path: Path) -> Path:
    t = tmp_path / "home"
    t.mkdir()
    return t


@pytest.fixture
def backups(tmp_path: Path) -> Path:
    return tmp_path / "backups"


class TestMigrate:
    def test_full_run(self, source: Path, target: Path, backups: Path):
        result = migrate(MigrationOptions(source, target), backups)

        assert result.ok
        assert result.backup_path is not None and result.backup_path.exists()
        assert result.secrets_found == 1
        assert result.secrets_written == 1
        assert "API_TOKEN=abc123" in (target / ".env").read_text()
        assert (target / ".zshrc").is_symlink()
        assert len(result.symlink_report.created) == 2

    def test_conflicts_abort(self, source: Path, target: Path, backups: Path):
        (target / ".zshrc").write_text("local")
        result = migrate(MigrationOptions(source, target), backups)

        assert result.aborted
        assert not result.ok
        assert result.symlink_report is None
        assert result.conflicts[0].reason == ConflictReason.FILE_EXISTS
        assert not (target / ".tmux.conf").exists()

    def test_force_links_the_rest(self, source: Path, target: Path, backups: Path):
        (target / ".zshrc").write_text("local")
        result = migrate(MigrationOptions(source, target, force=True), backups)

        assert not result.aborted
        assert (target / ".tmux.conf").is_symlink()
        assert (target / ".zshrc").read_text() == "local"
        assert not result.ok

    def test_dry_run_touches_nothing(self, source: Path, target: Path, backups: Path):
        (target / ".zshrc").write_text("local")
        result = migrate(MigrationOptions(source, target, dry_run=True), backups)

        assert not result.aborted
        assert result.backup_path is None
        assert result.secrets_found == 1
        assert result.secrets_written == 0
        assert result.secrets_path == target / ".env"
        assert sorted(p.name for p in target.iterdir()) == [".zshrc"]
        assert not backups.exists()

    def test_options_disable_steps(self, source: Path, target: Path, backups: Path):
        opts = MigrationOptions(source, target, extract_secrets=False, create_backup=False)
        result = migrate(opts, backups)
        assert result.backup_path is None
        assert result.secrets_found == 0
        assert not (target / ".env").exists()

    def test_missing_source(self, tmp_path: Path, target: Path):
        with pytest.raises(SourceMissingError):
            migrate(MigrationOptions(tmp_path / "nope", target))

    def test_to_dict(self, source: Path, target: Path, backups: Path):
        d = migrate(MigrationOptions(source, target), backups).to_dict()
        assert d["ok"] is True
        assert d["secrets_skipped"] is False
        assert d["symlinks"]["summary"]["created"] == 2

    def test_source_env_is_not_linked_over_extracted_file(
        self, source: Path, target: Path, backups: Path,
    ):
        (source / ".env").write_text("API_KEY=abcdef\n")
        result = migrate(MigrationOptions(source, target), backups)

        assert not result.aborted
        assert result.ok
        assert result.conflicts == []
        assert not (target / ".env").is_symlink()
        assert "API_KEY=abcdef" in (target / ".env").read_text()
        assert (target / ".zshrc").is_symlink()
        assert len(result.symlink_report.created) == 2
        assert verify_migration(source, target, exclude=[".env"]) == []

    def test_rerun_keeps_linked_env_file_intact(
        self, source: Path, target: Path, backups: Path,
    ):
        original = "# my env\nEDITOR=vim\nAPI_TOKEN=abc\n"
        (source / ".env").write_text(original)
        (target / ".env").symlink_to(source / ".env")

        migrate(MigrationOptions(source, target, extract_secrets=False), backups)
        result = migrate(MigrationOptions(source, target), backups)

        assert result.secrets_skipped
        assert result.secrets_written == 0
        assert result.secrets_path is None
        assert (source / ".env").read_text() == original
        assert (target / ".env").is_symlink()
        assert result.ok


class TestRollback:
    def test_restores_newest(self, source: Path, target: Path, backups: Path):
        migrate(MigrationOptions(source, target), backups)
        (source / ".zshrc").write_text("broken")

        backup = rollback(source, backups)

        assert "API_TOKEN" in (source / ".zshrc").read_text()
        # the broken state was snapshotted before restoring
        assert len(list_backups(backups)) == 2
        assert backup.path.exists()

    def test_no_backup(self, source: Path, backups: Path):
        with pytest.raises(BackupError, match="No backup"):
            rollback(source, backups)


class TestVerifyMigration:
    def test_clean_after_migrate(self, source: Path, target: Path, backups: Path):
        migrate(MigrationOptions(source, target), backups)
        assert verify_migration(source, target) == []

    def test_reports_missing_links(self, source: Path, target: Path):
        issues = verify_migration(source, target)
        assert {i.issue for i in issues} == {"does not exist"}
        assert len(issues) == 2
