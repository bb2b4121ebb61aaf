"""
Tests for configuration loading and saving.
"""

from pathlib import Path

import pytest

from dotctl.core.config.loader import default_config_path, load_settings, save_settings
from dotctl.core.errors import ConfigError
from dotctl.core.models.config import LanguageManager, Settings, SymlinkMethod


class TestDefaultConfigPath:
    def test_env_override(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("DOTCTL_CONFIG", str(tmp_path / "c.yml"))
        assert default_config_path() == tmp_path / "c.yml"

    def test_xdg(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("DOTCTL_CONFIG", raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert default_config_path() == tmp_path / "dotctl" / "config.yml"

    def test_home_fallback(self, monkeypatch, tmp_path: Path):
        monkeypatch.delenv("DOTCTL_CONFIG", raising=False)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_config_path() == tmp_path / ".config" / "dotctl" / "config.yml"


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path: Path):
        s = load_settings(tmp_path / "nope.yml")
        assert isinstance(s, Settings)
        assert s.symlink_method == SymlinkMethod.AUTO

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_settings(path).backup_keep == 5

    def test_valid_file(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text(
            f"home_dir: {tmp_path}\n"
            "language_manager: asdf\n"
            "symlink_method: native\n"
            "repo_url: git@github.com:me/dotfiles.git\n"
            "exclusions: [.git]\n"
        )
        s = load_settings(path)
        assert s.home_dir == tmp_path
        assert s.dotfiles_dir == tmp_path / "dotfiles"
        assert s.language_manager == LanguageManager.ASDF
        assert s.symlink_method == SymlinkMethod.NATIVE
        assert s.exclusions == [".git"]

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("home_dir: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_schema_error(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        path.write_text("symlink_method: hardlink\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)


class TestSaveSettings:
    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "sub" / "config.yml"
        original = Settings(home_dir=tmp_path, repo_url="https://example.com/dots.git")
        written = save_settings(original, path)
        assert written == path
        loaded = load_settings(path)
        assert loaded.repo_url == "https://example.com/dots.git"
        assert loaded.dotfiles_dir == original.dotfiles_dir

    def test_no_temp_files_left(self, tmp_path: Path):
        path = tmp_path / "config.yml"
        save_settings(Settings(home_dir=tmp_path), path)
        assert [p.name for p in tmp_path.iterdir()] == ["config.yml"]
