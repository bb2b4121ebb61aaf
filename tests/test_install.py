"""
Tests for install services — Homebrew, package catalog, version managers,
languages, repositories and shell rc wiring. No real command is run.
"""

from pathlib import Path

import pytest

from dotctl.core.errors import DependencyMissingError, DotfilesError, InstallFailedError
from dotctl.core.services import detection
from dotctl.core.services.install import (
    homebrew,
    languages,
    packages,
    repos,
    shell_rc,
    version_manager,
)
from dotctl.core.services.install.version_manager import VersionManager


@pytest.fixture
def brew(monkeypatch, tmp_path: Path) -> Path:
    """A fake brew binary at the first standard prefix."""
    path = tmp_path / "brew"
    path.write_text("#!/bin/sh\n")
    monkeypatch.setattr(homebrew, "HOMEBREW_PATHS", (str(path),))
    return path


@pytest.fixture
def on_path(monkeypatch):
    """Make ``shutil.which`` find exactly the given tools."""
    def _set(*tools: str):
        monkeypatch.setattr(
            "shutil.which",
            lambda name, *a, **kw: f"/usr/bin/{name}" if name in tools else None,
        )
    return _set


class TestDetection:
    @pytest.mark.parametrize("system,expected", [
        ("Darwin", "macos"), ("Linux", "linux"), ("Windows", "unknown"),
    ])
    def test_detect_os(self, monkeypatch, system: str, expected: str):
        monkeypatch.setattr("platform.system", lambda: system)
        assert detection.detect_os() == expected

    def test_is_installed(self, on_path):
        on_path("git")
        assert detection.is_installed("git")
        assert detection.tool_path("git") == "/usr/bin/git"
        assert not detection.is_installed("stow")


class TestHomebrew:
    def test_detect_standard_prefix(self, brew: Path):
        assert homebrew.detect_homebrew() == brew
        assert homebrew.is_installed()

    def test_detect_on_path(self, no_tools, on_path):
        on_path("brew")
        assert homebrew.detect_homebrew() == Path("/usr/bin/brew")

    def test_not_installed(self, no_tools):
        assert homebrew.detect_homebrew() is None

    def test_package_installed(self, brew: Path, fake_run):
        assert homebrew.is_package_installed("fzf")
        assert fake_run.calls == [[str(brew), "list", "fzf"]]

    def test_tap_package_uses_short_name(self, brew: Path, fake_run):
        homebrew.is_package_installed("yakitrak/tap/obsidian-cli")
        assert fake_run.calls[0][-1] == "obsidian-cli"

    def test_package_missing(self, brew: Path, fake_run):
        fake_run.fail("brew", "list")
        assert not homebrew.is_package_installed("fzf")

    def test_package_check_without_brew(self, no_tools, fake_run):
        assert not homebrew.is_package_installed("fzf")
        assert fake_run.calls == []

    def test_install_package(self, brew: Path, fake_run):
        homebrew.install_package("bat")
        assert fake_run.calls == [[str(brew), "install", "bat"]]

    def test_install_package_failure(self, brew: Path, fake_run):
        fake_run.fail("brew", "install", stderr="Error: No formula")
        with pytest.raises(InstallFailedError, match="No formula"):
            homebrew.install_package("nope")

    def test_install_package_without_brew(self, no_tools):
        with pytest.raises(DependencyMissingError):
            homebrew.install_package("bat")

    def test_install_homebrew_noop_when_present(self, brew: Path, fake_run):
        homebrew.install_homebrew()
        assert fake_run.calls == []


class TestPackages:
    def test_catalog(self):
        assert "stow" in packages.ESSENTIAL_PACKAGES
        assert set(packages.CATEGORIES) == {
            "essential", "optional", "development", "cloud", "productivity", "editor",
        }

    def test_unknown_category(self):
        with pytest.raises(DotfilesError, match="Unknown package category"):
            packages.get_category("games")

    def test_status(self, brew: Path, fake_run):
        fake_run.fail("brew", "list")
        status = packages.package_status(["cloud"])
        assert list(status) == ["cloud"]
        assert status["cloud"].missing == list(packages.CLOUD_PACKAGES)
        assert not status["cloud"].is_complete

    def test_install_is_best_effort(self, brew: Path, monkeypatch):
        installed: list[str] = []
        monkeypatch.setattr(homebrew, "is_package_installed", lambda p: p == "gh")

        def fake_install(pkg):
            if pkg == "jq":
                raise InstallFailedError("Failed to install jq: boom")
            installed.append(pkg)

        monkeypatch.setattr(homebrew, "install_package", fake_install)
        summary = packages.install_packages("development")

        assert summary.already_installed == ["gh"]
        assert summary.failed == {"jq": "Failed to install jq: boom"}
        assert summary.installed == ["yq", "httpie", "just"]
        assert installed == ["yq", "httpie", "just"]
        assert not summary.ok

    def test_install_idempotent(self, brew: Path, fake_run):
        summary = packages.install_packages("editor")
        assert summary.installed == []
        assert summary.already_installed == list(packages.EDITOR_PACKAGES)
        assert all(c[1] == "list" for c in fake_run.calls)

    def test_install_dry_run_installs_nothing(self, brew: Path, fake_run):
        fake_run.fail("brew", "list")
        summary = packages.install_packages("cloud", dry_run=True)
        assert summary.installed == list(packages.CLOUD_PACKAGES)
        assert not any(c[1] == "install" for c in fake_run.calls)

    def test_install_without_brew(self, no_tools):
        with pytest.raises(DependencyMissingError):
            packages.install_packages("essential")


class TestVersionManager:
    def test_detect_preference_order(self, on_path):
        on_path("rtx", "asdf")
        assert version_manager.detect() == VersionManager.ASDF

    def test_detect_none(self, no_tools):
        assert version_manager.detect() is None

    def test_display_names(self):
        assert VersionManager.ASDF.display_name == "ASDF"
        assert VersionManager.MISE.display_name == "mise"

    def test_install_preferred_keeps_existing(self, on_path, fake_run):
        on_path("asdf")
        assert version_manager.install_preferred(VersionManager.MISE) == VersionManager.ASDF
        assert fake_run.calls == []

    def test_install_preferred_installs(self, no_tools, brew: Path, fake_run):
        assert version_manager.install_preferred() == VersionManager.MISE
        assert fake_run.calls == [[str(brew), "install", "mise"]]

    def test_install_language_mise(self, on_path, fake_run):
        on_path("mise")
        version_manager.install_language(VersionManager.MISE, "python", "3.12.1")
        assert fake_run.calls == [
            ["/usr/bin/mise", "install", "python", "3.12.1"],
            ["/usr/bin/mise", "use", "--global", "python@3.12.1"],
        ]

    def test_install_language_asdf_adds_plugin(self, on_path, fake_run):
        on_path("asdf")
        version_manager.install_language(VersionManager.ASDF, "nodejs", "22.12.0")
        assert fake_run.calls[0] == ["/usr/bin/asdf", "plugin", "add", "nodejs"]
        assert fake_run.calls[1] == ["/usr/bin/asdf", "install", "nodejs", "22.12.0"]
        assert fake_run.calls[2][:3] == ["/usr/bin/asdf", "set", "--home"]

    def test_install_language_asdf_plugin_already_added(self, on_path, fake_run):
        on_path("asdf")
        fake_run.fail("asdf", "plugin", stderr="plugin already added")
        version_manager.install_language(VersionManager.ASDF, "rust", "1.83.0")
        assert len(fake_run.calls) == 3

    def test_install_language_failure(self, on_path, fake_run):
        on_path("mise")
        fake_run.fail("mise", "install")
        with pytest.raises(InstallFailedError):
            version_manager.install_language(VersionManager.MISE, "python", "3.12.1")

    def test_install_language_missing_manager(self, no_tools):
        with pytest.raises(DependencyMissingError):
            version_manager.install_language(VersionManager.MISE, "python", "3.12.1")


class TestLanguages:
    def test_catalog(self):
        names = [lang.name for lang in languages.LANGUAGES]
        assert names == ["java", "nodejs", "python", "rust", "golang"]

    def test_lookup(self):
        assert languages.get_language("Node.js").name == "nodejs"
        assert languages.get_language("GOLANG").default_version == "1.23.4"
        assert languages.get_language("cobol") is None

    def test_install_uses_default_version(self, on_path, fake_run):
        on_path("mise")
        languages.get_language("rust").install(VersionManager.MISE)
        assert fake_run.calls[0][-1] == "1.83.0"

    def test_fallback_instructions(self):
        assert "rustup" in languages.get_language("rust").fallback_instructions


class TestRepos:
    def test_clone(self, tmp_path: Path, fake_run):
        target = tmp_path / "sub" / "dotfiles"
        assert repos.clone_repo("https://example.com/d.git", target)
        assert fake_run.calls == [["git", "clone", "https://example.com/d.git", str(target)]]

    def test_clone_noop_when_present(self, tmp_path: Path, fake_run):
        assert not repos.clone_repo("https://example.com/d.git", tmp_path)
        assert fake_run.calls == []

    def test_clone_failure(self, tmp_path: Path, fake_run):
        fake_run.fail("git", "clone", stderr="fatal: repository not found")
        with pytest.raises(InstallFailedError, match="repository not found"):
            repos.clone_repo("https://example.com/d.git", tmp_path / "d")

    def test_is_git_repo(self, tmp_path: Path):
        assert not repos.is_git_repo(tmp_path)
        (tmp_path / ".git").mkdir()
        assert repos.is_git_repo(tmp_path)


class TestShellRc:
    def test_adds_source_line_once(self, tmp_path: Path):
        rc = tmp_path / ".zshrc"
        rc.write_text("export EDITOR=nvim\n")
        script = tmp_path / "dotfiles" / "sync.sh"

        assert shell_rc.ensure_script_sourced(rc, script, "sync.sh")
        assert not shell_rc.ensure_script_sourced(rc, script, "sync.sh")

        content = rc.read_text()
        assert content.startswith("export EDITOR=nvim\n")
        assert content.count(f"source {script}") == 1
        assert shell_rc.MARKER in content

    def test_creates_missing_rc(self, tmp_path: Path):
        rc = tmp_path / ".zshrc"
        assert shell_rc.ensure_script_sourced(rc, tmp_path / "s.sh", "s.sh")
        assert rc.exists()

    def test_dot_form_counts(self, tmp_path: Path):
        assert shell_rc.is_script_sourced(f". {tmp_path}/s.sh\n", tmp_path / "s.sh")
