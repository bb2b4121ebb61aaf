"""
Tests for the non-interactive setup workflow.
"""

from pathlib import Path

import pytest

from dotctl.core.models.config import Settings
from dotctl.core.services.install import homebrew, version_manager
from dotctl.core.services.setup_ops import (
    FAILED,
    OK,
    PLANNED,
    SKIPPED,
    SetupOptions,
    run_setup,
)


@pytest.fixture
def linux(monkeypatch):
    monkeypatch.setattr("platform.system", lambda: "Linux")


def _steps(result) -> dict[str, str]:
    return {s.name: s.status for s in result.steps}


class TestRunSetup:
    def test_links_only(self, settings: Settings, home: Path, linux, no_tools):
        opts = SetupOptions(install_packages=False)
        result = run_setup(settings.model_copy(update={"language_manager": "none"}), opts)

        assert result.ok
        assert _steps(result) == {
            "version_manager": SKIPPED,
            "links": OK,
            "shell": SKIPPED,
        }
        assert (home / ".zshrc").is_symlink()

    def test_dry_run_plans_everything(self, settings: Settings, home: Path, linux, no_tools, fake_run):
        before = sorted(p.name for p in home.iterdir())
        result = run_setup(settings, SetupOptions(dry_run=True, languages=("python",)))

        steps = _steps(result)
        assert steps["homebrew"] == SKIPPED
        assert steps["version_manager"] == PLANNED
        assert steps["packages:essential"] == PLANNED
        assert steps["language:python"] == PLANNED
        assert steps["links"] == OK
        assert result.ok
        assert sorted(p.name for p in home.iterdir()) == before
        assert fake_run.calls == []

    def test_failures_do_not_stop_later_steps(self, settings: Settings, home: Path, linux, no_tools):
        result = run_setup(settings, SetupOptions(languages=("cobol",)))

        steps = _steps(result)
        assert steps["version_manager"] == FAILED
        assert steps["packages:essential"] == FAILED
        assert steps["language:cobol"] == FAILED
        assert steps["links"] == OK
        assert not result.ok
        assert len(result.failed) == 3
        assert (home / ".zshrc").is_symlink()

    def test_link_conflict_fails_step(self, settings: Settings, home: Path, linux, no_tools):
        (home / ".zshrc").write_text("local")
        result = run_setup(settings, SetupOptions(install_packages=False))
        assert _steps(result)["links"] == FAILED
        assert len(result.link_report.conflicts) == 1

    def test_languages_installed_with_detected_manager(
        self, settings: Settings, linux, monkeypatch, fake_run,
    ):
        monkeypatch.setattr(
            "shutil.which", lambda name, *a, **kw: "/usr/bin/mise" if name == "mise" else None,
        )
        result = run_setup(settings, SetupOptions(install_packages=False, link=False, languages=("golang",)))
        assert _steps(result)["language:golang"] == OK
        assert ["/usr/bin/mise", "install", "golang", "1.23.4"] in fake_run.calls

    def test_shell_step_sources_script(self, settings: Settings, home: Path, linux, no_tools):
        script = settings.sync_script_path
        script.parent.mkdir(parents=True)
        script.write_text("#!/bin/sh\n")

        run_setup(settings, SetupOptions(install_packages=False, link=False))

        assert f"source {script}" in (home / ".zshrc").read_text()

    def test_tpm_cloned_when_tmux_conf_present(
        self, settings: Settings, home: Path, dotfiles: Path, linux, no_tools, fake_run,
    ):
        (dotfiles / ".tmux.conf").write_text("set -g mouse on\n")
        result = run_setup(settings, SetupOptions(install_packages=False, link=False))
        assert _steps(result)["tpm"] == OK
        assert fake_run.calls[-1][:2] == ["git", "clone"]
        assert fake_run.calls[-1][-1] == str(home / ".tmux" / "plugins" / "tpm")

    def test_oh_my_zsh_already_present(self, settings: Settings, home: Path, linux, no_tools, fake_run):
        (home / ".oh-my-zsh").mkdir()
        s = settings.model_copy(update={"install_oh_my_zsh": True})
        result = run_setup(s, SetupOptions(install_packages=False, link=False))
        assert _steps(result)["oh-my-zsh"] == OK
        assert fake_run.calls == []

    def test_homebrew_installed_on_macos(self, settings: Settings, monkeypatch, no_tools, fake_run):
        monkeypatch.setattr("platform.system", lambda: "Darwin")
        monkeypatch.setattr(homebrew, "is_installed", lambda: False)
        monkeypatch.setattr(version_manager, "detect", lambda: version_manager.VersionManager.MISE)
        result = run_setup(settings, SetupOptions(categories=(), link=False))
        assert _steps(result)["homebrew"] == OK
        assert fake_run.programs()[0] == "bash"

    def test_to_dict(self, settings: Settings, linux, no_tools):
        d = run_setup(settings, SetupOptions(dry_run=True)).to_dict()
        assert d["dry_run"] is True
        assert d["links"]["success"] is True
        assert {s["name"] for s in d["steps"]} >= {"links", "version_manager"}
