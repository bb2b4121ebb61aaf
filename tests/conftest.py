"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from dotctl.core.models.config import Settings

OK = {"ok": True, "stdout": "", "stderr": "", "returncode": 0, "elapsed_ms": 1}


class FakeRunner:
    """Stands in for ``run_command``: records commands, returns canned results.

    Results are looked up by ``(program name, first argument)``, e.g.
    ``("brew", "install")``; anything not registered succeeds.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.results: dict[tuple[str, str], dict] = {}
        self.output_tails: list[int | None] = []

    def __call__(self, cmd, *, timeout=300, cwd=None, env_overrides=None, output_tail=2000):
        self.calls.append(list(cmd))
        self.output_tails.append(output_tail)
        key = (Path(cmd[0]).name, cmd[1] if len(cmd) > 1 else "")
        return self.results.get(key, OK)

    def fail(self, program: str, arg: str, stderr: str = "boom", returncode: int = 1) -> None:
        self.results[(program, arg)] = {
            "ok": False,
            "error": f"Command failed (exit {returncode})",
            "stdout": "",
            "stderr": stderr,
            "returncode": returncode,
            "elapsed_ms": 1,
        }

    def programs(self) -> list[str]:
        return [Path(c[0]).name for c in self.calls]


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def dotfiles(home: Path) -> Path:
    """A small dotfiles repository inside the fake home."""
    repo = home / "dotfiles"
    repo.mkdir()
    (repo / ".zshrc").write_text("export EDITOR=nvim\n")
    (repo / ".gitconfig").write_text("[user]\n  name = Test\n")
    nvim = repo / ".config" / "nvim"
    nvim.mkdir(parents=True)
    (nvim / "init.lua").write_text("vim.o.number = true\n")
    (repo / ".git").mkdir()
    (repo / "README.md").write_text("# dotfiles\n")
    return repo


@pytest.fixture
def settings(home: Path, dotfiles: Path) -> Settings:
    """Settings rooted at the fake home, native links."""
    return Settings(home_dir=home, dotfiles_dir=dotfiles, symlink_method="native")


@pytest.fixture
def fake_run(monkeypatch) -> FakeRunner:
    """Replace ``run_command`` in every module that shells out."""
    runner = FakeRunner()
    for module in (
        "dotctl.adapters.symlink.stow",
        "dotctl.core.services.install.homebrew",
        "dotctl.core.services.install.version_manager",
        "dotctl.core.services.install.repos",
        "dotctl.core.services.validate.repo",
        "dotctl.core.services.validate.claude",
        "dotctl.core.services.validate.iterm",
    ):
        monkeypatch.setattr(f"{module}.run_command", runner)
    return runner


@pytest.fixture
def no_tools(monkeypatch):
    """Pretend nothing is installed: no brew, no stow, no version manager."""
    monkeypatch.setattr("shutil.which", lambda name, *a, **kw: None)
    monkeypatch.setattr("dotctl.core.services.install.homebrew.HOMEBREW_PATHS", ())
