"""
Settings model — the user's dotctl configuration.

Loaded from ``config.yml`` by ``dotctl.core.config.loader``. Every field
has a default, so an empty or missing file yields a usable setup rooted
at the current user's home directory.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_EXCLUSIONS = [".git", ".DS_Store", ".claude", "README.md", "LICENSE"]
DEFAULT_INDIVIDUAL_FILE_DIRS = [".claude"]


class LanguageManager(StrEnum):
    """Which tool manages language runtimes."""

    MISE = "mise"
    ASDF = "asdf"
    RTX = "rtx"
    NONE = "none"


class SymlinkMethod(StrEnum):
    """How links are created. ``auto`` picks the first available symlinker."""

    AUTO = "auto"
    STOW = "stow"
    NATIVE = "native"


class Settings(BaseModel):
    """User configuration.

    Path fields left unset are derived from ``home_dir`` after
    validation, so overriding only ``home_dir`` (as tests do) moves the
    whole layout.
    """

    home_dir: Path = Field(default_factory=Path.home)
    dotfiles_dir: Path | None = None
    xdg_config_home: Path | None = None
    backup_dir: Path | None = None

    repo_url: str = ""
    language_manager: LanguageManager = LanguageManager.MISE
    symlink_method: SymlinkMethod = SymlinkMethod.AUTO
    install_oh_my_zsh: bool = False

    backup_keep: int = Field(default=5, ge=0)
    exclusions: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUSIONS))
    individual_file_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INDIVIDUAL_FILE_DIRS)
    )
    secrets_file: str = ".env"
    shell_rc: str = ".zshrc"
    sync_script: str = "scripts/check-claude-changes.sh"

    @field_validator("home_dir", "dotfiles_dir", "xdg_config_home", "backup_dir", mode="before")
    @classmethod
    def _expand_user(cls, value: object) -> object:
        if isinstance(value, str):
            return Path(value).expanduser()
        if isinstance(value, Path):
            return value.expanduser()
        return value

    @model_validator(mode="after")
    def _derive_paths(self) -> Settings:
        if self.dotfiles_dir is None:
            self.dotfiles_dir = self.home_dir / "dotfiles"
        if self.xdg_config_home is None:
            self.xdg_config_home = self.home_dir / ".config"
        if self.backup_dir is None:
            self.backup_dir = self.home_dir
        return self

    @property
    def shell_rc_path(self) -> Path:
        return self.home_dir / self.shell_rc

    @property
    def sync_script_path(self) -> Path:
        assert self.dotfiles_dir is not None  # set by _derive_paths
        return self.dotfiles_dir / self.sync_script
