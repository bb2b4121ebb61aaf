"""
Configuration loader — reads config.yml into the Settings model.

Lookup order for the config file:
    explicit ``--config`` path  >  $DOTCTL_CONFIG  >  $XDG_CONFIG_HOME/dotctl/config.yml
    (falling back to ~/.config/dotctl/config.yml)

A missing file is not an error: dotctl runs on defaults. Unreadable or
invalid files raise ``ConfigError``. Saving is atomic (write to temp
file, then rename) so a crash never leaves a truncated config behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

import yaml
from pydantic import ValidationError

from dotctl.core.errors import ConfigError
from dotctl.core.models.config import Settings

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "dotctl"
CONFIG_FILE = "config.yml"


def default_config_path() -> Path:
    """Resolve the config file location from the environment."""
    explicit = os.environ.get("DOTCTL_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / CONFIG_DIR_NAME / CONFIG_FILE


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate dotctl settings.

    Args:
        path: Explicit config path. If None, uses ``default_config_path()``.

    Returns:
        Validated Settings. Defaults when the file does not exist.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or fails validation.
    """
    if path is None:
        path = default_config_path()

    if not path.is_file():
        logger.info("No config file at %s — using defaults", path)
        return Settings()

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded settings (dotfiles_dir=%s)", settings.dotfiles_dir)
    return settings


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings as YAML (atomic). Returns the path written."""
    if path is None:
        path = default_config_path()

    path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json")
    content = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)

    _fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".config_", suffix=".tmp")
    os.close(_fd)
    tmp = Path(tmp_path)
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.replace(path)
    except OSError:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save settings to %s", path)
        raise

    logger.debug("Settings saved to %s", path)
    return path
