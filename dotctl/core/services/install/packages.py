"""
Package catalog — the Homebrew packages dotctl manages, by category.

Installs are best-effort: one failing package is logged and recorded,
and the rest of the category still installs. Packages that are already
present are left alone, so re-running an install is safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from dotctl.core.errors import DependencyMissingError, DotfilesError
from dotctl.core.services.install import homebrew

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Catalog
# ═══════════════════════════════════════════════════════════════════

ESSENTIAL_PACKAGES = ("stow", "fzf", "bat", "fd", "tree", "nvim", "tmux")

OPTIONAL_PACKAGES = ("ripgrep", "git", "curl", "wget")

DEVELOPMENT_PACKAGES = ("gh", "jq", "yq", "httpie", "just")

CLOUD_PACKAGES = ("awscli", "opentofu", "terraform")

PRODUCTIVITY_PACKAGES = ("obsidian", "yakitrak/tap/obsidian-cli")

EDITOR_PACKAGES = ("helix", "lazygit")

CATEGORIES: dict[str, tuple[str, ...]] = {
    "essential": ESSENTIAL_PACKAGES,
    "optional": OPTIONAL_PACKAGES,
    "development": DEVELOPMENT_PACKAGES,
    "cloud": CLOUD_PACKAGES,
    "productivity": PRODUCTIVITY_PACKAGES,
    "editor": EDITOR_PACKAGES,
}


def get_category(name: str) -> tuple[str, ...]:
    try:
        return CATEGORIES[name]
    except KeyError:
        known = ", ".join(CATEGORIES)
        raise DotfilesError(f"Unknown package category '{name}' (known: {known})") from None


# ═══════════════════════════════════════════════════════════════════
#  Status
# ═══════════════════════════════════════════════════════════════════


@dataclass
class CategoryStatus:
    category: str
    installed: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "installed": self.installed,
            "missing": self.missing,
            "complete": self.is_complete,
        }


def category_status(category: str) -> CategoryStatus:
    status = CategoryStatus(category)
    for package in get_category(category):
        if homebrew.is_package_installed(package):
            status.installed.append(package)
        else:
            status.missing.append(package)
    return status


def package_status(categories: list[str] | None = None) -> dict[str, CategoryStatus]:
    """Installed/missing packages per category (all categories by default)."""
    names = categories or list(CATEGORIES)
    return {name: category_status(name) for name in names}


# ═══════════════════════════════════════════════════════════════════
#  Install
# ═══════════════════════════════════════════════════════════════════


@dataclass
class InstallSummary:
    installed: list[str] = field(default_factory=list)
    already_installed: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "installed": self.installed,
            "already_installed": self.already_installed,
            "failed": self.failed,
        }


def install_packages(category: str, *, dry_run: bool = False) -> InstallSummary:
    """Install every missing package of ``category``.

    Raises:
        DependencyMissingError: If Homebrew is not installed (and not a dry run).
    """
    packages = get_category(category)
    if not dry_run and not homebrew.is_installed():
        raise DependencyMissingError("Homebrew")

    summary = InstallSummary()
    for package in packages:
        if homebrew.is_package_installed(package):
            summary.already_installed.append(package)
            continue
        if dry_run:
            logger.info("Would install %s", package)
            summary.installed.append(package)
            continue
        try:
            homebrew.install_package(package)
        except DotfilesError as e:
            logger.warning("Failed to install %s: %s", package, e)
            summary.failed[package] = str(e)
            continue
        summary.installed.append(package)

    logger.info(
        "%s packages: %d installed, %d already present, %d failed",
        category, len(summary.installed), len(summary.already_installed), len(summary.failed),
    )
    return summary
