"""
Version managers — mise, asdf and rtx install language runtimes.

Detection follows the preference order mise > asdf > rtx. Installing a
manager goes through Homebrew.
"""

from __future__ import annotations

import logging
import shutil
from enum import StrEnum

from dotctl.adapters.shell.command import run_command
from dotctl.core.errors import DependencyMissingError, InstallFailedError
from dotctl.core.services.install import homebrew

logger = logging.getLogger(__name__)

_INSTALL_TIMEOUT = 3600


class VersionManager(StrEnum):
    MISE = "mise"
    ASDF = "asdf"
    RTX = "rtx"  # older name of mise

    @property
    def command(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return "ASDF" if self is VersionManager.ASDF else self.value

    @property
    def homebrew_package(self) -> str:
        return self.value


PREFERENCE_ORDER = (VersionManager.MISE, VersionManager.ASDF, VersionManager.RTX)


def path_of(vm: VersionManager) -> str | None:
    return shutil.which(vm.command)


def is_installed(vm: VersionManager) -> bool:
    return path_of(vm) is not None


def detect() -> VersionManager | None:
    """First installed version manager in preference order."""
    for vm in PREFERENCE_ORDER:
        if is_installed(vm):
            return vm
    return None


def install(vm: VersionManager) -> None:
    if is_installed(vm):
        logger.info("%s is already installed", vm.display_name)
        return
    homebrew.install_package(vm.homebrew_package)
    logger.info("%s installed", vm.display_name)


def install_preferred(preferred: VersionManager = VersionManager.MISE) -> VersionManager:
    """Return the installed manager, installing ``preferred`` if there is none."""
    existing = detect()
    if existing is not None:
        return existing
    install(preferred)
    return preferred


def install_language(vm: VersionManager, language: str, version: str) -> None:
    """Install ``language@version`` with ``vm`` and make it the global default.

    Raises:
        DependencyMissingError: If ``vm`` is not installed.
        InstallFailedError: If the install or the global switch fails.
    """
    vm_path = path_of(vm)
    if vm_path is None:
        raise DependencyMissingError(vm.display_name)

    logger.info("Installing %s %s with %s", language, version, vm.display_name)

    if vm is VersionManager.ASDF:
        # Fails harmlessly when the plugin is already added
        run_command([vm_path, "plugin", "add", language], timeout=300)

    result = run_command([vm_path, "install", language, version], timeout=_INSTALL_TIMEOUT)
    if not result["ok"]:
        raise InstallFailedError(f"Failed to install {language} {version}: {result['error']}")

    if vm is VersionManager.ASDF:
        use_cmd = [vm_path, "set", "--home", language, version]
    else:
        use_cmd = [vm_path, "use", "--global", f"{language}@{version}"]
    result = run_command(use_cmd, timeout=120)
    if not result["ok"]:
        raise InstallFailedError(
            f"Failed to set {language} {version} as global: {result['error']}"
        )

    logger.info("%s %s installed and set as global", language, version)
