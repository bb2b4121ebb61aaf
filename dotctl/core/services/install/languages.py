"""
Language runtimes installable through a version manager.
"""

from __future__ import annotations

from dataclasses import dataclass

from dotctl.core.services.install import version_manager
from dotctl.core.services.install.version_manager import VersionManager


@dataclass(frozen=True)
class Language:
    """A runtime as named by the version manager's plugin."""

    name: str
    display_name: str
    default_version: str
    fallback_instructions: str

    def install(self, vm: VersionManager, version: str | None = None) -> None:
        version_manager.install_language(vm, self.name, version or self.default_version)

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "default_version": self.default_version,
        }


LANGUAGES: tuple[Language, ...] = (
    Language(
        "java", "Java", "openjdk-21",
        "Install Java manually:\n"
        "  - macOS: brew install openjdk@21\n"
        "  - Linux: sudo apt install openjdk-21-jdk",
    ),
    Language(
        "nodejs", "Node.js", "22.12.0",
        "Install Node.js manually:\n"
        "  - macOS: brew install node\n"
        "  - Linux: use the NodeSource packages (https://github.com/nodesource/distributions)\n"
        "  - Or use nvm: https://github.com/nvm-sh/nvm",
    ),
    Language(
        "python", "Python", "3.12.1",
        "Install Python manually:\n"
        "  - macOS: brew install python@3.12\n"
        "  - Linux: sudo apt install python3.12\n"
        "  - Or use pyenv: https://github.com/pyenv/pyenv",
    ),
    Language(
        "rust", "Rust", "1.83.0",
        "Install Rust manually:\n"
        "  - All platforms: curl --proto '=https' --tlsv1.2 -sSf https://sh.rustup.rs | sh\n"
        "  - Or visit: https://rustup.rs",
    ),
    Language(
        "golang", "Go", "1.23.4",
        "Install Go manually:\n"
        "  - macOS: brew install go\n"
        "  - Linux: sudo apt install golang\n"
        "  - Or visit: https://go.dev/doc/install",
    ),
)


def get_language(name: str) -> Language | None:
    """Look up by plugin name or display name (case-insensitive)."""
    wanted = name.lower()
    for language in LANGUAGES:
        if wanted in (language.name, language.display_name.lower()):
            return language
    return None
