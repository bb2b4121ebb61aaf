"""
Error taxonomy — every environmental failure dotctl raises.

Structural outcomes (a link conflict, a failed health check) are never
exceptions; they are returned as data. Only failures of the environment
(missing preconditions, unsupported platform, external tools failing)
are raised, always as a subclass of ``DotfilesError``.

Plain ``OSError`` from the filesystem is not wrapped: it propagates as-is
and the CLI reports it the same way.
"""

from __future__ import annotations


class DotfilesError(Exception):
    """Base class for all dotctl errors."""


class ConfigError(DotfilesError):
    """Raised when dotctl configuration is invalid or unreadable."""


class SymlinkFailedError(DotfilesError):
    """Raised when a link operation cannot run at all."""


class SourceMissingError(SymlinkFailedError):
    """Raised when the source directory of a link operation does not exist."""

    def __init__(self, source) -> None:
        self.source = source
        super().__init__(f"Source directory does not exist: {source}")


class UnsupportedPlatformError(SymlinkFailedError):
    """Raised when the platform has no usable native symlink primitive."""


class DependencyMissingError(DotfilesError):
    """Raised when a required external tool is not installed."""

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Dependency missing: {tool}")


class InstallFailedError(DotfilesError):
    """Raised when installing a package, runtime or repository fails."""


class BackupError(DotfilesError):
    """Raised when a backup cannot be created or restored."""
