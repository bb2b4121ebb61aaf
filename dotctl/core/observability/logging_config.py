"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Console level precedence:
    --debug  >  --verbose  >  --quiet  >  DOTCTL_LOG_LEVEL  >  WARNING

Optional file output via DOTCTL_LOG_FILE / DOTCTL_LOG_FILE_LEVEL env vars.
The file always gets full detail; the console stays terse unless asked.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

ENV_LEVEL = "DOTCTL_LOG_LEVEL"
ENV_FILE = "DOTCTL_LOG_FILE"
ENV_FILE_LEVEL = "DOTCTL_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: the message only, prefixed like CLI output
_FMT_MINIMAL = "%(message)s"

# INFO: timestamp plus the module that logged
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG and file output: level and file:line
_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_ICONS = {
    logging.WARNING: "⚠️  ",
    logging.ERROR: "❌ ",
    logging.CRITICAL: "❌ ",
}


class _ConsoleFormatter(logging.Formatter):
    """Minimal console format: warnings and errors get the CLI's icons."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        return _ICONS.get(record.levelno, "") + text


@dataclass(frozen=True)
class LogEnvironment:
    """Logging knobs read from the environment."""

    level: str | None = None
    file: str | None = None
    file_level: str | None = None

    @classmethod
    def from_env(cls) -> LogEnvironment:
        return cls(
            level=os.environ.get(ENV_LEVEL) or None,
            file=os.environ.get(ENV_FILE) or None,
            file_level=os.environ.get(ENV_FILE_LEVEL) or None,
        )


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Safe to call more than once: existing root handlers are replaced.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file. Parent directories are
            created.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
    """
    numeric_level = _parse_level(level)

    # ── Console handler (stderr) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_SHORT)
    elif numeric_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_SHORT)
    else:
        formatter = _ConsoleFormatter(_FMT_MINIMAL)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    logging.raiseExceptions = False


def resolve_level(*, debug: bool, verbose: bool, quiet: bool, env_level: str | None) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
