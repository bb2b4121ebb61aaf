"""
Shell command runner — the single place external tools are executed.

Every call to brew, git, stow or a version manager goes through
``run_command`` so logging, timeouts and error capture live in one spot.
It never raises: failures come back in the result dict and the caller
decides whether they are fatal.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_OUTPUT_TAIL = 2000
_TRUNCATED = "[... output truncated]\n"


def run_command(
    cmd: list[str],
    *,
    timeout: int = 300,
    cwd: Path | str | None = None,
    env_overrides: dict[str, str] | None = None,
    output_tail: int | None = _OUTPUT_TAIL,
) -> dict[str, Any]:
    """Run a command and capture its output.

    Args:
        cmd: Command list for ``subprocess.run()``.
        timeout: Seconds before ``TimeoutExpired``.
        cwd: Working directory for the command.
        env_overrides: Extra environment variables.
        output_tail: Keep about this many trailing characters of
            stdout/stderr, cut at a line boundary. None keeps everything.

    Returns:
        ``{"ok": True, "stdout": "...", "stderr": "...", "returncode": 0,
        "elapsed_ms": N}`` on success, ``{"ok": False, "error": "...", ...}``
        on failure.
    """
    env = None
    if env_overrides:
        env = os.environ.copy()
        env.update(env_overrides)

    logger.debug("Running: %s (cwd=%s)", " ".join(cmd), cwd)
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=cwd,
            env=env,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, cmd[0])
        return {"ok": False, "error": f"Command timed out ({timeout}s)", "returncode": None}
    except OSError as e:
        logger.warning("Cannot execute %s: %s", cmd[0], e)
        return {"ok": False, "error": str(e), "returncode": None}

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = tail_lines(result.stdout or "", output_tail)
    stderr = tail_lines(result.stderr or "", output_tail)

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": stdout,
            "stderr": stderr,
            "returncode": 0,
            "elapsed_ms": elapsed_ms,
        }

    logger.debug("Command failed (exit %d): %s", result.returncode, stderr.strip())
    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stdout": stdout,
        "stderr": stderr,
        "returncode": result.returncode,
        "elapsed_ms": elapsed_ms,
    }


def tail_lines(text: str, limit: int | None) -> str:
    """Keep the end of ``text``, dropping whole leading lines only.

    Truncated output starts with a marker line so readers know lines
    are missing.
    """
    if limit is None or len(text) <= limit:
        return text
    kept = text[-limit:]
    newline = kept.find("\n")
    if newline != -1:
        kept = kept[newline + 1:]
    return _TRUNCATED + kept
