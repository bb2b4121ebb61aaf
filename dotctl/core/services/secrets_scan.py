"""
Secret scanning — find credentials committed to dotfiles.

Lines are scanned independently for ``KEY=value`` assignments (with an
optional ``export``). A key counts as a secret when its upper-cased
name contains one of ``SECRET_KEYWORDS`` and none of
``NON_SECRET_KEYWORDS``; both checks are plain substring tests.

Found secrets can be consolidated into one gitignored ``.env`` file.
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from dotctl.core.models.secret import Secret

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════

SECRET_KEYWORDS = ("TOKEN", "KEY", "SECRET", "PASSWORD", "PASS", "AUTH")

NON_SECRET_KEYWORDS = ("PUBLIC_KEY", "SSH_KEY_PATH", "KEY_FILE", "KEYMAP")

SCAN_EXTENSIONS = frozenset({
    "sh", "bash", "zsh", "fish", "rc", "conf", "config",
    "toml", "yaml", "yml", "json", "env",
})

ENV_FILE_HEADER = (
    "# Extracted secrets - DO NOT COMMIT THIS FILE\n"
    "# Add this file to .gitignore\n"
    "\n"
)

_COMMENT_PREFIXES = ("#", "//")


# ═══════════════════════════════════════════════════════════════════
#  Patterns
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SecretPatterns:
    """Compiled patterns, built once per process by ``get_patterns()``."""

    env_var: re.Pattern[str]
    inline: tuple[tuple[str, re.Pattern[str]], ...]
    secret_keywords: tuple[str, ...] = SECRET_KEYWORDS
    non_secret_keywords: tuple[str, ...] = NON_SECRET_KEYWORDS


@functools.cache
def get_patterns() -> SecretPatterns:
    return SecretPatterns(
        # export API_TOKEN=abc, SECRET_KEY="abc", PASS='abc'
        env_var=re.compile(
            r"(?<![A-Za-z0-9_])(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)=['\"]?([^'\"\s]+)['\"]?"
        ),
        # api_key: "abc", token = abc, password: abc (YAML / JSON / INI)
        inline=(
            ("api_key", re.compile(r"(?:api[_-]?key|apiKey)\"?[:\s=]+['\"]?([^'\"\s,]+)['\"]?")),
            ("token", re.compile(r"(?:access[_-]?token|token)\"?[:\s=]+['\"]?([^'\"\s,]+)['\"]?")),
            ("password", re.compile(r"(?:password|passwd)\"?[:\s=]+['\"]?([^'\"\s,]+)['\"]?")),
        ),
    )


def is_likely_secret(key: str) -> bool:
    """True if ``key`` names a credential.

    >>> is_likely_secret("GITHUB_TOKEN")
    True
    >>> is_likely_secret("SSH_PUBLIC_KEY")
    False
    """
    patterns = get_patterns()
    upper = key.upper()
    if not any(word in upper for word in patterns.secret_keywords):
        return False
    return not any(word in upper for word in patterns.non_secret_keywords)


def _is_comment(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT_PREFIXES)


# ═══════════════════════════════════════════════════════════════════
#  Scan
# ═══════════════════════════════════════════════════════════════════


def scan_file(path: Path) -> list[Secret]:
    """Scan one file for secret assignments.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    patterns = get_patterns()
    content = path.read_text(encoding="utf-8")

    secrets: list[Secret] = []
    for line_num, line in enumerate(content.splitlines(), 1):
        if _is_comment(line):
            continue
        for match in patterns.env_var.finditer(line):
            key, value = match.group(1), match.group(2)
            if is_likely_secret(key):
                secrets.append(Secret(key, value, path.name, line_num))
    return secrets


def should_scan(path: Path) -> bool:
    """Config-ish files: known extension, or an extensionless dotfile."""
    if path.suffix:
        return path.suffix[1:] in SCAN_EXTENSIONS
    return path.name.startswith(".")


def scan_directory(directory: Path) -> list[Secret]:
    """Scan the direct children of ``directory`` (no recursion).

    A missing directory yields nothing. Files that fail to read are
    logged and skipped; an unreadable directory raises ``OSError``.
    """
    if not directory.exists():
        logger.debug("Scan target %s does not exist", directory)
        return []

    secrets: list[Secret] = []
    files_scanned = 0
    for path in directory.iterdir():
        if not path.is_file() or not should_scan(path):
            continue
        try:
            found = scan_file(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Skipping %s: %s", path, e)
            continue
        files_scanned += 1
        secrets.extend(found)

    logger.info(
        "Scanned %d file(s) in %s: %d secret(s)", files_scanned, directory, len(secrets),
    )
    return secrets


def scan_inline_credentials(path: Path) -> list[Secret]:
    """Find ``api_key: value``-style credentials in YAML/JSON/INI files.

    Values that reference an environment variable (``$FOO``,
    ``${FOO}``) are not reported.
    """
    patterns = get_patterns()
    content = path.read_text(encoding="utf-8")

    found: list[Secret] = []
    for line_num, line in enumerate(content.splitlines(), 1):
        if _is_comment(line):
            continue
        for name, pattern in patterns.inline:
            match = pattern.search(line)
            if match and not match.group(1).startswith("$"):
                found.append(Secret(name, match.group(1), path.name, line_num))
                break  # One finding per line
    return found


# ═══════════════════════════════════════════════════════════════════
#  Extract & report
# ═══════════════════════════════════════════════════════════════════


def extract_to_file(secrets: list[Secret], output_path: Path) -> int:
    """Write secrets as ``KEY=value`` lines, overwriting ``output_path``.

    Duplicate keys keep the first occurrence. Returns the number of
    ``KEY=value`` lines written.
    """
    seen: set[str] = set()
    lines: list[str] = []
    for secret in secrets:
        if secret.key in seen:
            continue
        seen.add(secret.key)
        lines.append(f"{secret.key}={secret.value}\n")

    output_path.write_text(ENV_FILE_HEADER + "".join(lines), encoding="utf-8")
    logger.info("Wrote %d secret(s) to %s", len(lines), output_path)
    return len(lines)


def group_by_file(secrets: list[Secret]) -> dict[str, list[Secret]]:
    """Group secrets by source file, in first-seen order."""
    groups: dict[str, list[Secret]] = {}
    for secret in secrets:
        groups.setdefault(secret.source_file, []).append(secret)
    return groups


def summarize(secrets: list[Secret]) -> str:
    """Human-readable report of where secrets were found."""
    groups = group_by_file(secrets)
    lines = [f"Found {len(secrets)} secret(s) across {len(groups)} file(s):", ""]
    for source_file, file_secrets in groups.items():
        lines.append(f"{source_file}:")
        for secret in file_secrets:
            lines.append(f"  line {secret.line_number}: {secret.key}")
        lines.append("")
    return "\n".join(lines)
