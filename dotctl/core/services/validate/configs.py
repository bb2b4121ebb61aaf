"""
Config syntax checks — TOML, JSON and YAML files must parse.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

import yaml

from dotctl.core.models.check import CheckReport, CheckResult

CONFIG_EXTENSIONS = frozenset({".toml", ".json", ".yaml", ".yml"})


def _parse(path: Path, content: str) -> str:
    """Parse ``content`` by extension; returns the format name."""
    suffix = path.suffix.lower()
    if suffix == ".toml":
        tomllib.loads(content)
        return "TOML"
    if suffix == ".json":
        json.loads(content)
        return "JSON"
    # Multi-document YAML is allowed
    list(yaml.safe_load_all(content))
    return "YAML"


def validate_config(path: Path) -> CheckResult:
    name = f"Config:{path.name}"
    if path.suffix.lower() not in CONFIG_EXTENSIONS:
        ext = path.suffix or "(none)"
        return CheckResult.ok(name, f"Skipped validation for {ext} file")

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return CheckResult.error(name, f"Failed to read file: {e}")

    try:
        kind = _parse(path, content)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        kind = {".toml": "TOML", ".json": "JSON"}.get(path.suffix.lower(), "YAML")
        return CheckResult.error(
            name, f"Invalid {kind} syntax: {e}", f"Fix the {kind} syntax errors",
        )
    return CheckResult.ok(name, f"Valid {kind} syntax")


def scan_directory(directory: Path) -> CheckReport:
    report = CheckReport()
    if not directory.exists():
        report.add(CheckResult.error("Configs", f"Directory does not exist: {directory}"))
        return report

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        report.add(CheckResult.error("Configs", f"Failed to read directory: {e}"))
        return report

    for path in entries:
        if path.is_file() and path.suffix.lower() in CONFIG_EXTENSIONS:
            report.add(validate_config(path))

    if report.total == 0:
        report.add(CheckResult.ok("Configs", f"No config files found in {directory}"))
    return report
