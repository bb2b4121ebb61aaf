"""
Shared CLI plumbing — settings from the click context and report rendering.
"""

from __future__ import annotations

from pathlib import Path

import click

from dotctl.core.models.config import Settings
from dotctl.core.models.link import OutcomeKind, ReconciliationReport

_OUTCOME_STYLE = {
    OutcomeKind.CREATED: ("✅", "green"),
    OutcomeKind.ALREADY_CORRECT: ("✓", None),
    OutcomeKind.REMOVED: ("🗑️ ", "green"),
    OutcomeKind.SKIPPED: ("⏭️ ", "yellow"),
    OutcomeKind.CONFLICT: ("❌", "red"),
}


def get_settings(ctx: click.Context) -> Settings:
    """Load settings once per invocation (cached on ``ctx.obj``).

    ``ConfigError`` propagates to the root group, which reports it.
    """
    root = ctx.find_root()
    root.ensure_object(dict)
    if "settings" not in root.obj:
        from dotctl.core.config.loader import load_settings

        root.obj["settings"] = load_settings(root.obj.get("config_path"))
    return root.obj["settings"]


def resolve_dir(value: str | None, default: Path) -> Path:
    return Path(value).expanduser() if value else default


def echo_report(report: ReconciliationReport, *, dry_run: bool = False, verbose: bool = False) -> None:
    """Print a reconciliation report. Correct links are listed only when verbose."""
    for outcome in report.outcomes:
        if outcome.kind == OutcomeKind.ALREADY_CORRECT and not verbose:
            continue
        icon, color = _OUTCOME_STYLE[outcome.kind]
        text = f"   {icon} {outcome.kind.replace('_', ' ')}: {outcome.target}"
        detail = outcome.describe()
        if detail:
            text += f"  ({detail})"
        click.secho(text, fg=color)

    click.echo()
    prefix = "🔍 Dry run — " if dry_run else ""
    color = "green" if report.is_success else "red"
    click.secho(f"{prefix}{report.summary()}", fg=color, bold=True)
