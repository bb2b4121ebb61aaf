"""
CLI commands for Homebrew package management.

Thin wrappers over ``dotctl.core.services.install.packages``.
"""

from __future__ import annotations

import json
import sys

import click

from dotctl.core.services.install.packages import CATEGORIES

_CATEGORY = click.Choice(list(CATEGORIES))


@click.group()
def packages() -> None:
    """Packages — catalog status and installs via Homebrew."""


@packages.command()
@click.option("--category", "-c", "categories", type=_CATEGORY, multiple=True,
              help="Limit to a category (repeatable).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def status(categories: tuple[str, ...], as_json: bool) -> None:
    """Show installed and missing packages per category."""
    from dotctl.core.services.install.packages import package_status

    result = package_status(list(categories) or None)

    if as_json:
        click.echo(json.dumps({k: v.to_dict() for k, v in result.items()}, indent=2))
        return

    click.secho("📦 Packages:", fg="cyan", bold=True)
    for name, st in result.items():
        icon = "✅" if st.is_complete else "⚠️ "
        click.echo(f"   {icon} {name}: {len(st.installed)}/{len(st.installed) + len(st.missing)}")
        if st.missing:
            click.secho(f"      missing: {', '.join(st.missing)}", fg="yellow")
    click.echo()


@packages.command()
@click.argument("categories", nargs=-1, type=_CATEGORY)
@click.option("--dry-run", is_flag=True, help="List what would be installed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def install(categories: tuple[str, ...], dry_run: bool, as_json: bool) -> None:
    """Install missing packages of CATEGORIES (default: essential)."""
    from dotctl.core.services.install.packages import install_packages

    results = {c: install_packages(c, dry_run=dry_run) for c in categories or ("essential",)}
    failed = any(not r.ok for r in results.values())

    if as_json:
        click.echo(json.dumps(
            {"dry_run": dry_run, "categories": {k: v.to_dict() for k, v in results.items()}},
            indent=2,
        ))
        if failed:
            sys.exit(1)
        return

    verb = "Would install" if dry_run else "Installed"
    for name, summary in results.items():
        click.secho(f"📦 {name}", fg="cyan", bold=True)
        if summary.installed:
            click.secho(f"   ✅ {verb}: {', '.join(summary.installed)}", fg="green")
        if summary.already_installed:
            click.echo(f"   ✓ Already installed: {', '.join(summary.already_installed)}")
        for pkg, err in summary.failed.items():
            click.secho(f"   ❌ {pkg}: {err}", fg="red")

    if failed:
        sys.exit(1)
