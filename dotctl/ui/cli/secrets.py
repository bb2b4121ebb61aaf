"""
CLI commands for secret scanning.

Thin wrappers over ``dotctl.core.services.secrets_scan``.
"""

from __future__ import annotations

import json

import click

from dotctl.ui.cli.context import get_settings, resolve_dir


@click.group()
def secrets() -> None:
    """Secrets — find and extract credentials committed to dotfiles."""


@secrets.command()
@click.argument("directory", required=False)
@click.option("--show-values", is_flag=True, help="Print secret values (default: redacted).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def scan(ctx: click.Context, directory: str | None, show_values: bool, as_json: bool) -> None:
    """Scan DIRECTORY (default: dotfiles dir) for secrets. Not recursive."""
    from dotctl.core.services.secrets_scan import group_by_file, scan_directory

    settings = get_settings(ctx)
    target = resolve_dir(directory, settings.dotfiles_dir)
    found = scan_directory(target)

    if as_json:
        click.echo(json.dumps({
            "directory": str(target),
            "total": len(found),
            "secrets": [s.to_dict(include_value=show_values) for s in found],
        }, indent=2))
        return

    if not found:
        click.secho(f"✅ No secrets found in {target}", fg="green")
        return

    groups = group_by_file(found)
    click.secho(
        f"🔑 Found {len(found)} secret(s) across {len(groups)} file(s):",
        fg="yellow", bold=True,
    )
    for source_file, file_secrets in groups.items():
        click.echo(f"   {source_file}:")
        for s in file_secrets:
            value = s.value if show_values else s.redacted()
            click.echo(f"     line {s.line_number}: {s.key} = {value}")
    click.echo()
    click.echo("   Run 'dotctl secrets extract' to move them to a gitignored .env file.")


@secrets.command()
@click.argument("directory", required=False)
@click.option("--output", "-o", default=None, help="Output file (default: ~/<secrets_file>).")
@click.option("--dry-run", is_flag=True, help="Show what would be written.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def extract(
    ctx: click.Context,
    directory: str | None,
    output: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Write secrets found in DIRECTORY to a KEY=value file.

    Duplicate keys keep their first value. The output file is
    overwritten.
    """
    from dotctl.core.services.secrets_scan import extract_to_file, scan_directory, summarize

    settings = get_settings(ctx)
    source = resolve_dir(directory, settings.dotfiles_dir)
    out_path = resolve_dir(output, settings.home_dir / settings.secrets_file)

    found = scan_directory(source)
    written = 0
    if found and not dry_run:
        written = extract_to_file(found, out_path)

    if as_json:
        click.echo(json.dumps({
            "found": len(found),
            "written": written,
            "output": str(out_path),
            "dry_run": dry_run,
        }, indent=2))
        return

    if not found:
        click.secho(f"✅ No secrets found in {source}", fg="green")
        return

    click.echo(summarize(found))
    if dry_run:
        click.secho(f"🔍 Dry run — would write {out_path}", fg="yellow")
        return
    click.secho(f"✅ Wrote {written} secret(s) to {out_path}", fg="green", bold=True)
    click.echo("   ⚠️  Add this file to .gitignore")
