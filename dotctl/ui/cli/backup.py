"""
CLI commands for Backup & Restore.

Thin wrappers over ``dotctl.core.services.backup_ops``.
"""

from __future__ import annotations

import json
import sys

import click

from dotctl.ui.cli.context import get_settings, resolve_dir


def _pick_backup(ctx: click.Context, name: str | None):
    from dotctl.core.services.backup_ops import find_backup, get_latest_backup

    settings = get_settings(ctx)
    if name:
        found = find_backup(name, settings.backup_dir)
        if found is None:
            click.secho(f"❌ No backup named {name} in {settings.backup_dir}", fg="red")
            sys.exit(1)
        return found
    latest = get_latest_backup(settings.backup_dir)
    if latest is None:
        click.secho(f"❌ No backups found in {settings.backup_dir}", fg="red")
        sys.exit(1)
    return latest


@click.group()
def backup() -> None:
    """Backup & Restore — snapshot, list, restore, and prune backups."""


@backup.command()
@click.argument("source", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def create(ctx: click.Context, source: str | None, as_json: bool) -> None:
    """Back up SOURCE (default: dotfiles dir) into a timestamped directory."""
    from dotctl.core.services.backup_ops import create_backup

    settings = get_settings(ctx)
    src = resolve_dir(source, settings.dotfiles_dir)
    path = create_backup(src, settings.backup_dir)

    if as_json:
        click.echo(json.dumps({"source": str(src), "backup": str(path)}, indent=2))
        return
    click.secho(f"✅ Backup created: {path.name}", fg="green", bold=True)
    click.echo(f"   Path: {path}")


@backup.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_backups_cmd(ctx: click.Context, as_json: bool) -> None:
    """List backups, newest first."""
    from dotctl.core.services.backup_ops import list_backups

    settings = get_settings(ctx)
    backups = list_backups(settings.backup_dir)

    if as_json:
        click.echo(json.dumps({"backups": [b.to_dict() for b in backups]}, indent=2))
        return

    if not backups:
        click.secho(f"No backups found in {settings.backup_dir}", fg="yellow")
        return

    click.secho(f"📦 Backups in {settings.backup_dir} ({len(backups)}):", fg="cyan", bold=True)
    for b in backups:
        click.echo(f"   {b.path.name}  ({b.created_at:%Y-%m-%d %H:%M:%S})")
    click.echo()


@backup.command()
@click.argument("name", required=False)
@click.option("--target", "-t", default=None, help="Directory to restore into (default: dotfiles dir).")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def restore(
    ctx: click.Context,
    name: str | None,
    target: str | None,
    yes: bool,
    as_json: bool,
) -> None:
    """Replace the target with backup NAME (default: newest).

    The current target is backed up first.
    """
    from dotctl.core.services.backup_ops import restore_backup

    settings = get_settings(ctx)
    chosen = _pick_backup(ctx, name)
    dst = resolve_dir(target, settings.dotfiles_dir)

    if not yes and not as_json:
        click.confirm(f"Replace {dst} with {chosen.path.name}?", abort=True)

    snapshot = restore_backup(chosen, dst, settings.backup_dir)

    if as_json:
        click.echo(json.dumps({
            "restored": str(chosen.path),
            "target": str(dst),
            "snapshot": str(snapshot) if snapshot else None,
        }, indent=2))
        return
    click.secho(f"✅ Restored {dst} from {chosen.path.name}", fg="green", bold=True)
    if snapshot:
        click.echo(f"   Previous contents saved to {snapshot}")


@backup.command()
@click.argument("name", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, name: str | None, as_json: bool) -> None:
    """Check that backup NAME (default: newest) is usable."""
    from dotctl.core.services.backup_ops import verify_backup

    chosen = _pick_backup(ctx, name)
    ok = verify_backup(chosen.path)

    if as_json:
        click.echo(json.dumps({"backup": str(chosen.path), "valid": ok}, indent=2))
    elif ok:
        click.secho(f"✅ {chosen.path.name} is valid", fg="green")
    else:
        click.secho(f"❌ {chosen.path.name} is empty or unreadable", fg="red")

    if not ok:
        sys.exit(1)


@backup.command()
@click.option("--keep", "-k", type=int, default=None, help="Backups to keep (default: backup_keep).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def clean(ctx: click.Context, keep: int | None, as_json: bool) -> None:
    """Delete all but the newest backups."""
    from dotctl.core.services.backup_ops import cleanup_old_backups

    settings = get_settings(ctx)
    keep = settings.backup_keep if keep is None else keep
    if keep < 0:
        raise click.BadParameter("must be >= 0", param_hint="--keep")

    deleted = cleanup_old_backups(keep, settings.backup_dir)

    if as_json:
        click.echo(json.dumps({"kept": keep, "deleted": [str(p) for p in deleted]}, indent=2))
        return
    if not deleted:
        click.secho(f"Nothing to clean (keeping {keep})", fg="yellow")
        return
    click.secho(f"🧹 Deleted {len(deleted)} old backup(s):", fg="cyan", bold=True)
    for p in deleted:
        click.echo(f"   {p.name}")
