"""
CLI commands for symlink reconciliation.

Thin wrappers over ``dotctl.core.services.symlink_ops`` and the
symlinker adapters. Without ``--source`` the commands act on the
configured dotfiles directory and home directory, including the
individual-file directories.
"""

from __future__ import annotations

import json
import sys

import click

from dotctl.core.models.config import SymlinkMethod
from dotctl.ui.cli.context import echo_report, get_settings, resolve_dir

_METHODS = click.Choice([m.value for m in SymlinkMethod])


def _source_target_options(func):
    func = click.option("--target", "-t", default=None, help="Target directory (default: home).")(func)
    func = click.option(
        "--source", "-s", default=None, help="Source directory (default: dotfiles dir).",
    )(func)
    return func


@click.group()
def link() -> None:
    """Links — plan, apply, remove, and validate dotfile symlinks."""


@link.command()
@_source_target_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def plan(ctx: click.Context, source: str | None, target: str | None, as_json: bool) -> None:
    """Show conflicts that would block linking (read-only)."""
    from dotctl.adapters.symlink.common import detect_conflicts

    settings = get_settings(ctx)
    src = resolve_dir(source, settings.dotfiles_dir)
    dst = resolve_dir(target, settings.home_dir)

    conflicts = detect_conflicts(src, dst, exclude=settings.exclusions)

    if as_json:
        click.echo(json.dumps({
            "source": str(src),
            "target": str(dst),
            "conflicts": [c.to_dict() for c in conflicts],
        }, indent=2))
        sys.exit(1 if conflicts else 0)

    if not conflicts:
        click.secho(f"✅ No conflicts linking {src} → {dst}", fg="green", bold=True)
        return

    click.secho(f"⚠️  {len(conflicts)} conflict(s) linking {src} → {dst}:", fg="yellow", bold=True)
    for c in conflicts:
        click.echo(f"   • {c.target}: {c.describe()}")
    click.echo()
    sys.exit(1)


@link.command()
@_source_target_options
@click.option("--method", "-m", type=_METHODS, default=None, help="Symlink strategy.")
@click.option("--dry-run", is_flag=True, help="Report what would change without changing it.")
@click.option("--force", "-f", is_flag=True, help="Replace links that point elsewhere.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(
    ctx: click.Context,
    source: str | None,
    target: str | None,
    method: str | None,
    dry_run: bool,
    force: bool,
    as_json: bool,
) -> None:
    """Create symlinks for every entry of the source directory.

    Plain files and directories in the way are reported as conflicts
    and never overwritten, even with --force.
    """
    from dotctl.core.services.symlink_ops import link_dotfiles, select_symlinker

    settings = get_settings(ctx)
    if source is None and target is None:
        report = link_dotfiles(settings, dry_run=dry_run, force=force, method=method)
    else:
        symlinker = select_symlinker(
            method or settings.symlink_method,
            dry_run=dry_run, force=force, exclude=settings.exclusions,
        )
        report = symlinker.apply(
            resolve_dir(source, settings.dotfiles_dir),
            resolve_dir(target, settings.home_dir),
        )

    if as_json:
        click.echo(json.dumps({"dry_run": dry_run, **report.to_dict()}, indent=2))
    else:
        echo_report(report, dry_run=dry_run, verbose=ctx.obj.get("verbose", False))

    if not report.is_success:
        sys.exit(1)


@link.command()
@_source_target_options
@click.option("--method", "-m", type=_METHODS, default=None, help="Symlink strategy.")
@click.option("--dry-run", is_flag=True, help="Report what would change without changing it.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remove(
    ctx: click.Context,
    source: str | None,
    target: str | None,
    method: str | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Remove symlinks for every entry of the source directory.

    Only symlinks are removed; anything else is reported as a conflict.
    """
    from dotctl.core.services.symlink_ops import select_symlinker, unlink_dotfiles

    settings = get_settings(ctx)
    if source is None and target is None and method is None:
        report = unlink_dotfiles(settings, dry_run=dry_run)
    else:
        symlinker = select_symlinker(
            method or settings.symlink_method, dry_run=dry_run, exclude=settings.exclusions,
        )
        report = symlinker.remove(
            resolve_dir(source, settings.dotfiles_dir),
            resolve_dir(target, settings.home_dir),
        )

    if as_json:
        click.echo(json.dumps({"dry_run": dry_run, **report.to_dict()}, indent=2))
    else:
        echo_report(report, dry_run=dry_run, verbose=ctx.obj.get("verbose", False))

    if not report.is_success:
        sys.exit(1)


@link.command()
@_source_target_options
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def validate(ctx: click.Context, source: str | None, target: str | None, as_json: bool) -> None:
    """Check that every source entry is correctly linked in the target."""
    from dotctl.adapters.symlink.common import validate_links

    settings = get_settings(ctx)
    src = resolve_dir(source, settings.dotfiles_dir)
    dst = resolve_dir(target, settings.home_dir)

    issues = validate_links(src, dst, exclude=settings.exclusions)

    if as_json:
        click.echo(json.dumps({
            "valid": not issues,
            "issues": [i.to_dict() for i in issues],
        }, indent=2))
        sys.exit(1 if issues else 0)

    if not issues:
        click.secho("✅ All symlinks are valid", fg="green", bold=True)
        return

    click.secho(f"❌ {len(issues)} issue(s):", fg="red", bold=True)
    for issue in issues:
        click.echo(f"   • {issue.target}: {issue.issue}")
    click.echo()
    sys.exit(1)
