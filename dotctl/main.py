"""
dotctl — CLI entrypoint.

Usage:
    dotctl --help
    dotctl init git@github.com:me/dotfiles.git
    dotctl setup --dry-run
    dotctl doctor
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from dotctl import __version__
from dotctl.core.errors import DotfilesError
from dotctl.core.observability.logging_config import LogEnvironment, resolve_level, setup_logging
from dotctl.ui.cli.context import echo_report, get_settings, resolve_dir

logger = logging.getLogger(__name__)


class DotctlGroup(click.Group):
    """Root group: environmental failures become ``❌ message`` and exit 1."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (DotfilesError, OSError) as e:
            logger.debug("Command failed", exc_info=True)
            click.secho(f"❌ {e}", fg="red", err=True)
            ctx.exit(1)


@click.group(cls=DotctlGroup)
@click.version_option(version=__version__, prog_name="dotctl")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: $DOTCTL_CONFIG or ~/.config/dotctl/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """dotctl — bootstrap and manage your dotfiles."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path).expanduser() if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    env = LogEnvironment.from_env()
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet, env_level=env.level)
    setup_logging(level=level, log_file=env.file, log_file_level=env.file_level)


# ── Bootstrap ───────────────────────────────────────────────────


@cli.command()
@click.argument("repo_url", required=False)
@click.option("--dir", "-d", "directory", default=None, help="Clone into (default: dotfiles_dir).")
@click.option("--no-save", is_flag=True, help="Don't write the repo URL to config.yml.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def init(
    ctx: click.Context,
    repo_url: str | None,
    directory: str | None,
    no_save: bool,
    as_json: bool,
) -> None:
    """Clone the dotfiles repository.

    REPO_URL defaults to repo_url from config.yml. Nothing is cloned if
    the target directory already exists.
    """
    from dotctl.core.config.loader import save_settings
    from dotctl.core.services.install.repos import clone_repo

    settings = get_settings(ctx)
    url = repo_url or settings.repo_url
    if not url:
        click.secho("❌ No repository URL given and repo_url is not configured", fg="red")
        sys.exit(1)

    target = resolve_dir(directory, settings.dotfiles_dir)
    cloned = clone_repo(url, target, name="dotfiles")

    saved = None
    if not no_save:
        updated = settings.model_copy(update={"repo_url": url, "dotfiles_dir": target})
        saved = save_settings(updated, ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps({
            "cloned": cloned,
            "path": str(target),
            "config": str(saved) if saved else None,
        }, indent=2))
        return

    if cloned:
        click.secho(f"✅ Cloned {url} into {target}", fg="green", bold=True)
    else:
        click.secho(f"✓ {target} already exists, nothing cloned", fg="yellow")
    if saved:
        click.echo(f"   Config saved to {saved}")
    click.echo("   Next: dotctl setup --dry-run")


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show what would happen without changing anything.")
@click.option("--force", "-f", is_flag=True, help="Replace links that point elsewhere.")
@click.option("--category", "categories", multiple=True, default=("essential",), show_default=True,
              help="Package category to install (repeatable).")
@click.option("--language", "-l", "languages", multiple=True,
              help="Language runtime to install (repeatable).")
@click.option("--skip-packages", is_flag=True, help="Don't install Homebrew or packages.")
@click.option("--skip-links", is_flag=True, help="Don't create symlinks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def setup(
    ctx: click.Context,
    dry_run: bool,
    force: bool,
    categories: tuple[str, ...],
    languages: tuple[str, ...],
    skip_packages: bool,
    skip_links: bool,
    as_json: bool,
) -> None:
    """Bootstrap this machine: packages, runtimes, links, shell."""
    from dotctl.core.services.setup_ops import FAILED, PLANNED, SKIPPED, SetupOptions, run_setup

    settings = get_settings(ctx)
    options = SetupOptions(
        dry_run=dry_run,
        force=force,
        categories=categories,
        languages=languages,
        install_packages=not skip_packages,
        link=not skip_links,
    )
    result = run_setup(settings, options)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if dry_run:
        click.secho("🔍 DRY-RUN MODE (no changes made)", fg="yellow", bold=True)
    icons = {FAILED: ("❌", "red"), PLANNED: ("🔍", "yellow"), SKIPPED: ("⏭️ ", None)}
    for step in result.steps:
        icon, color = icons.get(step.status, ("✅", "green"))
        click.secho(f"   {icon} {step.name}: {step.message}", fg=color)

    if result.link_report and result.link_report.conflicts:
        click.echo()
        echo_report(result.link_report, dry_run=dry_run, verbose=ctx.obj.get("verbose", False))

    click.echo()
    if result.ok:
        click.secho("✅ Setup complete", fg="green", bold=True)
    else:
        click.secho(f"❌ Setup finished with {len(result.failed)} failed step(s)", fg="red", bold=True)
        sys.exit(1)


# ── Health ──────────────────────────────────────────────────────


@cli.command()
@click.option("--no-packages", is_flag=True, help="Skip Homebrew package catalog checks.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def doctor(ctx: click.Context, no_packages: bool, as_json: bool) -> None:
    """Run health checks on this machine's dotfiles setup."""
    from dotctl.core.services.doctor import run_doctor

    settings = get_settings(ctx)
    report = run_doctor(settings, check_packages=not no_packages)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        if report.has_errors:
            sys.exit(1)
        return

    click.secho("🏥 Dotfiles Health Check", bold=True)
    for category, checks in report.grouped().items():
        click.echo()
        click.secho(category, bold=True, underline=True)
        for check in checks:
            if check.is_pass:
                click.echo(f"  {click.style('✓', fg='green')} {check.name} - {check.message}")
                continue
            mark = click.style("⚠", fg="yellow") if check.is_warn else click.style("✗", fg="red")
            click.echo(f"  {mark} {check.name} - {check.message}")
            if check.suggestion:
                click.echo(f"    Fix: {click.style(check.suggestion, dim=True)}")

    click.echo()
    color = "red" if report.has_errors else ("yellow" if report.warn_count else "green")
    click.secho(report.summary(), fg=color, bold=True)
    click.echo(f"Total: {report.total} checks")

    if report.has_errors:
        sys.exit(1)


# ── Migration ───────────────────────────────────────────────────


@cli.command()
@click.argument("source")
@click.argument("target", required=False)
@click.option("--no-backup", is_flag=True, help="Don't back up SOURCE first.")
@click.option("--no-secrets", is_flag=True, help="Don't extract secrets.")
@click.option("--dry-run", is_flag=True, help="Show what would happen without changing anything.")
@click.option("--force", "-f", is_flag=True, help="Link even when conflicts were found.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def migrate(
    ctx: click.Context,
    source: str,
    target: str | None,
    no_backup: bool,
    no_secrets: bool,
    dry_run: bool,
    force: bool,
    as_json: bool,
) -> None:
    """Put SOURCE under link management in TARGET (default: home).

    Backs up SOURCE, extracts secrets to TARGET/.env, then links every
    entry of SOURCE into TARGET. Conflicts abort the linking step unless
    --force is given.
    """
    from dotctl.core.services.migrate_ops import MigrationOptions
    from dotctl.core.services.migrate_ops import migrate as run_migration

    settings = get_settings(ctx)
    options = MigrationOptions(
        source=Path(source).expanduser(),
        target=resolve_dir(target, settings.home_dir),
        extract_secrets=not no_secrets,
        create_backup=not no_backup,
        dry_run=dry_run,
        force=force,
        secrets_file=settings.secrets_file,
    )
    result = run_migration(options, settings.backup_dir)

    if as_json:
        click.echo(json.dumps({"dry_run": dry_run, **result.to_dict()}, indent=2))
        if not result.ok:
            sys.exit(1)
        return

    if result.backup_path:
        click.secho(f"📦 Backup: {result.backup_path}", fg="cyan")
    if result.secrets_skipped:
        click.secho(
            f"⚠️  {result.secrets_found} secret(s) found, but "
            f"{options.target / options.secrets_file} is a symlink; not extracted",
            fg="yellow",
        )
    elif result.secrets_found:
        verb = "Would extract" if dry_run else "Extracted"
        click.secho(
            f"🔑 {verb} {result.secrets_found} secret(s) to {result.secrets_path}", fg="cyan",
        )
    if result.conflicts:
        click.secho(f"⚠️  {len(result.conflicts)} conflict(s):", fg="yellow", bold=True)
        for c in result.conflicts:
            click.echo(f"   • {c.target}: {c.describe()}")

    if result.aborted:
        click.echo()
        click.secho("❌ Migration aborted due to conflicts", fg="red", bold=True)
        click.echo("   Resolve them manually or re-run with --force")
        sys.exit(1)

    if result.symlink_report is not None:
        click.echo()
        echo_report(result.symlink_report, dry_run=dry_run, verbose=ctx.obj.get("verbose", False))
    if not result.ok:
        sys.exit(1)


@cli.command()
@click.argument("target", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def rollback(ctx: click.Context, target: str | None, yes: bool, as_json: bool) -> None:
    """Restore TARGET (default: dotfiles dir) from the newest backup."""
    from dotctl.core.services.migrate_ops import rollback as run_rollback

    settings = get_settings(ctx)
    dst = resolve_dir(target, settings.dotfiles_dir)

    if not yes and not as_json:
        click.confirm(f"Replace {dst} with the newest backup?", abort=True)

    backup = run_rollback(dst, settings.backup_dir)

    if as_json:
        click.echo(json.dumps({"target": str(dst), "restored": str(backup.path)}, indent=2))
        return
    click.secho(f"✅ Rolled back {dst} to {backup.path.name}", fg="green", bold=True)


@cli.command()
@click.argument("source", required=False)
@click.argument("target", required=False)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, source: str | None, target: str | None, as_json: bool) -> None:
    """Verify SOURCE (default: dotfiles dir) is fully linked into TARGET."""
    from dotctl.core.services.migrate_ops import verify_migration

    settings = get_settings(ctx)
    issues = verify_migration(
        resolve_dir(source, settings.dotfiles_dir),
        resolve_dir(target, settings.home_dir),
        exclude=(settings.secrets_file,),
    )

    if as_json:
        click.echo(json.dumps({
            "valid": not issues,
            "issues": [i.to_dict() for i in issues],
        }, indent=2))
    elif not issues:
        click.secho("✅ All symlinks are valid", fg="green", bold=True)
    else:
        click.secho(f"⚠️  Found {len(issues)} issue(s):", fg="yellow", bold=True)
        for issue in issues:
            click.echo(f"   • {issue.target}: {issue.issue}")

    if issues:
        sys.exit(1)


# ── Register command groups ─────────────────────────────────────

from dotctl.ui.cli.backup import backup  # noqa: E402
from dotctl.ui.cli.link import link  # noqa: E402
from dotctl.ui.cli.packages import packages  # noqa: E402
from dotctl.ui.cli.secrets import secrets  # noqa: E402

cli.add_command(link)
cli.add_command(secrets)
cli.add_command(backup)
cli.add_command(packages)


if __name__ == "__main__":
    cli()
