"""
shellstrap — CLI entrypoint.

Usage:
    shellstrap --help
    shellstrap run
    shellstrap status
    shellstrap config check

Meant to be called from the shell profile on every interactive start::

    shellstrap run --profile $PROFILE --quiet
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from shellstrap import __version__
from shellstrap.core.observability.logging_config import LOG_PREFIX, setup_logging

_OUTCOME_STYLE = {
    "satisfied": ("✓", "green"),
    "installed": ("+", "green"),
    "unverified": ("?", "yellow"),
    "changed": ("~", "cyan"),
    "unchanged": ("=", "white"),
    "skipped": ("⊘", "yellow"),
    "failed": ("✗", "red"),
}


@click.group()
@click.version_option(version=__version__, prog_name="shellstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only print problems.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to shellstrap.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """shellstrap — keep a Windows shell profile and its tools in shape."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("SHELLSTRAP_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("SHELLSTRAP_LOG_FILE"),
        log_file_level=os.environ.get("SHELLSTRAP_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


def log_line(message: str, fg: str | None = None) -> None:
    """One colored diagnostic line with the fixed prefix."""
    click.secho(f"{LOG_PREFIX}{message}", fg=fg)


@cli.command()
@click.option(
    "--profile",
    "profile",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="The active profile script to sync from (default: from config).",
)
@click.option("--dry-run", is_flag=True, help="Report what would change, change nothing.")
@click.option("--mock", is_flag=True, help="Pretend every install command succeeds.")
@click.option("--no-progress", is_flag=True, help="Don't draw the progress bar.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(
    ctx: click.Context,
    profile: str | None,
    dry_run: bool,
    mock: bool,
    no_progress: bool,
    as_json: bool,
) -> None:
    """Install missing tools, sync the profile, patch settings.

    Always exits 0 so shell startup is never blocked.
    """
    from shellstrap.core.use_cases.bootstrap import run_bootstrap

    quiet = ctx.obj.get("quiet", False)
    result = run_bootstrap(
        config_path=ctx.obj.get("config_path"),
        profile_source=Path(profile) if profile else None,
        dry_run=dry_run,
        mock_mode=mock,
        show_progress=not (no_progress or as_json or quiet) and sys.stderr.isatty(),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    report = result.report
    assert report is not None

    for warning in result.warnings:
        log_line(warning, fg="yellow")

    for step in report.steps:
        if quiet and step.ok:
            continue
        icon, color = _OUTCOME_STYLE.get(step.outcome, ("•", "white"))
        detail = f" — {step.detail}" if step.detail else ""
        log_line(f"{icon} {step.step}: {step.outcome}{detail}", fg=color)

    if not quiet:
        installed = result.progress.installed_count if result.progress else 0
        status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(
            report.status, "white"
        )
        mode = "[dry-run] " if dry_run else "[mock] " if mock else ""
        log_line(
            f"{mode}{report.total} steps, {installed} installed, "
            f"{report.failed} failed ({report.status})",
            fg=status_color,
        )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show which tools are present, without installing anything."""
    from shellstrap.core.use_cases.status import get_status

    result = get_status(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    click.secho("\n🧰 Tools", fg="cyan", bold=True)
    for probe in result.tools:
        if probe.found:
            click.secho(f"   ✓ {probe.tool:<16}", fg="green", nl=False)
            click.echo(f" {probe.path}")
        else:
            click.secho(f"   ✗ {probe.tool:<16}", fg="red", nl=False)
            click.echo(" (missing)")

    click.echo()
    pm_icon = "✓" if result.package_manager_available else "✗"
    click.echo(f"   Package manager: {result.package_manager} {pm_icon}")
    click.echo(f"   Shell migration: {'done' if result.migration_done else 'pending'}")
    for name, info in result.settings_files.items():
        marker = "" if info["exists"] else " (missing)"
        click.echo(f"   {name.capitalize()} settings: {info['path']}{marker}")
    click.echo()


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate shellstrap.yml."""
    from shellstrap.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        source = str(result.config_path) if result.config_path else "built-in defaults"
        click.echo(f"   Source: {source}")
        assert result.config is not None
        click.echo(f"   Package manager: {result.config.package_manager.name}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        sys.exit(1)


# ── Register sub-command groups from shellstrap/ui/cli/ ─────────

from shellstrap.ui.cli.net import net  # noqa: E402
from shellstrap.ui.cli.profile import profile  # noqa: E402
from shellstrap.ui.cli.settings import settings  # noqa: E402

cli.add_command(profile)
cli.add_command(settings)
cli.add_command(net)


if __name__ == "__main__":
    cli()
