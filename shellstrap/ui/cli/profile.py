"""
CLI commands for profile synchronization.

Thin wrappers over ``shellstrap.core.services.profile_sync``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click


def _load_config(ctx: click.Context):
    from shellstrap.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group()
def profile() -> None:
    """Profile — copy the active profile to every shell runtime."""


@profile.command()
@click.option(
    "--source",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Profile to copy from (default: from config).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sync(ctx: click.Context, source: str | None, as_json: bool) -> None:
    """Copy the profile into sibling profile paths that differ."""
    from shellstrap.core.config.paths import expand
    from shellstrap.core.services.profile_sync import ProfileSourceMissing, sync_profile

    cfg = _load_config(ctx).profile
    if not cfg.enabled:
        if as_json:
            click.echo(json.dumps({"skipped": "disabled", "targets": []}, indent=2))
        else:
            click.echo("Profile sync is disabled in the configuration.")
        return

    src = Path(source) if source else expand(cfg.source)
    targets = [expand(t) for t in cfg.targets]

    try:
        results = sync_profile(src, targets)
    except ProfileSourceMissing as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(
            {"source": str(src), "targets": [r.to_dict() for r in results]}, indent=2,
        ))
        return

    click.secho(f"📄 {src}", fg="cyan", bold=True)
    for r in results:
        if r.status == "written":
            click.secho(f"   ~ {r.target}", fg="cyan")
        elif r.status == "unchanged":
            click.echo(f"   = {r.target}")
        else:
            click.secho(f"   ✗ {r.target}: {r.error}", fg="red")

    if any(r.status == "failed" for r in results):
        sys.exit(1)
