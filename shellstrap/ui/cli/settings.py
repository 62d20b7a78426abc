"""
CLI commands for terminal/editor settings.

Thin wrappers over ``shellstrap.core.services.settings_patch``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def settings() -> None:
    """Settings — default shell and font for terminal and editor."""


@settings.command()
@click.option(
    "--target",
    type=click.Choice(["terminal", "editor", "all"]),
    default="all",
    show_default=True,
    help="Which settings file to patch.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(ctx: click.Context, target: str, as_json: bool) -> None:
    """Merge required settings without touching existing customizations."""
    from shellstrap.core.config.loader import ConfigError, load_config
    from shellstrap.core.services.settings_patch import patch_settings
    from shellstrap.core.services.settings_targets import (
        editor_assignments,
        target_path,
        terminal_assignments,
    )

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    jobs = []
    if target in ("terminal", "all"):
        jobs.append(("terminal", config.terminal, terminal_assignments(config.terminal)))
    if target in ("editor", "all"):
        jobs.append(("editor", config.editor, editor_assignments(config.editor)))

    results = {}
    skipped = {}
    for name, cfg, assignments in jobs:
        path, reason = target_path(cfg)
        if path is None:
            skipped[name] = reason
            continue
        results[name] = patch_settings(path, assignments)

    if as_json:
        data = {k: r.to_dict() for k, r in results.items()}
        data.update({k: {"status": "skipped", "reason": v} for k, v in skipped.items()})
        click.echo(json.dumps(data, indent=2))
        sys.exit(1 if any(r.status == "failed" for r in results.values()) else 0)

    for name, reason in skipped.items():
        click.echo(f"   - {name}: skipped ({reason})")

    for name, r in results.items():
        if r.status == "changed":
            click.secho(f"   ~ {name}: {', '.join(r.changed)}", fg="cyan")
        elif r.status == "unchanged":
            click.echo(f"   = {name}: already configured")
        else:
            click.secho(f"   ✗ {name}: {r.error}", fg="red")
        for key in r.conflicts:
            click.secho(f"     ⚠️  {key} blocked by an existing non-object value", fg="yellow")

    if any(r.status == "failed" for r in results.values()):
        sys.exit(1)
