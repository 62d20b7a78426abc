"""
CLI commands for network lookups.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def net() -> None:
    """Network — public IP lookup."""


@net.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def ip(ctx: click.Context, as_json: bool) -> None:
    """Show the public IP address (primary endpoint, then fallback)."""
    from shellstrap.core.config.loader import ConfigError, load_config
    from shellstrap.core.services.network import fetch_public_ip

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    result = fetch_public_ip(config.network.ip_endpoints, timeout=config.network.timeout)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        sys.exit(0 if result["ok"] else 1)

    if result["ok"]:
        click.echo(result["ip"])
        return

    click.secho("❌ Public IP lookup failed", fg="red")
    for url, err in result["errors"].items():
        click.echo(f"   • {url}: {err}")
    sys.exit(1)
