"""
CLI commands for resolved package lists.

Prints one channel's work list for an installer script to consume.
Plain output is one pipe-delimited record per line; ``--json`` gives
the same records as objects.
"""

from __future__ import annotations

import json

import click

from src.ui.cli._context import get_resolver

CHANNELS = ("system", "apt", "dnf", "snap", "flatpak", "app-store", "mise", "custom", "vscode")


@click.command()
@click.argument("channel", type=click.Choice(CHANNELS))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def packages(ctx: click.Context, channel: str, as_json: bool) -> None:
    """List resolved packages for one installer CHANNEL."""
    resolver = get_resolver(ctx)

    if channel == "system":
        records = resolver.system_packages()
    elif channel == "app-store":
        records = resolver.app_store_packages()
    else:
        records = resolver.extract(channel)

    if as_json:
        click.echo(json.dumps([_as_json(r) for r in records], indent=2))
        return

    for record in records:
        click.echo(record if isinstance(record, str) else "|".join(record))


def _as_json(record: object) -> object:
    if isinstance(record, str):
        return record
    return record._asdict()  # type: ignore[attr-defined]
