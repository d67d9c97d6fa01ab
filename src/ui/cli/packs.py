"""
CLI commands for pack introspection.

Thin wrappers over ``src.core.services.manifest.introspection`` via the
run's Resolver. Output feeds pack-selection prompts.
"""

from __future__ import annotations

import json

import click

from src.ui.cli._context import get_resolver


@click.group()
def packs() -> None:
    """Packs — list available packs and show their contents."""


@packs.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_packs(ctx: click.Context, as_json: bool) -> None:
    """List packs defined in the manifest."""
    resolver = get_resolver(ctx)
    rows = resolver.available_packs()

    if as_json:
        click.echo(json.dumps([row._asdict() for row in rows], indent=2))
        return

    if not rows:
        click.secho("⚠️  No packs defined", fg="yellow")
        return

    selected = set(resolver.selected_packs)
    for row in rows:
        mark = "[x]" if row.name in selected else "[ ]"
        click.echo(f"  {mark} {row.name:<15} - {row.description}")


@packs.command()
@click.argument("name")
@click.option("--no-vscode", is_flag=True, help="Hide VS Code extensions.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, name: str, no_vscode: bool, as_json: bool) -> None:
    """Show what a pack installs."""
    resolver = get_resolver(ctx)
    lines = resolver.pack_contents(name, show_vscode=not no_vscode)

    if as_json:
        click.echo(json.dumps({"pack": name, "contents": lines}, indent=2))
        return

    if not lines:
        click.secho(f"⚠️  Pack '{name}' is empty or not defined", fg="yellow")
        return

    description = next(
        (p.description for p in resolver.available_packs() if p.name == name), ""
    )
    click.secho(f"\n  {name}", bold=True, nl=False)
    click.echo(f": {description}" if description else "")
    click.echo("  Includes:")
    for line in lines:
        click.echo(f"    - {line}")
    click.echo()
