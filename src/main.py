"""
devbase — CLI entrypoint.

Usage:
    python -m src.main --help
    python -m src.main packs list
    python -m src.main packages system
    python -m src.main mise-config ~/.config/mise/config.toml
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from src.core.observability.logging_config import setup_logging

from src import __version__


@click.group()
@click.version_option(version=__version__, prog_name="devbase")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--manifest",
    "-m",
    "manifest_path",
    type=click.Path(dir_okay=False),
    envvar="DEVBASE_PACKAGES_YAML",
    default="packages.yaml",
    show_default=True,
    help="Path to packages.yaml.",
)
@click.option(
    "--overlay",
    "overlay_path",
    type=click.Path(dir_okay=False),
    envvar="DEVBASE_PACKAGES_CUSTOM_YAML",
    default=None,
    help="Path to an organisation overlay (packages-custom.yaml).",
)
@click.option(
    "--packs",
    "selected_packs",
    envvar="DEVBASE_SELECTED_PACKS",
    default=None,
    help='Selected packs, e.g. "java node" (default: all packs).',
)
@click.option("--wsl/--no-wsl", default=None, help="Override WSL detection.")
@click.option(
    "--pkg-manager",
    type=click.Choice(["apt", "dnf"]),
    default=None,
    help="Override system package family detection.",
)
@click.option(
    "--app-store",
    type=click.Choice(["snap", "flatpak", "none"]),
    default=None,
    help="Override app store detection.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    manifest_path: str,
    overlay_path: str | None,
    selected_packs: str | None,
    wsl: bool | None,
    pkg_manager: str | None,
    app_store: str | None,
) -> None:
    """devbase — resolve packages.yaml into installer work lists."""
    ctx.ensure_object(dict)
    ctx.obj["manifest"] = Path(manifest_path)
    ctx.obj["overlay"] = Path(overlay_path) if overlay_path else None
    ctx.obj["packs"] = selected_packs
    ctx.obj["wsl"] = wsl
    ctx.obj["pkg_manager"] = pkg_manager
    ctx.obj["app_store"] = app_store
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("DEVBASE_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("DEVBASE_LOG_FILE"),
        log_file_level=os.environ.get("DEVBASE_LOG_FILE_LEVEL"),
    )


@cli.group()
def manifest() -> None:
    """Package manifest commands."""


@manifest.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def manifest_check(ctx: click.Context, as_json: bool) -> None:
    """Validate packages.yaml (and overlay)."""
    from src.core.use_cases.manifest_check import check_manifest

    result = check_manifest(
        ctx.obj["manifest"],
        overlay_path=ctx.obj.get("overlay"),
        selected_packs=ctx.obj.get("packs") or (),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid:
        click.secho("✅ Manifest is valid", fg="green", bold=True)
        click.echo(f"   Manifest: {result.manifest_path}")
        if result.overlay_path:
            click.echo(f"   Overlay: {result.overlay_path}")
        click.echo(f"   Packs: {result.pack_count}")
        click.echo(f"   Entries: {result.entry_count}")
    else:
        click.secho("❌ Manifest errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings and not ctx.obj.get("quiet"):
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)


@cli.command("tool-version")
@click.argument("key")
@click.pass_context
def tool_version(ctx: click.Context, key: str) -> None:
    """Print the pinned version of a custom or mise tool (empty if unknown)."""
    from src.ui.cli._context import get_resolver

    version = get_resolver(ctx).tool_version(key)
    if version:
        click.echo(version)


@cli.command("mise-config")
@click.argument("output", type=click.Path(dir_okay=False))
@click.option(
    "--template",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="config.toml whose [settings]/[env] sections are reused.",
)
@click.pass_context
def mise_config(ctx: click.Context, output: str, template: str | None) -> None:
    """Generate mise config.toml at OUTPUT (always overwrites)."""
    from src.ui.cli._context import fail, get_resolver

    resolver = get_resolver(ctx)
    try:
        generated = resolver.generate_mise_config(
            Path(output), Path(template) if template else None
        )
    except UnicodeDecodeError as e:
        fail(f"Cannot read mise config template {template}: {e}")
    except OSError as e:
        fail(f"Cannot generate mise config {output}: {e}")

    if not ctx.obj.get("quiet"):
        click.secho(f"✅ {generated.reason}", fg="green")
        click.echo(f"   → {generated.path}")


# ── Register sub-command groups from src/ui/cli/ ──────────────────

from src.ui.cli.packages import packages
from src.ui.cli.packs import packs

cli.add_command(packs)
cli.add_command(packages)


if __name__ == "__main__":
    cli()
