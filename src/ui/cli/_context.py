"""
Shared CLI plumbing — build the Resolver from global options.

The Resolver is created once per invocation and cached on the click
context, so every sub-command in one run sees the same merged manifest.
"""

from __future__ import annotations

import sys

import click

from src.core.config.loader import ManifestError
from src.core.services.detection.environment import detect_environment
from src.core.services.manifest.resolver import Resolver


def fail(message: str) -> None:
    """Print an error and exit non-zero."""
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


def get_resolver(ctx: click.Context) -> Resolver:
    """Return the run's Resolver, loading the manifest on first use.

    Exits with status 1 when the manifest is missing or invalid.
    """
    obj = ctx.find_root().obj
    resolver: Resolver | None = obj.get("resolver")
    if resolver is not None:
        return resolver

    environment = detect_environment(
        wsl=obj.get("wsl"),
        pkg_manager=obj.get("pkg_manager"),
        app_store=obj.get("app_store"),
    )
    resolver = Resolver(
        obj["manifest"],
        overlay_path=obj.get("overlay"),
        selected_packs=obj.get("packs") or (),
        environment=environment,
    )

    try:
        _ = resolver.document
    except ManifestError as e:
        fail(str(e))

    # No explicit selection: every pack, like a fresh interactive install
    if obj.get("packs") is None:
        resolver.selected_packs = [p.name for p in resolver.available_packs()]

    obj["resolver"] = resolver
    return resolver
