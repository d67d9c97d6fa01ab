"""
Resolver — one resolution run over a base manifest, overlay and packs.

The Resolver owns the merged document for the run: the merge happens
once, on first use, and every extractor call made through the same
Resolver sees that one snapshot. Separate Resolver instances never
share it, so independent runs (tests, two CLI invocations) are safe.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from src.core.config.loader import resolve
from src.core.models.environment import Environment
from src.core.models.manifest import (
    CustomTool,
    FlatpakPackage,
    MiseTool,
    PackInfo,
    ResolvedEntry,
    SnapPackage,
    VscodeExtension,
)
from src.core.models.template import GeneratedFile
from src.core.services.generators.mise_config import (
    ENV_PASSTHROUGHS,
    generate_mise_config,
)
from src.core.services.manifest import extractors, introspection
from src.core.services.manifest.selection import (
    filter_entries,
    parse_pack_selection,
    select_entries,
)

logger = logging.getLogger(__name__)


class Resolver:
    """Resolve packages for one run.

    Args:
        base_path: packages.yaml (required).
        overlay_path: packages-custom.yaml (optional, may not exist).
        selected_packs: Pack names in selection order.
        environment: Host facts; defaults to a non-WSL apt/snap host.
    """

    def __init__(
        self,
        base_path: Path,
        overlay_path: Path | None = None,
        selected_packs: str | Iterable[str] = (),
        environment: Environment | None = None,
    ) -> None:
        self.base_path = Path(base_path)
        self.overlay_path = Path(overlay_path) if overlay_path else None
        self.selected_packs = parse_pack_selection(selected_packs)
        self.environment = environment or Environment()
        self._document: dict[str, Any] | None = None
        self._entries: list[ResolvedEntry] | None = None

    # ── Document ────────────────────────────────────────────────

    @property
    def document(self) -> dict[str, Any]:
        """The merged manifest, loaded on first access.

        Raises:
            ManifestNotFound / ManifestParseError from the loader.
        """
        if self._document is None:
            self._document = resolve(self.base_path, self.overlay_path)
        return self._document

    def clear_cache(self) -> None:
        """Forget the merged document so the next access reloads it."""
        self._document = None
        self._entries = None

    def entries(self) -> list[ResolvedEntry]:
        """Core + selected pack entries, with host exclusions applied."""
        if self._entries is None:
            selected = select_entries(self.document, self.selected_packs)
            self._entries = filter_entries(selected, self.environment)
            logger.debug(
                "Resolved %d entries (%d before filtering) for packs %s",
                len(self._entries), len(selected), self.selected_packs,
            )
        return self._entries

    # ── Channels ────────────────────────────────────────────────

    def system_packages(self, family: str | None = None) -> list[str]:
        return extractors.system_packages(
            self.entries(), family or self.environment.pkg_manager
        )

    def snap_packages(self) -> list[SnapPackage]:
        return extractors.snap_packages(self.entries())

    def flatpak_packages(self) -> list[FlatpakPackage]:
        return extractors.flatpak_packages(self.entries())

    def app_store_packages(
        self, store: str | None = None
    ) -> list[SnapPackage] | list[FlatpakPackage]:
        return extractors.app_store_packages(
            self.entries(), store or self.environment.app_store
        )

    def mise_tools(self) -> list[MiseTool]:
        return extractors.mise_tools(self.entries())

    def custom_tools(self) -> list[CustomTool]:
        return extractors.custom_tools(self.entries())

    def vscode_extensions(self) -> list[VscodeExtension]:
        return extractors.vscode_extensions(self.entries())

    def extract(self, channel: str) -> list[Any]:
        return extractors.extract(self.entries(), channel)

    # ── Introspection ───────────────────────────────────────────

    def available_packs(self) -> list[PackInfo]:
        return introspection.list_available_packs(self.document)

    def pack_contents(self, pack: str, show_vscode: bool = True) -> list[str]:
        return introspection.pack_contents(
            self.document, pack, self.environment.pkg_manager, show_vscode
        )

    def tool_version(self, key: str) -> str:
        return introspection.tool_version(self.document, key, self.selected_packs)

    # ── Output ──────────────────────────────────────────────────

    def generate_mise_config(
        self,
        destination: Path,
        template: Path | None = None,
        env_passthroughs: Iterable[str] = ENV_PASSTHROUGHS,
    ) -> GeneratedFile:
        return generate_mise_config(
            self.mise_tools(), Path(destination), template, env_passthroughs
        )
