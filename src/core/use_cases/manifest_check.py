"""
Manifest check use case — validate packages.yaml and report issues.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.core.config.loader import ManifestError, resolve
from src.core.models.manifest import (
    KNOWN_CHANNELS,
    PACK_METADATA_KEYS,
    Channel,
    EntryDescriptor,
    Tag,
    parse_tag,
)
from src.core.services.manifest.selection import parse_pack_selection


@dataclass
class ManifestCheckResult:
    """Result of manifest validation."""

    valid: bool = False
    manifest_path: Path | None = None
    overlay_path: Path | None = None
    pack_count: int = 0
    entry_count: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "manifest_path": str(self.manifest_path) if self.manifest_path else None,
            "overlay_path": str(self.overlay_path) if self.overlay_path else None,
            "pack_count": self.pack_count,
            "entry_count": self.entry_count,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _check_origin(
    where: str, channels: dict[str, Any], result: ManifestCheckResult
) -> None:
    for channel, entries in channels.items():
        if channel in PACK_METADATA_KEYS:
            continue
        if channel not in KNOWN_CHANNELS:
            result.warnings.append(f"Unknown channel '{where}.{channel}' is ignored")
        for key, raw in (entries or {}).items():
            result.entry_count += 1
            descriptor = EntryDescriptor.from_raw(raw)
            for label in descriptor.tags:
                if parse_tag(label) is Tag.UNKNOWN:
                    result.warnings.append(
                        f"Unrecognised tag '{label}' on '{where}.{channel}.{key}'"
                    )
            if channel == Channel.MISE.value and not descriptor.version:
                result.warnings.append(
                    f"mise tool '{where}.{channel}.{key}' has no version "
                    "and will not be pinned"
                )


def check_manifest(
    manifest_path: Path,
    overlay_path: Path | None = None,
    selected_packs: str | Iterable[str] = (),
) -> ManifestCheckResult:
    """Validate a manifest (+ overlay) and report issues.

    Args:
        manifest_path: Base packages.yaml.
        overlay_path: Optional packages-custom.yaml.
        selected_packs: Selection to cross-check against the packs.

    Returns:
        ManifestCheckResult with validation status and any issues.
    """
    result = ManifestCheckResult(manifest_path=manifest_path, overlay_path=overlay_path)

    try:
        document = resolve(manifest_path, overlay_path)
    except ManifestError as e:
        result.errors.append(str(e))
        return result

    _check_origin("core", document.get("core") or {}, result)

    packs = document.get("packs") or {}
    result.pack_count = len(packs)
    for name, pack in packs.items():
        _check_origin(f"packs.{name}", pack or {}, result)

    for name in parse_pack_selection(selected_packs):
        if name not in packs:
            result.warnings.append(f"Selected pack '{name}' is not defined")

    if result.entry_count == 0:
        result.warnings.append("Manifest defines no entries. Nothing will be installed.")

    result.valid = len(result.errors) == 0
    return result
