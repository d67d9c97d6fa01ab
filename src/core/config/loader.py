"""
Manifest loader — reads packages.yaml (+ optional overlay) into one document.

This is the primary entry point for loading package manifests.
It reads YAML, checks the document shape, and deep-merges an
organisation overlay (packages-custom.yaml) on top of the base.

The merged document stays a plain nested dict: descriptors are only
turned into models when entries are selected.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.core.models.manifest import PACK_METADATA_KEYS, EntryDescriptor

logger = logging.getLogger(__name__)

# Default manifest filenames
PACKAGES_FILE = "packages.yaml"
PACKAGES_CUSTOM_FILE = "packages-custom.yaml"


class ManifestLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric scalars as their source text.

    ``version: 3.10`` must stay ``"3.10"``, not the float ``3.1``.
    """


def _construct_number_text(loader: yaml.SafeLoader, node: yaml.ScalarNode) -> str:
    return loader.construct_scalar(node)


ManifestLoader.add_constructor("tag:yaml.org,2002:int", _construct_number_text)
ManifestLoader.add_constructor("tag:yaml.org,2002:float", _construct_number_text)


class ManifestError(Exception):
    """Base class for manifest loading failures."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class ManifestNotFound(ManifestError):
    """Raised when the base manifest does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Package manifest not found: {path}")


class ManifestParseError(ManifestError):
    """Raised when a manifest cannot be read or has the wrong shape."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(path, f"Invalid package manifest {path}: {reason}")
        self.reason = reason


def load_manifest(path: Path) -> dict[str, Any]:
    """Load and shape-check one manifest file.

    Args:
        path: Path to a packages YAML file.

    Returns:
        The parsed document (an empty file gives ``{}``).

    Raises:
        ManifestNotFound: If the file does not exist.
        ManifestParseError: If it cannot be read, is not valid YAML,
            or does not have the manifest shape.
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestNotFound(path)

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestParseError(path, f"cannot read file: {e}") from e

    try:
        data = yaml.load(raw, Loader=ManifestLoader)
    except yaml.YAMLError as e:
        raise ManifestParseError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}

    _check_shape(path, data)
    return data


def _check_shape(path: Path, data: Any) -> None:
    """Validate the core/packs nesting without building models."""
    if not isinstance(data, dict):
        raise ManifestParseError(path, f"expected a mapping, got {type(data).__name__}")

    core = data.get("core")
    if core is not None:
        if not isinstance(core, dict):
            raise ManifestParseError(path, "'core' must be a mapping of channels")
        _check_channels(path, "core", core)

    packs = data.get("packs")
    if packs is not None:
        if not isinstance(packs, dict):
            raise ManifestParseError(path, "'packs' must be a mapping of pack names")
        for pack_name, pack in packs.items():
            if pack is None:
                continue
            if not isinstance(pack, dict):
                raise ManifestParseError(path, f"pack '{pack_name}' must be a mapping")
            channels = {k: v for k, v in pack.items() if k not in PACK_METADATA_KEYS}
            _check_channels(path, f"packs.{pack_name}", channels)


def _check_channels(path: Path, where: str, channels: dict) -> None:
    for channel, entries in channels.items():
        if entries is None:
            continue
        if not isinstance(entries, dict):
            raise ManifestParseError(path, f"'{where}.{channel}' must be a mapping of entries")
        for key, raw in entries.items():
            try:
                EntryDescriptor.from_raw(raw)
            except ValidationError as e:
                raise ManifestParseError(
                    path, f"bad entry '{where}.{channel}.{key}': {e.errors()[0]['msg']}"
                ) from e


# ── Merge ───────────────────────────────────────────────────────


def _is_entry_path(path: tuple[str, ...]) -> bool:
    """True at the depth where a value is a whole entry descriptor."""
    if not path:
        return False
    if path[0] == "core":
        return len(path) == 3
    if path[0] == "packs":
        return len(path) == 4 and path[2] not in PACK_METADATA_KEYS
    return False


def merge_manifests(
    base: dict[str, Any],
    overlay: dict[str, Any],
    _path: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Deep-merge overlay onto base, returning a new document.

    Merge rules:
        both maps           recurse (base key order kept, new keys appended)
        entry descriptor    overlay replaces the base descriptor wholesale
        anything else       overlay value wins (lists are replaced, not joined)
    """
    merged: dict[str, Any] = copy.deepcopy(base)

    for key, value in overlay.items():
        key_path = (*_path, str(key))
        current = merged.get(key)
        if (
            isinstance(current, dict)
            and isinstance(value, dict)
            and not _is_entry_path(key_path)
        ):
            merged[key] = merge_manifests(current, value, key_path)
        else:
            merged[key] = copy.deepcopy(value)

    return merged


def resolve(base_path: Path, overlay_path: Path | None = None) -> dict[str, Any]:
    """Load the base manifest and merge the overlay if one exists.

    A missing overlay is normal and yields the base document unchanged.
    An overlay that exists but is broken is as fatal as a broken base.

    Raises:
        ManifestNotFound: If the base manifest is missing.
        ManifestParseError: If either file is invalid.
    """
    base = load_manifest(base_path)

    if overlay_path is None:
        return base

    overlay_path = Path(overlay_path)
    if not overlay_path.is_file():
        logger.debug("No overlay manifest at %s — using base only", overlay_path)
        return base

    overlay = load_manifest(overlay_path)
    merged = merge_manifests(base, overlay)
    logger.info("Merged overlay %s onto %s", overlay_path, base_path)
    return merged
