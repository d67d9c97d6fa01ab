"""
Pack introspection — read-only summaries for pack selection UIs.

These helpers read the merged document directly and apply no tag
filtering: a pack's details view shows everything the pack holds.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from src.core.models.manifest import (
    CORE_ORIGIN,
    Channel,
    EntryDescriptor,
    PackInfo,
)
from src.core.services.manifest.selection import parse_pack_selection

VSCODE_LABEL = " (VS Code)"


def list_available_packs(document: dict[str, Any]) -> list[PackInfo]:
    """One (name, description) row per pack, in document order."""
    packs = document.get("packs") or {}
    rows: list[PackInfo] = []
    for name, pack in packs.items():
        description = (pack or {}).get("description") or ""
        rows.append(PackInfo(str(name), str(description)))
    return rows


def pack_contents(
    document: dict[str, Any],
    pack: str,
    system_family: str,
    show_vscode: bool = True,
) -> list[str]:
    """Display lines describing what a pack installs.

    mise tools and custom installers are listed one per line, VS Code
    extensions are labelled (and hidden when ``show_vscode`` is false),
    and system packages are folded into a trailing "+ N system packages"
    line counting ``common`` plus the active family.
    """
    packs = document.get("packs") or {}
    if pack not in packs:
        return []
    body = packs[pack] or {}

    lines: list[str] = []

    for key, raw in (body.get(Channel.MISE.value) or {}).items():
        lines.append(EntryDescriptor.from_raw(raw).backend or str(key))

    lines.extend(str(key) for key in (body.get(Channel.CUSTOM.value) or {}))

    if show_vscode:
        lines.extend(f"{key}{VSCODE_LABEL}" for key in (body.get(Channel.VSCODE.value) or {}))

    count = len(body.get(Channel.COMMON.value) or {})
    if system_family != Channel.COMMON.value:
        count += len(body.get(system_family) or {})
    if count > 0:
        lines.append(f"+ {count} system packages")

    return lines


def _lookup_version(channels: dict[str, Any], key: str) -> str:
    for channel in (Channel.CUSTOM.value, Channel.MISE.value):
        entries = channels.get(channel) or {}
        if key in entries:
            version = EntryDescriptor.from_raw(entries[key]).version
            if version:
                return version
    return ""


def tool_version(
    document: dict[str, Any],
    key: str,
    selected_packs: Iterable[str] = (),
) -> str:
    """Effective version of a custom or mise tool by entry key.

    Looks in core first, then the selected packs in order; the first
    non-empty version wins. Unknown tools give "".
    """
    version = _lookup_version(document.get(CORE_ORIGIN) or {}, key)
    if version:
        return version

    packs = document.get("packs") or {}
    for name in parse_pack_selection(selected_packs):
        version = _lookup_version(packs.get(name) or {}, key)
        if version:
            return version
    return ""
