"""
Channel extractors — project the filtered entry list onto one channel.

Every extractor is a pure function: filtered entries in, channel
tuples out, in entry order. Missing descriptor fields are defaulted
(an absent version means "latest" and is left to the installer).
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from src.core.models.manifest import (
    DEFAULT_FLATPAK_REMOTE,
    Channel,
    CustomTool,
    FlatpakPackage,
    MiseTool,
    ResolvedEntry,
    SnapPackage,
    VscodeExtension,
)


def _on(entries: Iterable[ResolvedEntry], channel: Channel) -> Iterable[ResolvedEntry]:
    return (e for e in entries if e.channel == channel.value)


def system_packages(entries: Sequence[ResolvedEntry], family: str) -> list[str]:
    """System package names for one family (``apt`` or ``dnf``).

    ``common`` entries belong to every family. Within each origin
    block, common packages come before family-specific ones; the other
    family's entries are never returned.
    """
    names: list[str] = []
    for _origin, group in itertools.groupby(entries, key=lambda e: e.origin):
        block = list(group)
        names.extend(e.key for e in block if e.channel == Channel.COMMON.value)
        if family != Channel.COMMON.value:
            names.extend(e.key for e in block if e.channel == family)
    return names


def snap_packages(entries: Sequence[ResolvedEntry]) -> list[SnapPackage]:
    return [
        SnapPackage(e.key, e.descriptor.options or "")
        for e in _on(entries, Channel.SNAP)
    ]


def flatpak_packages(entries: Sequence[ResolvedEntry]) -> list[FlatpakPackage]:
    return [
        FlatpakPackage(e.key, e.descriptor.remote or DEFAULT_FLATPAK_REMOTE)
        for e in _on(entries, Channel.FLATPAK)
    ]


def app_store_packages(
    entries: Sequence[ResolvedEntry], store: str
) -> list[SnapPackage] | list[FlatpakPackage]:
    """Packages for whichever app store the host has.

    ``none`` (e.g. under WSL) or an unknown store yields nothing.
    """
    if store == Channel.SNAP.value:
        return snap_packages(entries)
    if store == Channel.FLATPAK.value:
        return flatpak_packages(entries)
    return []


def mise_tools(entries: Sequence[ResolvedEntry]) -> list[MiseTool]:
    """mise (tool key, version) pairs; the backend replaces the key when set."""
    return [
        MiseTool(e.effective_key, e.descriptor.version or "")
        for e in _on(entries, Channel.MISE)
    ]


def custom_tools(entries: Sequence[ResolvedEntry]) -> list[CustomTool]:
    return [
        CustomTool(
            e.key,
            e.descriptor.version or "",
            e.descriptor.installer or "",
            e.tags_joined,
        )
        for e in _on(entries, Channel.CUSTOM)
    ]


def vscode_extensions(entries: Sequence[ResolvedEntry]) -> list[VscodeExtension]:
    return [
        VscodeExtension(e.key, e.descriptor.version or "", e.tags_joined)
        for e in _on(entries, Channel.VSCODE)
    ]


# ── Dispatch by channel name ────────────────────────────────────

_EXTRACTORS: dict[str, Callable[..., list[Any]]] = {
    Channel.SNAP.value: snap_packages,
    Channel.FLATPAK.value: flatpak_packages,
    Channel.MISE.value: mise_tools,
    Channel.CUSTOM.value: custom_tools,
    Channel.VSCODE.value: vscode_extensions,
}


def extract(entries: Sequence[ResolvedEntry], channel: str) -> list[Any]:
    """Run the extractor for ``channel``.

    System families (``apt``, ``dnf``, ``common``) go through
    ``system_packages``. Channels without an extractor yield ``[]``.
    """
    if channel in (Channel.APT.value, Channel.DNF.value, Channel.COMMON.value):
        return system_packages(entries, channel)
    extractor = _EXTRACTORS.get(channel)
    if extractor is None:
        return []
    return extractor(entries)
