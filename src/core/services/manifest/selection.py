"""
Pack selection and tag filtering.

Flattens ``core`` plus each selected pack into one ordered list of
ResolvedEntry values, then drops entries whose tags exclude them on
this host. Both steps are pure.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from src.core.models.environment import Environment
from src.core.models.manifest import (
    CORE_ORIGIN,
    PACK_METADATA_KEYS,
    EntryDescriptor,
    ResolvedEntry,
)

logger = logging.getLogger(__name__)

_PACK_SEPARATORS = re.compile(r"[\s,]+")


def parse_pack_selection(value: str | Iterable[str] | None) -> list[str]:
    """Normalise a pack selection into an ordered, de-duplicated list.

    Accepts the ``DEVBASE_SELECTED_PACKS`` string form ("java node",
    "java,node") or any iterable of names.
    """
    if value is None:
        return []
    if isinstance(value, str):
        names = _PACK_SEPARATORS.split(value.strip())
    else:
        names = [str(v).strip() for v in value]
    return list(dict.fromkeys(n for n in names if n))


def _origin_entries(origin: str, channels: dict[str, Any]) -> list[ResolvedEntry]:
    entries: list[ResolvedEntry] = []
    for channel, items in channels.items():
        if channel in PACK_METADATA_KEYS and origin != CORE_ORIGIN:
            continue
        if not items:
            continue
        for key, raw in items.items():
            entries.append(
                ResolvedEntry(
                    origin=origin,
                    channel=str(channel),
                    key=str(key),
                    descriptor=EntryDescriptor.from_raw(raw),
                )
            )
    return entries


def select_entries(
    document: dict[str, Any],
    selected_packs: Iterable[str] = (),
) -> list[ResolvedEntry]:
    """Flatten core + selected packs into one unified entry list.

    Core entries always come first, then each selected pack in the
    order given. Pack names that do not exist are ignored.
    """
    entries = _origin_entries(CORE_ORIGIN, document.get("core") or {})

    packs = document.get("packs") or {}
    for name in parse_pack_selection(selected_packs):
        if name not in packs:
            logger.debug("Selected pack '%s' not in manifest — ignoring", name)
            continue
        entries.extend(_origin_entries(name, packs[name] or {}))

    return entries


def filter_entries(
    entries: Iterable[ResolvedEntry],
    environment: Environment,
) -> list[ResolvedEntry]:
    """Drop entries excluded on this host.

    Only ``@skip-wsl`` excludes, and only when running under WSL.
    ``@optional`` and unrecognised tags stay on the entry untouched.
    """
    kept: list[ResolvedEntry] = []
    wsl = environment.is_wsl()
    for entry in entries:
        if wsl and entry.skip_wsl:
            logger.debug("Skipping %s/%s (@skip-wsl)", entry.channel, entry.key)
            continue
        kept.append(entry)
    return kept
