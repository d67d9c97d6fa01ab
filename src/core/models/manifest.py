"""
Manifest model — installable entries and the tuples each channel emits.

A manifest (packages.yaml) has no rigid schema: every descriptor field
is optional and only some channels read some fields. Descriptors are
validated loosely here; channel extractors pick the fields they need
and default the rest.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ── Channels ────────────────────────────────────────────────────

CORE_ORIGIN = "core"


class Channel(str, Enum):
    """Installer channels known to the extractors.

    The manifest may carry other channel names; they are kept on the
    resolved entries but no extractor reads them.
    """

    APT = "apt"
    DNF = "dnf"
    COMMON = "common"
    SNAP = "snap"
    FLATPAK = "flatpak"
    MISE = "mise"
    CUSTOM = "custom"
    VSCODE = "vscode"


SYSTEM_FAMILIES = (Channel.APT.value, Channel.DNF.value)
APP_STORES = (Channel.SNAP.value, Channel.FLATPAK.value)
KNOWN_CHANNELS = frozenset(c.value for c in Channel)

DEFAULT_FLATPAK_REMOTE = "flathub"

# Pack-level keys that are metadata, not channels
PACK_METADATA_KEYS = frozenset({"description"})


# ── Tags ────────────────────────────────────────────────────────


class Tag(str, Enum):
    """Recognised tag variants. Anything else parses to UNKNOWN."""

    SKIP_WSL = "@skip-wsl"
    OPTIONAL = "@optional"
    UNKNOWN = "unknown"


def parse_tag(label: str) -> Tag:
    """Map a raw tag label to its variant."""
    if label == Tag.SKIP_WSL.value:
        return Tag.SKIP_WSL
    if label == Tag.OPTIONAL.value:
        return Tag.OPTIONAL
    return Tag.UNKNOWN


def join_tags(tags: list[str] | tuple[str, ...]) -> str:
    """Join tag labels into the delimited form used in channel tuples."""
    return ",".join(tags)


def split_tags(joined: str) -> list[str]:
    return [t for t in joined.split(",") if t]


# ── Descriptor ──────────────────────────────────────────────────


def _scalar_to_str(value: Any) -> Any:
    # from_raw callers outside the loader may still pass ints or floats
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class EntryDescriptor(BaseModel):
    """One installable unit's metadata. All fields are optional."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    version: str | None = None
    backend: str | None = None      # mise backend, e.g. "aqua:junegunn/fzf"
    installer: str | None = None    # custom installer routine
    options: str | None = None      # snap flags, e.g. "--classic"
    remote: str | None = None       # flatpak remote
    tags: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("version", "backend", "installer", "options", "remote", mode="before")
    @classmethod
    def _coerce_scalar(cls, v: Any) -> Any:
        return _scalar_to_str(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        if isinstance(v, (list, tuple)):
            return tuple(str(t) for t in v if t is not None)
        return v

    @classmethod
    def from_raw(cls, raw: Any) -> "EntryDescriptor":
        """Build a descriptor from a YAML value (``None`` means empty)."""
        if raw is None:
            return cls()
        return cls.model_validate(raw)


# ── Resolved entry ──────────────────────────────────────────────


class ResolvedEntry(BaseModel):
    """An entry after pack selection, annotated with where it came from.

    ``origin`` is "core" or the pack name and is only used for grouping
    output; it never affects filtering.
    """

    model_config = ConfigDict(frozen=True)

    origin: str
    channel: str
    key: str
    descriptor: EntryDescriptor = Field(default_factory=EntryDescriptor)

    @property
    def effective_key(self) -> str:
        """The backend when set, otherwise the entry key."""
        return self.descriptor.backend or self.key

    @property
    def tags(self) -> tuple[str, ...]:
        return self.descriptor.tags

    @property
    def tag_kinds(self) -> frozenset[Tag]:
        return frozenset(parse_tag(t) for t in self.descriptor.tags)

    @property
    def skip_wsl(self) -> bool:
        return Tag.SKIP_WSL in self.tag_kinds

    @property
    def optional(self) -> bool:
        return Tag.OPTIONAL in self.tag_kinds

    @property
    def tags_joined(self) -> str:
        return join_tags(self.descriptor.tags)


# ── Channel tuples ──────────────────────────────────────────────


class SnapPackage(NamedTuple):
    name: str
    options: str = ""


class FlatpakPackage(NamedTuple):
    app_id: str
    remote: str = DEFAULT_FLATPAK_REMOTE


class MiseTool(NamedTuple):
    key: str
    version: str = ""


class CustomTool(NamedTuple):
    key: str
    version: str = ""
    installer: str = ""
    tags: str = ""

    @property
    def optional(self) -> bool:
        return Tag.OPTIONAL.value in split_tags(self.tags)


class VscodeExtension(NamedTuple):
    extension_id: str
    version: str = ""
    tags: str = ""

    @property
    def optional(self) -> bool:
        return Tag.OPTIONAL.value in split_tags(self.tags)


class PackInfo(NamedTuple):
    name: str
    description: str = ""
