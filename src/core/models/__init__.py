"""
Domain models — Pydantic types for manifest resolution.

All models are re-exported here for convenient access:

    from src.core.models import EntryDescriptor, ResolvedEntry, Environment
"""

from src.core.models.environment import Environment
from src.core.models.manifest import (
    Channel,
    CustomTool,
    EntryDescriptor,
    FlatpakPackage,
    MiseTool,
    PackInfo,
    ResolvedEntry,
    SnapPackage,
    Tag,
    VscodeExtension,
    parse_tag,
)
from src.core.models.template import GeneratedFile

__all__ = [
    # manifest.py
    "Channel",
    "CustomTool",
    "EntryDescriptor",
    # environment.py
    "Environment",
    "FlatpakPackage",
    # template.py
    "GeneratedFile",
    "MiseTool",
    "PackInfo",
    "ResolvedEntry",
    "SnapPackage",
    "Tag",
    "VscodeExtension",
    "parse_tag",
]
