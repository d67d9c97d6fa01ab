"""
Manifest resolution — selection, filtering, extraction, introspection.

    from src.core.services.manifest import Resolver

    resolver = Resolver(Path("packages.yaml"), selected_packs="java node")
    resolver.system_packages()
"""

from src.core.services.manifest.extractors import (  # noqa: F401
    app_store_packages,
    custom_tools,
    extract,
    flatpak_packages,
    mise_tools,
    snap_packages,
    system_packages,
    vscode_extensions,
)
from src.core.services.manifest.introspection import (  # noqa: F401
    list_available_packs,
    pack_contents,
    tool_version,
)
from src.core.services.manifest.resolver import Resolver  # noqa: F401
from src.core.services.manifest.selection import (  # noqa: F401
    filter_entries,
    parse_pack_selection,
    select_entries,
)
