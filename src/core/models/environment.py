"""
Environment model — facts about the host that affect resolution.

The resolution engine never probes the machine itself. Callers build an
Environment (usually via ``detect_environment()``) and pass it in.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class Environment(BaseModel):
    """Injected host facts.

    Attributes:
        wsl:         Running inside Windows Subsystem for Linux.
        pkg_manager: Active system package family ("apt" or "dnf").
        app_store:   Available app store ("snap", "flatpak" or "none").
    """

    model_config = ConfigDict(frozen=True)

    wsl: bool = False
    pkg_manager: Literal["apt", "dnf"] = "apt"
    app_store: Literal["snap", "flatpak", "none"] = "snap"

    def is_wsl(self) -> bool:
        """True when ``@skip-wsl`` entries must be dropped."""
        return self.wsl
