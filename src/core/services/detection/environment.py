"""
Detection — host environment facts for manifest resolution.

Read-only probes for WSL, the system package family and the app
store. The resolution engine never calls these itself; the CLI runs
them once and injects the resulting Environment.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

import distro

from src.core.models.environment import Environment

logger = logging.getLogger(__name__)

_WSL_INTEROP = Path("/proc/sys/fs/binfmt_misc/WSLInterop")
_PROC_VERSION = Path("/proc/version")

_APT_IDS = {"debian", "ubuntu"}
_DNF_IDS = {"fedora", "rhel", "centos"}


# ── WSL ───────────────────────────────────────────────────────

def detect_wsl() -> bool:
    """Detect Windows Subsystem for Linux.

    Checks, in order: WSL_DISTRO_NAME / WSL_INTEROP env vars, the
    binfmt_misc WSLInterop entry, and "microsoft" in /proc/version.
    """
    if os.environ.get("WSL_DISTRO_NAME") or os.environ.get("WSL_INTEROP"):
        return True

    if _WSL_INTEROP.exists():
        return True

    try:
        return "microsoft" in _PROC_VERSION.read_text(encoding="utf-8").lower()
    except OSError:
        return False


# ── Package manager ───────────────────────────────────────────

def detect_pkg_manager() -> str:
    """Return "apt" or "dnf" for this host.

    Resolution order:
      1. distro id and its ID_LIKE parents
      2. whichever of apt / dnf is on PATH
      3. "apt"
    """
    ids = {distro.id().lower(), *distro.like().lower().split()}

    if ids & _APT_IDS:
        return "apt"
    if ids & _DNF_IDS:
        return "dnf"

    if shutil.which("apt"):
        return "apt"
    if shutil.which("dnf"):
        return "dnf"

    logger.debug("Could not detect package manager — defaulting to apt")
    return "apt"


# ── App store ─────────────────────────────────────────────────

def detect_app_store(pkg_manager: str, wsl: bool) -> str:
    """Pick the app store that goes with the distro.

    Ubuntu/Debian → snap, Fedora → flatpak, WSL → none.
    """
    if wsl:
        return "none"
    if pkg_manager == "apt":
        return "snap"
    if pkg_manager == "dnf":
        return "flatpak"
    return "none"


def detect_environment(
    wsl: bool | None = None,
    pkg_manager: str | None = None,
    app_store: str | None = None,
) -> Environment:
    """Probe the host, letting explicit values override each probe."""
    if wsl is None:
        wsl = detect_wsl()
    if pkg_manager is None:
        pkg_manager = detect_pkg_manager()
    if app_store is None:
        app_store = detect_app_store(pkg_manager, wsl)

    env = Environment(wsl=wsl, pkg_manager=pkg_manager, app_store=app_store)
    logger.debug("Environment: %s", env)
    return env
