"""
Host detection — ``__init__.py`` re-exports the environment probes.

These functions READ system state but never WRITE.
"""

from src.core.services.detection.environment import (  # noqa: F401
    detect_app_store,
    detect_environment,
    detect_pkg_manager,
    detect_wsl,
)
