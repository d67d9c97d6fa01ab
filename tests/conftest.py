"""
Shared test fixtures and configuration.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from src.core.models.environment import Environment


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def packages_yaml(fixtures_dir: Path) -> Path:
    """The sample base manifest."""
    return fixtures_dir / "packages.yaml"


@pytest.fixture
def packages_custom_yaml(fixtures_dir: Path) -> Path:
    """The sample organisation overlay."""
    return fixtures_dir / "packages-custom.yaml"


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[..., Path]:
    """Write a dedented YAML string to a temp file and return its path."""

    def _write(content: str, name: str = "packages.yaml") -> Path:
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def linux_env() -> Environment:
    """A plain Ubuntu host."""
    return Environment(wsl=False, pkg_manager="apt", app_store="snap")


@pytest.fixture
def wsl_env() -> Environment:
    """Ubuntu under WSL (no app store)."""
    return Environment(wsl=True, pkg_manager="apt", app_store="none")


@pytest.fixture
def fedora_env() -> Environment:
    return Environment(wsl=False, pkg_manager="dnf", app_store="flatpak")
