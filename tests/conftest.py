"""
Pytest configuration and shared fixtures for Divina tests.
"""

import pytest
from pathlib import Path
from typing import Callable, Dict, List, Optional

import yaml

from divina.core.platform import clear_platform_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line(
        "markers", "integration: marks tests that touch the filesystem end to end"
    )


@pytest.fixture(autouse=True)
def _fresh_platform_cache():
    """Platform detection is cached per process; tests patch it freely."""
    clear_platform_cache()
    yield
    clear_platform_cache()


# ============================================================================
# Build Script Fixtures
# ============================================================================


def _package_table(
    name: str = "foo",
    sources: Optional[List[str]] = None,
    **overrides,
) -> Dict:
    """Return a valid Package table with optional overrides."""
    table = {
        "name": name,
        "version": "0.1.0",
        "minimum_divina_version": "0.1.0",
        "type": 1,
        "arch": 1,
    }
    if sources is not None:
        table["sources"] = sources
    table.update(overrides)
    return table


@pytest.fixture
def package_table() -> Callable[..., Dict]:
    """Factory for valid Package tables."""
    return _package_table


@pytest.fixture
def write_script() -> Callable[..., Path]:
    """
    Write a divina.yaml into a directory.

    Accepts either a mapping (dumped as YAML) or raw text.
    """

    def _write(directory: Path, content, filename: str = "divina.yaml") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / filename
        if isinstance(content, str):
            script.write_text(content)
        else:
            script.write_text(yaml.safe_dump(content, sort_keys=False))
        return script

    return _write


@pytest.fixture
def package_project(tmp_path, write_script) -> Path:
    """
    Create a single-package project.

    Creates:
    - divina.yaml (Package foo, x86, sources main.asm and util.asm)
    - main.asm, util.asm
    """
    project = tmp_path / "foo"
    write_script(project, {"Package": _package_table(sources=["main.asm", "util.asm"])})
    (project / "main.asm").write_text("section .text\n")
    (project / "util.asm").write_text("section .text\n")
    return project


@pytest.fixture
def workspace_project(tmp_path, write_script) -> Path:
    """
    Create a workspace with two members.

    Creates:
    - divina.yaml (Workspace members app, lib)
    - app/divina.yaml (Package app, x64, main.asm)
    - lib/divina.yaml (Package lib, x86, lib.asm)
    """
    root = tmp_path / "ws"
    write_script(root, {"Workspace": {"members": ["app", "lib"]}})
    write_script(
        root / "app", {"Package": _package_table("app", ["main.asm"], arch=2)}
    )
    write_script(root / "lib", {"Package": _package_table("lib", ["lib.asm"])})
    (root / "app" / "main.asm").write_text("section .text\n")
    (root / "lib" / "lib.asm").write_text("section .text\n")
    return root
