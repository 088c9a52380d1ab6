"""Shared pytest fixtures for cargo-about-features tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from cargo_about_features.testing import GraphBuilder


@pytest.fixture
def builder(tmp_path: Path) -> GraphBuilder:
    return GraphBuilder(workspace_root=str(tmp_path))


@pytest.fixture
def write_crate(tmp_path: Path):
    """Create a crate directory with a manifest and the given source files."""

    def _write(name: str, sources: dict[str, str], version: str = "0.1.0") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        (root / "Cargo.toml").write_text(
            f'[package]\nname = "{name}"\nversion = "{version}"\nedition = "2021"\n'
        )
        for rel, text in sources.items():
            f = root / rel
            f.parent.mkdir(parents=True, exist_ok=True)
            f.write_text(text)
        return root

    return _write
