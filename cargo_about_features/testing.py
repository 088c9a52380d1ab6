"""Test doubles for cargo_about_features, no cargo toolchain needed.

Usage::

    from cargo_about_features.testing import FakeScanner, GraphBuilder

    builder = GraphBuilder()
    builder.member("app", features={"a": [], "b": ["a"]}, enabled=["b"])
    builder.package("serde", "1.0.200", features={"std": []}, enabled=["std"])
    graph = builder.build()

    report = classify(graph, scan=FakeScanner({"app": {"a"}}))
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from cargo_about_features.metadata import graph_from_metadata
from cargo_about_features.models.graph import ResolutionGraph

_REGISTRY = "registry+https://github.com/rust-lang/crates.io-index"


class GraphBuilder:
    """Build ``cargo metadata`` documents (format version 1) in memory."""

    def __init__(self, workspace_root: str = "/work") -> None:
        self.workspace_root = workspace_root
        self._packages: list[dict[str, Any]] = []
        self._nodes: list[dict[str, Any]] = []
        self._members: list[str] = []

    def package(
        self,
        name: str,
        version: str = "1.0.0",
        *,
        features: Mapping[str, Iterable[str]] | None = None,
        enabled: Iterable[str] = (),
        source: str = _REGISTRY,
        manifest_path: str | None = None,
    ) -> str:
        """Add a third-party package; returns its package id."""
        pkg_id = f"{source}#{name}@{version}"
        if manifest_path is None:
            manifest_path = f"/registry/{name}-{version}/Cargo.toml"
        self._add(pkg_id, name, version, features, enabled, manifest_path)
        return pkg_id

    def member(
        self,
        name: str,
        version: str = "0.1.0",
        *,
        features: Mapping[str, Iterable[str]] | None = None,
        enabled: Iterable[str] = (),
        path: str | Path | None = None,
    ) -> str:
        """Add a workspace member rooted at *path*; returns its package id."""
        root = Path(path) if path is not None else Path(self.workspace_root) / name
        pkg_id = f"path+file://{root}#{name}@{version}"
        self._add(pkg_id, name, version, features, enabled, str(root / "Cargo.toml"))
        self._members.append(pkg_id)
        return pkg_id

    def orphan_node(self, package_id: str, enabled: Iterable[str] = ()) -> None:
        """Add a resolve node with no matching package entry."""
        self._nodes.append({"id": package_id, "features": list(enabled)})

    def document(self) -> dict[str, Any]:
        return {
            "packages": list(self._packages),
            "workspace_members": list(self._members),
            "workspace_default_members": list(self._members),
            "resolve": {"nodes": list(self._nodes), "root": None},
            "target_directory": f"{self.workspace_root}/target",
            "version": 1,
            "workspace_root": self.workspace_root,
            "metadata": None,
        }

    def build(self, target: str | None = None) -> ResolutionGraph:
        return graph_from_metadata(self.document(), target=target)

    def _add(
        self,
        pkg_id: str,
        name: str,
        version: str,
        features: Mapping[str, Iterable[str]] | None,
        enabled: Iterable[str],
        manifest_path: str,
    ) -> None:
        self._packages.append(
            {
                "name": name,
                "version": version,
                "id": pkg_id,
                "features": {k: list(v) for k, v in (features or {}).items()},
                "manifest_path": manifest_path,
                "dependencies": [],
                "targets": [],
            }
        )
        self._nodes.append({"id": pkg_id, "features": list(enabled), "dependencies": []})


class FakeScanner:
    """Usage scanner returning fixed usages keyed by source-root directory name.

    Parameters
    ----------
    usages:
        Mapping of source-root directory name (for members built with
        :meth:`GraphBuilder.member`, the package name) to referenced features.
    """

    def __init__(self, usages: Mapping[str, Iterable[str]] | None = None) -> None:
        self._usages = {k: frozenset(v) for k, v in (usages or {}).items()}
        self._calls: list[Path] = []

    @property
    def calls(self) -> list[Path]:
        """Roots scanned, useful for assertions in tests."""
        return self._calls

    def __call__(self, root: Path) -> frozenset[str]:
        self._calls.append(root)
        return self._usages.get(Path(root).name, frozenset())
