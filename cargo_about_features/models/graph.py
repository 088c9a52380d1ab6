"""Data models for the resolved cargo dependency graph."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from cargo_about_features.exceptions import InconsistentGraphError

_SEMVER_RE = re.compile(
    r"^(\d+)\.(\d+)\.(\d+)"
    r"(?:-([0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)

# Sorts unparseable versions after every valid one
_UNPARSEABLE = (float("inf"), 0, 0, 1, ())


def version_key(version: str) -> tuple:
    """Sort key following semver precedence (build metadata ignored)."""
    m = _SEMVER_RE.match(version)
    if m is None:
        return _UNPARSEABLE
    major, minor, patch, pre = m.groups()
    if pre is None:
        return (int(major), int(minor), int(patch), 1, ())
    idents = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in pre.split(".")
    )
    return (int(major), int(minor), int(patch), 0, idents)


@dataclass(frozen=True)
class ResolvedPackage:
    """One package of the resolved graph with its declared feature table."""

    id: str
    name: str
    version: str
    # feature name -> activation targets, in declaration order
    features: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    manifest_path: Path | None = None
    source_root: Path | None = None  # workspace members only
    is_workspace_member: bool = False

    def __post_init__(self) -> None:
        frozen = {name: tuple(targets) for name, targets in self.features.items()}
        object.__setattr__(self, "features", MappingProxyType(frozen))

    @property
    def declared_features(self) -> frozenset[str]:
        return frozenset(self.features)

    @property
    def qualified_name(self) -> str:
        return f"{self.name}@{self.version}"

    def targets_of(self, feature: str) -> tuple[str, ...]:
        """Activation targets of *feature*; empty for unknown features."""
        return self.features.get(feature, ())


@dataclass(frozen=True)
class ResolutionNode:
    """Features the resolver activated for one package in this resolution."""

    package_id: str
    features: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", frozenset(self.features))


@dataclass(frozen=True)
class ResolutionGraph:
    """Normalized ``cargo metadata`` output."""

    packages: Mapping[str, ResolvedPackage]
    nodes: tuple[ResolutionNode, ...]
    workspace_member_ids: frozenset[str] = frozenset()
    workspace_root: Path | None = None
    target: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "packages", MappingProxyType(dict(self.packages)))
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "workspace_member_ids", frozenset(self.workspace_member_ids))

    def package(self, package_id: str) -> ResolvedPackage:
        try:
            return self.packages[package_id]
        except KeyError:
            raise InconsistentGraphError(
                f"resolve node {package_id!r} has no matching package"
            ) from None

    def is_member(self, package_id: str) -> bool:
        return package_id in self.workspace_member_ids

    def ordered_nodes(self) -> list[ResolutionNode]:
        """Nodes sorted by (name, semver version, id).

        The first package visited for a given name claims the bare report
        key, so this order must not depend on the resolver's output order.
        """

        def sort_key(node: ResolutionNode) -> tuple:
            pkg = self.package(node.package_id)
            return (pkg.name, version_key(pkg.version), pkg.version, pkg.id)

        return sorted(self.nodes, key=sort_key)
