"""Resolve the dependency graph through ``cargo metadata``."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import structlog

from cargo_about_features.config import Settings
from cargo_about_features.exceptions import GraphResolutionError
from cargo_about_features.models.graph import (
    ResolutionGraph,
    ResolutionNode,
    ResolvedPackage,
)

logger = structlog.get_logger(__name__)

METADATA_FORMAT_VERSION = "1"


def check_manifest(manifest_path: Path) -> None:
    """Raise GraphResolutionError for a missing or malformed manifest."""
    if not manifest_path.is_file():
        raise GraphResolutionError(f"manifest not found: {manifest_path}")
    try:
        data = tomllib.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise GraphResolutionError(f"cannot read manifest {manifest_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise GraphResolutionError(f"invalid TOML in {manifest_path}: {e}") from e
    if "package" not in data and "workspace" not in data:
        raise GraphResolutionError(
            f"{manifest_path} has neither a [package] nor a [workspace] table"
        )


def metadata_command(
    cargo: str,
    manifest_path: Path | None = None,
    target: str | None = None,
) -> list[str]:
    cmd = [cargo, "metadata", "--format-version", METADATA_FORMAT_VERSION]
    if manifest_path is not None:
        cmd += ["--manifest-path", str(manifest_path)]
    if target:
        cmd += ["--filter-platform", target]
    return cmd


def run_cargo_metadata(
    manifest_path: Path | None = None,
    target: str | None = None,
    *,
    cargo: str | None = None,
) -> dict[str, Any]:
    """Run ``cargo metadata`` and return the decoded JSON document.

    Raises :class:`GraphResolutionError` with cargo's stderr on failure.
    """
    cargo = cargo or Settings.from_env().cargo
    cmd = metadata_command(cargo, manifest_path, target)
    logger.debug("metadata.invoke", command=cmd)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise GraphResolutionError(f"failed to run {cargo!r}: {e}") from e
    if result.returncode != 0:
        raise GraphResolutionError(
            f"cargo metadata failed (exit {result.returncode})", stderr=result.stderr
        )
    try:
        document = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise GraphResolutionError(f"cargo metadata returned invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise GraphResolutionError("cargo metadata returned a non-object document")
    return document


def _parse_package(raw: dict[str, Any], members: frozenset[str]) -> ResolvedPackage:
    pkg_id = raw["id"]
    is_member = pkg_id in members
    manifest = raw.get("manifest_path")
    manifest_path = Path(manifest) if manifest else None
    source_root = manifest_path.parent if is_member and manifest_path else None
    return ResolvedPackage(
        id=pkg_id,
        name=raw["name"],
        version=raw["version"],
        features={name: tuple(targets) for name, targets in (raw.get("features") or {}).items()},
        manifest_path=manifest_path,
        source_root=source_root,
        is_workspace_member=is_member,
    )


def graph_from_metadata(
    document: dict[str, Any], target: str | None = None
) -> ResolutionGraph:
    """Normalize a ``cargo metadata`` (format version 1) document."""
    resolve = document.get("resolve")
    if not resolve:
        raise GraphResolutionError(
            "cargo metadata output has no dependency resolution (was --no-deps used?)"
        )
    try:
        members = frozenset(document.get("workspace_members") or ())
        packages = {}
        for raw in document["packages"]:
            pkg = _parse_package(raw, members)
            packages[pkg.id] = pkg
        nodes = tuple(
            ResolutionNode(package_id=raw["id"], features=frozenset(raw.get("features") or ()))
            for raw in resolve["nodes"]
        )
    except (KeyError, TypeError) as e:
        raise GraphResolutionError(f"malformed cargo metadata output: {e!r}") from e

    root = document.get("workspace_root")
    return ResolutionGraph(
        packages=packages,
        nodes=nodes,
        workspace_member_ids=members,
        workspace_root=Path(root) if root else None,
        target=target,
    )


def load_graph(
    manifest_path: Path | None = None,
    target: str | None = None,
    *,
    cargo: str | None = None,
) -> ResolutionGraph:
    """Resolve the dependency graph for *manifest_path* (or the cwd's manifest).

    *target* restricts the graph to dependencies active on that target triple.
    """
    if manifest_path is not None:
        check_manifest(manifest_path)
    document = run_cargo_metadata(manifest_path, target, cargo=cargo)
    graph = graph_from_metadata(document, target=target)
    logger.info(
        "metadata.loaded",
        packages=len(graph.packages),
        nodes=len(graph.nodes),
        members=len(graph.workspace_member_ids),
        target=target,
    )
    return graph
