"""Classify enabled / unused / dangling features per package."""

from __future__ import annotations

from collections.abc import Callable, Container
from pathlib import Path

import structlog

from cargo_about_features.exceptions import InconsistentGraphError
from cargo_about_features.models.graph import (
    ResolutionGraph,
    ResolutionNode,
    ResolvedPackage,
)
from cargo_about_features.models.report import ClassifiedReport, FeatureClassification
from cargo_about_features.usage import scan_usages

logger = structlog.get_logger(__name__)

ScanFn = Callable[[Path], frozenset[str]]


def classify_package(
    package: ResolvedPackage,
    node: ResolutionNode,
    usages: frozenset[str] | None = None,
) -> FeatureClassification:
    """Classify one package's features.

    *usages* is the set of features referenced in the package's source. It is
    only given for workspace members; without it nothing is dangling.
    """
    enabled = sorted(node.features)
    unused = sorted(package.declared_features - node.features)
    dangling: list[str] = []
    if usages is not None:
        dangling = [f for f in unused if not package.targets_of(f) and f not in usages]
    return FeatureClassification(
        name=package.name,
        version=package.version,
        package_id=package.id,
        is_workspace_member=usages is not None,
        enabled=tuple(enabled),
        unused=tuple(unused),
        dangling=tuple(dangling),
    )


def report_key(package: ResolvedPackage, taken: Container[str]) -> str:
    """Bare name for the first package of a name, ``name@version`` after that."""
    if package.name not in taken:
        return package.name
    if package.qualified_name not in taken:
        return package.qualified_name
    # Same name and version from two sources (e.g. registry and git)
    return f"{package.qualified_name} ({package.id})"


def classify(graph: ResolutionGraph, scan: ScanFn = scan_usages) -> ClassifiedReport:
    """Classify every resolved package of *graph*.

    Nodes are visited in (name, version) order so the bare-name key always
    goes to the lowest version. Any error aborts the whole run.
    """
    entries: dict[str, FeatureClassification] = {}
    for node in graph.ordered_nodes():
        package = graph.package(node.package_id)

        usages = None
        if graph.is_member(package.id):
            if package.source_root is None:
                raise InconsistentGraphError(
                    f"workspace member {package.id!r} has no source root"
                )
            usages = scan(package.source_root)

        key = report_key(package, entries)
        if key != package.name:
            logger.debug("classifier.collision", name=package.name, key=key)
        entries[key] = classify_package(package, node, usages)

    report = ClassifiedReport(entries, target=graph.target)
    logger.info(
        "classifier.done",
        packages=len(report),
        dangling=sum(len(c.dangling) for c in report.values()),
    )
    return report
