"""cargo-about-features: enabled, unused and dangling cargo feature report."""

__version__ = "0.1.0"

from cargo_about_features.classifier import classify, classify_package
from cargo_about_features.exceptions import (
    FeatureAnalysisError,
    GraphResolutionError,
    InconsistentGraphError,
    IoError,
    ReportWriteError,
    SerializationError,
    SourceReadError,
)
from cargo_about_features.metadata import graph_from_metadata, load_graph
from cargo_about_features.models.graph import (
    ResolutionGraph,
    ResolutionNode,
    ResolvedPackage,
)
from cargo_about_features.models.report import (
    ClassifiedReport,
    FeatureClassification,
    ReportSummary,
)
from cargo_about_features.report import serialize, summarize, write_report
from cargo_about_features.usage import UsageScanner, scan_usages

__all__ = [
    "ClassifiedReport",
    "FeatureAnalysisError",
    "FeatureClassification",
    "GraphResolutionError",
    "InconsistentGraphError",
    "IoError",
    "ReportSummary",
    "ReportWriteError",
    "ResolutionGraph",
    "ResolutionNode",
    "ResolvedPackage",
    "SerializationError",
    "SourceReadError",
    "UsageScanner",
    "classify",
    "classify_package",
    "graph_from_metadata",
    "load_graph",
    "scan_usages",
    "serialize",
    "summarize",
    "write_report",
]
