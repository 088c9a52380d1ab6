"""Custom exceptions for cargo-about-features."""

from __future__ import annotations

from pathlib import Path


class FeatureAnalysisError(Exception):
    """Base exception for all feature analysis errors."""


class GraphResolutionError(FeatureAnalysisError):
    """Raised when ``cargo metadata`` fails or the manifest is invalid."""

    def __init__(self, message: str, stderr: str | None = None):
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)


class IoError(FeatureAnalysisError):
    """Raised on a filesystem failure while scanning or writing output."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class SourceReadError(IoError):
    """Raised when a source file cannot be read during a usage scan."""


class ReportWriteError(IoError):
    """Raised when the report file cannot be written."""


class InconsistentGraphError(FeatureAnalysisError):
    """Raised when the resolved graph breaks an invariant the loader guarantees.

    Indicates a bug upstream, never bad user input.
    """


class SerializationError(FeatureAnalysisError):
    """Raised when the report cannot be encoded as TOML."""
