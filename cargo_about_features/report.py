"""Render a classified report as TOML."""

from __future__ import annotations

from pathlib import Path

import structlog
import toml

from cargo_about_features.exceptions import ReportWriteError, SerializationError
from cargo_about_features.models.report import ClassifiedReport, ReportSummary

logger = structlog.get_logger(__name__)

# Array order inside every package table
FIELDS = ("enabled", "unused", "dangling")

_HEADER = """\
# Feature usage report generated by cargo-about-features.
#
#   enabled  - features activated in this resolution
#   unused   - declared features that are not activated
#   dangling - unused workspace features that activate nothing and are
#              never referenced in source; candidates for removal
"""


def _header(target: str | None) -> str:
    header = _HEADER
    if target:
        header += f"#\n# Target: {target}\n"
    return header + "\n"


def to_document(report: ClassifiedReport) -> dict[str, dict[str, list[str]]]:
    """Plain nested dict in report order, arrays in :data:`FIELDS` order."""
    return {
        key: {name: list(getattr(entry, name)) for name in FIELDS}
        for key, entry in report.items()
    }


def serialize(report: ClassifiedReport) -> str:
    """Render *report* as a commented TOML document.

    The output contains no timestamps or paths, so unchanged inputs give
    byte-identical documents.
    """
    try:
        body = toml.dumps(to_document(report))
    except (TypeError, ValueError) as e:
        raise SerializationError(f"failed to encode report as TOML: {e}") from e
    return _header(report.target) + body


def write_report(report: ClassifiedReport, path: Path) -> None:
    """Serialize *report* and write it to *path* in a single write."""
    content = serialize(report)
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as e:
        raise ReportWriteError(path, e.strerror or str(e)) from e
    logger.info("report.written", path=str(path), packages=len(report))


def summarize(report: ClassifiedReport) -> ReportSummary:
    entries = list(report.values())
    return ReportSummary(
        packages=len(entries),
        workspace_members=sum(1 for e in entries if e.is_workspace_member),
        enabled=sum(len(e.enabled) for e in entries),
        unused=sum(len(e.unused) for e in entries),
        dangling=sum(len(e.dangling) for e in entries),
    )


def format_summary(report: ClassifiedReport, limit: int = 5) -> str:
    """Short human-readable overview: totals plus the first *limit* packages."""
    summary = summarize(report)
    lines = [
        f"Total packages analyzed: {summary.packages}",
        f"Workspace members: {summary.workspace_members}",
        f"Total enabled features: {summary.enabled}",
        f"Total unused features: {summary.unused}",
        f"Total dangling features: {summary.dangling}",
    ]
    if report.target:
        lines.insert(0, f"Target: {report.target}")

    shown = list(report.items())[:limit]
    if shown:
        lines.append("")
        lines.append(f"First {len(shown)} packages:")
        for i, (key, entry) in enumerate(shown, 1):
            lines.append(f"  {i}. {key}: {len(entry.enabled)} enabled features")

    dangling = [(key, e.dangling) for key, e in report.items() if e.dangling]
    if dangling:
        lines.append("")
        lines.append("Dangling features:")
        for key, names in dangling:
            lines.append(f"  {key}: {', '.join(names)}")
    return "\n".join(lines)
