"""Data models for classification results."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class FeatureClassification:
    """Feature classification of one resolved package.

    ``enabled`` and ``unused`` partition the declared features; ``dangling``
    is the part of ``unused`` that activates nothing and is never referenced
    in source. Only workspace members can have dangling features.
    """

    name: str
    version: str
    package_id: str
    is_workspace_member: bool = False
    enabled: tuple[str, ...] = ()
    unused: tuple[str, ...] = ()
    dangling: tuple[str, ...] = ()


class ClassifiedReport(Mapping[str, FeatureClassification]):
    """Read-only, insertion-ordered mapping of report key -> classification."""

    def __init__(
        self,
        entries: Mapping[str, FeatureClassification] | None = None,
        target: str | None = None,
    ) -> None:
        self._entries = MappingProxyType(dict(entries or {}))
        self.target = target

    def __getitem__(self, key: str) -> FeatureClassification:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ClassifiedReport({list(self._entries)!r}, target={self.target!r})"


@dataclass(frozen=True)
class ReportSummary:
    """Totals across a classified report."""

    packages: int = 0
    workspace_members: int = 0
    enabled: int = 0
    unused: int = 0
    dangling: int = 0
