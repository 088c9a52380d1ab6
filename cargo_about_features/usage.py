"""Find feature names referenced in Rust source files.

Matching is textual (``feature = "<name>"``, not preceded by an identifier
character, so ``target_feature = "avx2"`` is not a reference). It still sees
``cfg`` strings in comments and misses features referenced only through
macros or build scripts. The result is a hint for dangling-feature
detection, nothing more.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import structlog

from cargo_about_features.exceptions import SourceReadError

logger = structlog.get_logger(__name__)

SOURCE_EXTENSION = ".rs"

FEATURE_REF_RE = re.compile(r'(?<![A-Za-z0-9_])feature\s*=\s*"([^"]*)"')

# Build output and VCS metadata
_SKIP_DIRS = {"target", ".git"}

MANIFEST_NAME = "Cargo.toml"


class UsageScanner:
    """Collect feature references from a package's source tree."""

    def scan(self, root: Path) -> frozenset[str]:
        root = Path(root)
        if not root.is_dir():
            logger.warning("usage.root_missing", root=str(root))
            return frozenset()

        found: set[str] = set()
        files = self.collect_source_files(root)
        for path in files:
            found.update(self.scan_text(self._read(path)))
        logger.debug("usage.scanned", root=str(root), files=len(files), features=len(found))
        return frozenset(found)

    @staticmethod
    def scan_text(text: str) -> set[str]:
        """Feature names referenced in *text*."""
        return {name for name in FEATURE_REF_RE.findall(text) if name}

    def collect_source_files(self, root: Path) -> list[Path]:
        """All ``.rs`` files of the package at *root*, sorted.

        Build output is skipped, and so is any subdirectory with its own
        ``Cargo.toml``: that is a separate package (a nested member or an
        xtask crate) and its references are not this package's.
        """
        files = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(
                d
                for d in dirnames
                if d not in _SKIP_DIRS and not (Path(dirpath) / d / MANIFEST_NAME).is_file()
            )
            for f in sorted(filenames):
                if f.endswith(SOURCE_EXTENSION):
                    files.append(Path(dirpath) / f)
        return files

    @staticmethod
    def _read(path: Path) -> str:
        # An unreadable file aborts the whole scan, never skipped.
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SourceReadError(path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise SourceReadError(path, e.strerror or str(e)) from e


def scan_usages(root: Path) -> frozenset[str]:
    """Feature names textually referenced under *root*."""
    return UsageScanner().scan(root)
