"""Tests for the textual feature-usage scanner."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from cargo_about_features.exceptions import IoError, SourceReadError
from cargo_about_features.usage import UsageScanner, scan_usages


class TestScanText:
    def test_cfg_attribute(self):
        assert UsageScanner.scan_text('#[cfg(feature = "std")]\nfn f() {}') == {"std"}

    def test_whitespace_tolerant(self):
        text = 'cfg!(feature="a") cfg!(feature   =   "b") cfg!(feature\t=\n"c")'
        assert UsageScanner.scan_text(text) == {"a", "b", "c"}

    def test_cfg_attr_and_all(self):
        text = '#[cfg(all(feature = "serde", not(feature = "no-std")))]'
        assert UsageScanner.scan_text(text) == {"serde", "no-std"}

    def test_empty_name_ignored(self):
        assert UsageScanner.scan_text('feature = ""') == set()

    def test_no_match(self):
        assert UsageScanner.scan_text("let features = vec![];") == set()

    def test_target_feature_not_a_reference(self):
        text = '#[cfg(target_feature = "avx2")]\n#[cfg(feature = "simd")]'
        assert UsageScanner.scan_text(text) == {"simd"}

    def test_identifier_suffix_not_a_reference(self):
        assert UsageScanner.scan_text('my_feature = "x"') == set()


class TestUsageScanner:
    def test_collects_from_nested_files(self, write_crate):
        root = write_crate(
            "crate-a",
            {
                "src/lib.rs": '#[cfg(feature = "a")]\nmod a;',
                "src/a/mod.rs": 'cfg!(feature = "b");',
                "tests/it.rs": '#[cfg(feature = "a")]\n#[test] fn t() {}',
                "build.rs": 'fn main() { if cfg!(feature = "c") {} }',
            },
        )
        assert scan_usages(root) == {"a", "b", "c"}

    def test_skips_target_dir(self, write_crate):
        root = write_crate(
            "crate-a",
            {
                "src/lib.rs": "",
                "target/debug/build/out.rs": '#[cfg(feature = "generated")]',
                "sub/target/gen.rs": '#[cfg(feature = "nested-generated")]',
            },
        )
        assert scan_usages(root) == frozenset()

    def test_skips_nested_packages(self, write_crate):
        root = write_crate(
            "app",
            {
                "src/main.rs": '#[cfg(feature = "cli")]\nfn main() {}',
                "sub/Cargo.toml": '[package]\nname = "sub"\nversion = "0.1.0"\n',
                "sub/src/lib.rs": '#[cfg(feature = "legacy")]\nmod old;',
                "xtask/Cargo.toml": '[package]\nname = "xtask"\nversion = "0.1.0"\n',
                "xtask/src/main.rs": 'cfg!(feature = "release");',
            },
        )
        assert scan_usages(root) == {"cli"}
        rel = [f.relative_to(root).as_posix() for f in UsageScanner().collect_source_files(root)]
        assert rel == ["src/main.rs"]

    def test_nested_dir_without_manifest_is_scanned(self, write_crate):
        root = write_crate("app", {"src/lib.rs": "", "examples/demo/main.rs": 'cfg!(feature = "demo");'})
        assert scan_usages(root) == {"demo"}

    def test_ignores_non_rust_files(self, write_crate):
        root = write_crate(
            "crate-a",
            {"README.md": 'feature = "doc-only"', "src/lib.rs": ""},
        )
        (root / "Cargo.toml").write_text('[features]\nx = []\n# feature = "manifest"\n')
        assert scan_usages(root) == frozenset()

    def test_collect_source_files_sorted(self, write_crate):
        root = write_crate("c", {"src/b.rs": "", "src/a.rs": "", "benches/z.rs": ""})
        files = UsageScanner().collect_source_files(root)
        rel = [f.relative_to(root).as_posix() for f in files]
        assert rel == ["benches/z.rs", "src/a.rs", "src/b.rs"]

    def test_missing_root_is_empty(self, tmp_path: Path):
        assert scan_usages(tmp_path / "gone") == frozenset()

    def test_invalid_utf8_aborts(self, write_crate):
        root = write_crate("c", {"src/lib.rs": '#[cfg(feature = "a")]'})
        (root / "src" / "bad.rs").write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(SourceReadError) as exc_info:
            scan_usages(root)
        assert exc_info.value.path == root / "src" / "bad.rs"
        assert isinstance(exc_info.value, IoError)

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits not enforced",
    )
    def test_unreadable_file_aborts(self, write_crate):
        root = write_crate("c", {"src/lib.rs": ""})
        secret = root / "src" / "secret.rs"
        secret.write_text('#[cfg(feature = "x")]')
        secret.chmod(0)
        try:
            with pytest.raises(SourceReadError):
                scan_usages(root)
        finally:
            secret.chmod(0o644)
