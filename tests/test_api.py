from __future__ import annotations

from pathlib import Path

import pytest

from wildscan import api
from wildscan.api import Scanner, ScanReport


@pytest.fixture(autouse=True)
def _isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def test_public_find_patterns() -> None:
    patterns = api.patterns_from_strs(["48 2E", "99", "?? 48 2E"])
    assert api.find_patterns(bytes([0x10, 0x48, 0x2E, 0x99, 0x48, 0x2E]), patterns) == [1, 3, 0]


def test_public_scanner_lists_packaged_sets() -> None:
    scanner = Scanner()
    assert any(s.id == "x86_64_common" for s in scanner.list_signature_sets())
    assert scanner.load_warnings == ()


def test_public_scanner_scan_bytes() -> None:
    report = Scanner().scan_bytes(b"\x00\xf3\x0f\x1e\xfa", patterns=["0F ?? FA"], set_ids=["x86_64_common"])
    assert isinstance(report, ScanReport)
    offsets = {hit.signature.name: hit.offset for hit in report.hits}
    assert offsets["0F ?? FA"] == 2
    assert offsets["x86_64_common.endbr64"] == 1


def test_public_scanner_scan_file(tmp_path: Path) -> None:
    path = tmp_path / "blob.bin"
    path.write_bytes(b"xx\x55\x48\x89\xe5")
    report = Scanner().scan_file(str(path), patterns=["55 48 89 E5"])
    assert [hit.offset for hit in report.hits] == [2]


def test_errors_share_base_class() -> None:
    for error in (
        api.PatternParseError,
        api.AutomatonBuildError,
        api.SignatureLoadError,
        api.SignatureValidationError,
        api.HaystackReadError,
    ):
        assert issubclass(error, api.WildscanError)
