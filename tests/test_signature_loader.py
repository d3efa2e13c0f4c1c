from __future__ import annotations

from pathlib import Path

import pytest

from wildscan.core.errors import SignatureValidationError
from wildscan.core.signature_loader import load_signature_sets


def _write_set(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def _isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def test_load_packaged_set() -> None:
    loaded = load_signature_sets()
    assert "x86_64_common" in loaded.sets
    signature_set = loaded.sets["x86_64_common"]
    signatures = {sig.name: sig for sig in signature_set.signatures}
    assert str(signatures["frame_setup"].pattern) == "55 48 89 E5"
    assert str(signatures["stack_alloc_imm8"].pattern) == "48 83 EC ?"
    assert loaded.warnings == ()


def test_bare_numeric_patterns_stay_text(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "data" / "wildscan" / "signatures" / "nops.yaml",
        """
id: nops
name: NOP sleds
signatures:
  nop: 90
  nop2: 66 90
""",
    )

    loaded = load_signature_sets()
    signatures = {sig.name: sig for sig in loaded.sets["nops"].signatures}
    assert signatures["nop"].pattern.values == b"\x90"
    assert signatures["nop2"].pattern.values == b"\x66\x90"


def test_invalid_pattern_in_user_set_rejected(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "bad.yaml",
        """
id: bad_pattern
name: Bad Pattern
signatures:
  broken: "48 XY 2E"
""",
    )

    with pytest.raises(SignatureValidationError, match="bad_pattern.broken"):
        load_signature_sets()


def test_all_wildcard_signature_rejected(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "wild.yaml",
        """
id: wild
name: Wild
signatures:
  anything: "?? ??"
""",
    )

    with pytest.raises(SignatureValidationError):
        load_signature_sets()


def test_missing_required_keys_rejected(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "missing.yaml",
        """
id: missing
name: Missing
""",
    )

    with pytest.raises(SignatureValidationError, match="Schema validation failed"):
        load_signature_sets()


def test_unknown_keys_rejected(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "extra.yaml",
        """
id: extra
name: Extra
signatures:
  a: "48"
version: 2
""",
    )

    with pytest.raises(SignatureValidationError):
        load_signature_sets()


def test_user_set_overrides_packaged(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "override.yaml",
        """
id: x86_64_common
name: User Override
signatures:
  frame_setup: "55 48 8B EC"
""",
    )

    loaded = load_signature_sets()
    signature_set = loaded.sets["x86_64_common"]
    assert signature_set.name == "User Override"
    assert [sig.name for sig in signature_set.signatures] == ["frame_setup"]
    assert any("overrides" in warning for warning in loaded.warnings)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    _write_set(
        tmp_path / "cfg" / "wildscan" / "signatures" / "dup.yaml",
        """
id: dup
name: Duplicate
signatures:
  a: "48"
  a: "49"
""",
    )

    with pytest.raises(SignatureValidationError):
        load_signature_sets()


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    _write_set(tmp_path / "cfg" / "wildscan" / "signatures" / "list.yml", "- 48 2E\n")

    with pytest.raises(SignatureValidationError, match="mapping at root"):
        load_signature_sets()
