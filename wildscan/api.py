"""Stable public API for building tooling on top of wildscan.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Buffer, Sequence
from pathlib import Path

from wildscan.core.errors import (
    AutomatonBuildError,
    HaystackReadError,
    PatternParseError,
    SignatureLoadError,
    SignatureValidationError,
    WildscanError,
)
from wildscan.core.model import (
    AnchorRecord,
    ScanReport,
    Signature,
    SignatureHit,
    SignatureSet,
    StrippedPattern,
    WildcardPattern,
)
from wildscan.core.pattern import (
    format_pattern,
    parse_pattern,
    pattern_from_bytes,
    patterns_from_bytes,
    patterns_from_strs,
)
from wildscan.core.search import find_patterns
from wildscan.core.service import ScanService

__all__ = [
    "WildscanError",
    "PatternParseError",
    "AutomatonBuildError",
    "SignatureLoadError",
    "SignatureValidationError",
    "HaystackReadError",
    "AnchorRecord",
    "ScanReport",
    "Signature",
    "SignatureHit",
    "SignatureSet",
    "StrippedPattern",
    "WildcardPattern",
    "find_patterns",
    "format_pattern",
    "parse_pattern",
    "pattern_from_bytes",
    "patterns_from_bytes",
    "patterns_from_strs",
    "Scanner",
]


class Scanner:
    """Public client for scanning buffers and files with wildscan.

    A `Scanner` instance wraps signature set loading, pattern resolution, and
    the batched search behind a stable API intended for third-party tools.
    """

    def __init__(self) -> None:
        self._service = ScanService()

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_signature_sets(self) -> list[SignatureSet]:
        return self._service.list_signature_sets()

    def scan_bytes(
        self,
        haystack: Buffer,
        *,
        patterns: Sequence[str] = (),
        set_ids: Sequence[str] = (),
    ) -> ScanReport:
        signatures = self._service.resolve_signatures(patterns, set_ids)
        return self._service.scan_bytes(haystack, signatures)

    def scan_file(
        self,
        path: Path | str,
        *,
        patterns: Sequence[str] = (),
        set_ids: Sequence[str] = (),
    ) -> ScanReport:
        return self._service.scan_file(Path(path), patterns=patterns, set_ids=set_ids)
