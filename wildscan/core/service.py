"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
import mmap
import os
from collections.abc import Buffer, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from wildscan.core.errors import HaystackReadError, SignatureLoadError
from wildscan.core.model import ScanReport, Signature, SignatureHit, SignatureSet
from wildscan.core.pattern import parse_pattern
from wildscan.core.search import find_patterns
from wildscan.core.signature_loader import load_signature_sets

LOGGER = logging.getLogger(__name__)


class ScanService:
    def __init__(self) -> None:
        loaded = load_signature_sets()
        self.signature_sets = loaded.sets
        self.load_warnings = loaded.warnings

    def list_signature_sets(self) -> list[SignatureSet]:
        return sorted(self.signature_sets.values(), key=lambda s: s.id)

    def resolve_signatures(
        self,
        patterns: Sequence[str] = (),
        set_ids: Sequence[str] = (),
    ) -> list[Signature]:
        """Turn ad-hoc pattern texts and signature set ids into named signatures.

        Ad-hoc patterns come first, named by their text; set members are named
        ``<set id>.<signature name>``.
        """
        signatures = [Signature(name=text.strip(), pattern=parse_pattern(text)) for text in patterns]

        for set_id in set_ids:
            signature_set = self.signature_sets.get(set_id)
            if signature_set is None:
                available = ", ".join(sorted(self.signature_sets)) or "<none>"
                raise SignatureLoadError(f"Unknown signature set '{set_id}'. Available: {available}")
            signatures.extend(
                Signature(name=f"{signature_set.id}.{sig.name}", pattern=sig.pattern)
                for sig in signature_set.signatures
            )

        if not signatures:
            raise SignatureLoadError("Nothing to scan for: pass patterns or signature set ids")
        return signatures

    def scan_bytes(
        self,
        haystack: Buffer,
        signatures: Sequence[Signature],
        *,
        source: str = "<memory>",
    ) -> ScanReport:
        offsets = find_patterns(haystack, [sig.pattern for sig in signatures])
        return ScanReport(
            source=source,
            size=len(memoryview(haystack)),
            hits=tuple(SignatureHit(signature=sig, offset=offset) for sig, offset in zip(signatures, offsets)),
        )

    def scan_file(
        self,
        path: Path,
        patterns: Sequence[str] = (),
        set_ids: Sequence[str] = (),
    ) -> ScanReport:
        signatures = self.resolve_signatures(patterns, set_ids)
        LOGGER.debug("Scanning %s for %d signatures", path, len(signatures))
        with map_file(path) as haystack:
            return self.scan_bytes(haystack, signatures, source=str(path))


@contextmanager
def map_file(path: Path) -> Iterator[Buffer]:
    """Map ``path`` read-only; empty files yield ``b""`` since they cannot be mapped."""
    try:
        with open(path, "rb") as handle:
            if os.fstat(handle.fileno()).st_size == 0:
                mapped = None
            else:
                mapped = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
    except (OSError, ValueError) as exc:
        raise HaystackReadError(f"Could not read {path}: {exc}") from exc

    if mapped is None:
        yield b""
        return
    with mapped:
        yield mapped
