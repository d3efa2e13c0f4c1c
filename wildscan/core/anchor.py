"""Anchor selection: the literal run of each pattern fed to the automaton."""

from __future__ import annotations

from collections.abc import Sequence

from wildscan.core.model import AnchorRecord, StrippedPattern, WildcardPattern
from wildscan.core.pattern import strip_all


def longest_known_run(pattern: WildcardPattern) -> tuple[int, int]:
    """Return ``(start, length)`` of the longest run of known cells.

    On equal lengths the leftmost run is kept. A pattern without known cells
    yields ``(0, 0)``.
    """
    best_start = 0
    best_length = 0
    current_start = 0
    current_length = 0
    for index, wild in enumerate(pattern.mask):
        if wild:
            current_length = 0
            continue
        if current_length == 0:
            current_start = index
        current_length += 1
        if current_length > best_length:
            best_start = current_start
            best_length = current_length
    return best_start, best_length


def select_anchor(stripped: WildcardPattern) -> AnchorRecord:
    start, length = longest_known_run(stripped)
    return AnchorRecord(
        anchor=stripped.values[start : start + length],
        offset=start,
        template=stripped,
    )


def build_anchor_records(
    patterns: Sequence[WildcardPattern],
) -> tuple[list[StrippedPattern], list[AnchorRecord]]:
    """Normalize a batch and select anchors, index-aligned with ``patterns``."""
    stripped = strip_all(patterns)
    records = [select_anchor(item.pattern) for item in stripped]
    return stripped, records
