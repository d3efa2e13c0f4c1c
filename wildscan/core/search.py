"""Batch wildcard pattern search over a byte buffer.

The search is two-phase. Each pattern contributes its longest literal run
(the anchor) to one Hyperscan database, which finds every anchor occurrence
in a single pass. Each occurrence is then widened to the full pattern window
and checked byte by byte under the wildcard mask.
"""

from __future__ import annotations

import logging
from collections.abc import Buffer, Sequence

from wildscan.core.anchor import build_anchor_records
from wildscan.core.automaton import AnchorAutomaton
from wildscan.core.model import WildcardPattern

LOGGER = logging.getLogger(__name__)


def matches_window(haystack: Buffer, start: int, template: WildcardPattern) -> bool:
    """Check ``template`` against ``haystack`` at ``start``.

    A window that does not fit inside the haystack is a non-match.
    """
    end = start + len(template)
    if start < 0 or end > len(haystack):
        return False
    window = haystack[start:end]
    return all(wild or byte == value for byte, value, wild in zip(window, template.values, template.mask))


def find_patterns(haystack: Buffer, patterns: Sequence[WildcardPattern]) -> list[int | None]:
    """Find the first occurrence of every pattern in ``haystack``.

    Returns one slot per pattern, in input order, holding the offset of the
    pattern's first cell or ``None``. Patterns without a single known byte
    never match. Raises ``AutomatonBuildError`` if the anchor set cannot be
    compiled.
    """
    results: list[int | None] = [None] * len(patterns)
    if not patterns:
        return results

    stripped, records = build_anchor_records(patterns)
    for index, record in enumerate(records):
        if not record.anchor:
            LOGGER.warning("Pattern %d ('%s') has no known bytes and will never match", index, patterns[index])

    automaton = AnchorAutomaton([record.anchor for record in records])
    pending = sum(1 for record in records if record.anchor)
    hit_count = 0

    with memoryview(haystack) as view:

        def on_hit(index: int, anchor_start: int) -> bool:
            nonlocal pending, hit_count
            hit_count += 1
            if results[index] is not None:
                return False

            record = records[index]
            start = anchor_start - record.offset
            if not matches_window(view, start, record.template):
                return False

            offset = start - stripped[index].strip_count
            if offset < 0:
                # the stripped leading wildcards would sit before the buffer
                return False
            results[index] = offset
            pending -= 1
            return pending == 0

        if pending:
            automaton.scan(view, on_hit)
        size = len(view)

    LOGGER.debug(
        "Scanned %d bytes: %d anchor hits examined, %d of %d patterns found",
        size,
        hit_count,
        sum(1 for result in results if result is not None),
        len(patterns),
    )
    return results
