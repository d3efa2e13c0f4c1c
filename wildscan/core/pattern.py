"""Parsing, formatting, and normalization of wildcard byte patterns."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from wildscan.core.errors import PatternParseError
from wildscan.core.model import StrippedPattern, WildcardPattern

_HEX_TOKEN_RE = re.compile(r"^[0-9a-fA-F]{1,2}$")
_WILDCARD_TOKENS = frozenset({"?", "??"})


def parse_pattern(text: str) -> WildcardPattern:
    """Parse whitespace-separated ``48 ?? 2E`` style text into a pattern."""
    values = bytearray()
    mask: list[bool] = []
    for position, token in enumerate(text.split()):
        if token in _WILDCARD_TOKENS:
            values.append(0)
            mask.append(True)
        elif _HEX_TOKEN_RE.match(token):
            values.append(int(token, 16))
            mask.append(False)
        else:
            raise PatternParseError(
                f"Invalid token '{token}' at position {position} in pattern '{text}': "
                "expected a hex byte or '?'/'??'"
            )
    return WildcardPattern(values=bytes(values), mask=tuple(mask))


def pattern_from_bytes(data: bytes | bytearray | memoryview) -> WildcardPattern:
    values = bytes(data)
    return WildcardPattern(values=values, mask=(False,) * len(values))


def patterns_from_strs(texts: Iterable[str]) -> list[WildcardPattern]:
    return [parse_pattern(text) for text in texts]


def patterns_from_bytes(items: Iterable[bytes | bytearray | memoryview]) -> list[WildcardPattern]:
    return [pattern_from_bytes(item) for item in items]


def format_pattern(pattern: WildcardPattern) -> str:
    return str(pattern)


def strip_leading_wildcards(pattern: WildcardPattern) -> StrippedPattern:
    """Drop the prefix run of wildcard cells, keeping how many were removed.

    Interior and trailing wildcards are left alone.
    """
    count = 0
    for wild in pattern.mask:
        if not wild:
            break
        count += 1
    if count == 0:
        return StrippedPattern(pattern=pattern, strip_count=0)
    stripped = WildcardPattern(values=pattern.values[count:], mask=pattern.mask[count:])
    return StrippedPattern(pattern=stripped, strip_count=count)


def strip_all(patterns: Sequence[WildcardPattern]) -> list[StrippedPattern]:
    return [strip_leading_wildcards(pattern) for pattern in patterns]
