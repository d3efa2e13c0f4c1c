"""Core data models used across the search pipeline, loader, service, and CLI."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class WildcardPattern:
    """A byte pattern where some cells are unknown.

    Stored as two parallel arrays: ``values`` holds the byte of every known
    cell (wildcard cells are zero) and ``mask`` is ``True`` where the cell is
    a wildcard. The pattern ``48 ? 2E`` is ``values=b"\\x48\\x00\\x2e"``,
    ``mask=(False, True, False)``.
    """

    values: bytes
    mask: tuple[bool, ...]

    def __post_init__(self) -> None:
        if len(self.values) != len(self.mask):
            raise ValueError("values and mask must have the same length")
        if any(wild and value for value, wild in zip(self.values, self.mask)):
            raise ValueError("wildcard cells must be zero-filled in values")

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int | None]:
        for value, wild in zip(self.values, self.mask):
            yield None if wild else value

    def __str__(self) -> str:
        return " ".join("?" if cell is None else f"{cell:02X}" for cell in self)

    @property
    def is_all_wildcard(self) -> bool:
        return all(self.mask)


@dataclass(frozen=True)
class StrippedPattern:
    pattern: WildcardPattern
    strip_count: int


@dataclass(frozen=True)
class AnchorRecord:
    anchor: bytes
    offset: int
    template: WildcardPattern


@dataclass(frozen=True)
class Signature:
    name: str
    pattern: WildcardPattern


@dataclass(frozen=True)
class SignatureSet:
    id: str
    name: str
    description: str
    signatures: tuple[Signature, ...]


@dataclass(frozen=True)
class SignatureHit:
    signature: Signature
    offset: int | None


@dataclass(frozen=True)
class ScanReport:
    source: str
    size: int
    hits: tuple[SignatureHit, ...]

    @property
    def missing(self) -> tuple[SignatureHit, ...]:
        return tuple(hit for hit in self.hits if hit.offset is None)
