"""Hyperscan-backed multi-literal automaton over pattern anchors."""

from __future__ import annotations

import logging
from collections.abc import Buffer, Callable, Sequence

import hyperscan

from wildscan.core.errors import AutomatonBuildError

LOGGER = logging.getLogger(__name__)


def _literal_expression(anchor: bytes) -> bytes:
    # every byte escaped so regex metacharacters and NULs stay literal
    return b"".join(b"\\x%02x" % byte for byte in anchor)


class AnchorAutomaton:
    """Compiled Hyperscan database for anchor literals.

    Ids in the database are the indices of ``anchors``. Empty anchors are not
    compiled and therefore never produce hits.
    """

    def __init__(self, anchors: Sequence[bytes]) -> None:
        self._anchors = list(anchors)
        self._db: hyperscan.Database | None = None

        ids = [index for index, anchor in enumerate(self._anchors) if anchor]
        if not ids:
            LOGGER.debug("No non-empty anchors among %d patterns; automaton is empty", len(self._anchors))
            return

        expressions = [_literal_expression(self._anchors[index]) for index in ids]
        # BLOCK mode for single-buffer scanning
        db = hyperscan.Database(mode=hyperscan.HS_MODE_BLOCK)
        try:
            db.compile(
                expressions=expressions,
                ids=ids,
                elements=len(expressions),
                flags=[0] * len(expressions),
            )
        except hyperscan.error as exc:
            raise AutomatonBuildError(
                f"Could not build automaton for {len(expressions)} anchors: {exc}"
            ) from exc
        self._db = db
        LOGGER.debug("Compiled automaton for %d of %d anchors", len(ids), len(self._anchors))

    @property
    def is_empty(self) -> bool:
        return self._db is None

    def scan(self, haystack: Buffer, on_hit: Callable[[int, int], bool]) -> None:
        """Feed every anchor occurrence in ``haystack`` to ``on_hit``.

        ``on_hit`` receives ``(pattern_index, start)`` and returns ``True`` to
        stop the scan. Hyperscan reports hits in end-offset order; anchors are
        fixed-length literals, so each pattern's hits arrive in start order.
        Overlapping occurrences are all reported.
        """
        if self._db is None:
            return

        # wrap buffer protocol objects in memoryview for zerocopy access
        if not isinstance(haystack, (bytes, memoryview)):
            haystack = memoryview(haystack)
        if len(haystack) == 0:
            return

        stopped = False

        def on_match(
            id_: int,
            start: int,
            end: int,
            flags: int,
            context: object,
        ) -> int:
            nonlocal stopped
            if on_hit(id_, end - len(self._anchors[id_])):
                stopped = True
                return 1
            return 0

        try:
            self._db.scan(haystack, match_event_handler=on_match)
        except hyperscan.error:
            # a non-zero callback return surfaces as a scan-terminated error
            if not stopped:
                raise
