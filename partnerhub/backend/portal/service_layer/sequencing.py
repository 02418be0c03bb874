# portal/service_layer/sequencing.py
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from ..schemas import CanonicalPage

log = logging.getLogger(__name__)


class FetchState(str, Enum):
    idle = "idle"
    fetching = "fetching"
    success = "success"
    failed = "failed"


@dataclass(frozen=True)
class FetchSnapshot:
    state: FetchState
    seq: int
    page: CanonicalPage | None = None
    error: Exception | None = None


class ListingFetchSequencer:
    """
    Caller-side state for listing fetches: Idle -> Fetching -> Success | Failed.

    Every fetch gets a monotonically increasing sequence number. A completion is
    applied only if its number is still the latest issued, so a slow older
    request can never overwrite the result of a newer one. Fetches may overlap
    and may be started again from any state.
    """

    def __init__(self) -> None:
        self._issued = 0
        self._snapshot = FetchSnapshot(state=FetchState.idle, seq=0)

    @property
    def snapshot(self) -> FetchSnapshot:
        return self._snapshot

    @property
    def state(self) -> FetchState:
        return self._snapshot.state

    def begin(self) -> int:
        self._issued += 1
        prev = self._snapshot
        # Keep the last good page visible while the new fetch is in flight.
        self._snapshot = FetchSnapshot(state=FetchState.fetching, seq=self._issued, page=prev.page)
        return self._issued

    def is_latest(self, seq: int) -> bool:
        return seq == self._issued

    def complete(self, seq: int, page: CanonicalPage) -> bool:
        if not self.is_latest(seq):
            log.debug("discarding stale fetch result seq=%d latest=%d", seq, self._issued)
            return False
        self._snapshot = FetchSnapshot(state=FetchState.success, seq=seq, page=page)
        return True

    def fail(self, seq: int, error: Exception) -> bool:
        if not self.is_latest(seq):
            log.debug("discarding stale fetch error seq=%d latest=%d: %r", seq, self._issued, error)
            return False
        self._snapshot = FetchSnapshot(state=FetchState.failed, seq=seq, page=self._snapshot.page, error=error)
        return True

    async def run(self, fetch: Callable[[], Awaitable[CanonicalPage]]) -> bool:
        """Run one fetch through the state machine. Returns True if its outcome was applied."""
        seq = self.begin()
        try:
            page = await fetch()
        except Exception as e:
            return self.fail(seq, e)
        return self.complete(seq, page)
