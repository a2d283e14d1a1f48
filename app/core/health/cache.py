"""Time-bounded cache for the aggregated status snapshot."""

import asyncio
import logging
import time
from typing import Callable, Optional, Tuple

from .models import HealthSnapshot
from .service import StatusAggregator

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY = 120.0  # seconds


class StatusCache:
    """Single shared slot holding the latest snapshot.

    The slot is a ``(snapshot, computed_at)`` tuple replaced in one
    assignment, so readers never see a half-written entry. Recomputes are
    serialized by a lock; callers arriving while one is in flight wait for it
    and reuse its result.
    """

    def __init__(
        self,
        aggregator: StatusAggregator,
        validity: float = DEFAULT_VALIDITY,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.aggregator = aggregator
        self.validity = validity
        self._clock = clock
        self._slot: Optional[Tuple[HealthSnapshot, float]] = None
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> Optional[HealthSnapshot]:
        slot = self._slot
        return slot[0] if slot else None

    @property
    def last_computed(self) -> Optional[float]:
        slot = self._slot
        return slot[1] if slot else None

    def _fresh_snapshot(self) -> Optional[HealthSnapshot]:
        slot = self._slot
        if slot is None:
            return None
        snapshot, computed_at = slot
        # Age must stay below the window; never compare against a future instant
        if self._clock() - computed_at < self.validity:
            return snapshot
        return None

    async def get_or_recompute(self) -> HealthSnapshot:
        """Return the cached snapshot while fresh, recomputing otherwise."""
        snapshot = self._fresh_snapshot()
        if snapshot is not None:
            return snapshot

        async with self._lock:
            snapshot = self._fresh_snapshot()
            if snapshot is not None:
                return snapshot

            logger.debug("Status cache stale, recomputing")
            snapshot = await self.aggregator.recompute()
            self._slot = (snapshot, self._clock())
            return snapshot
