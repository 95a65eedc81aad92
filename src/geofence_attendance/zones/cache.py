from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Sequence

from .model import Zone

logger = logging.getLogger(__name__)


class ActiveZoneCache:
    """Read-through snapshot of the active zone set with a bounded age.

    Zones change rarely, so validations may see a snapshot up to
    `max_age_seconds` old. `max_age_seconds=0` re-fetches on every read.
    Writers call `invalidate()` so their own changes are visible at once.
    """

    def __init__(
        self,
        loader: Callable[[], Sequence[Zone]],
        *,
        max_age_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_age_seconds < 0:
            raise ValueError("max_age_seconds must be >= 0")
        self._loader = loader
        self._max_age = float(max_age_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[tuple[Zone, ...]] = None
        self._loaded_at = 0.0
        self._generation = 0

    def get(self) -> tuple[Zone, ...]:
        now = self._clock()
        with self._lock:
            snapshot = self._snapshot
            loaded_at = self._loaded_at
            generation = self._generation
        if snapshot is not None and self._max_age > 0 and now - loaded_at < self._max_age:
            return snapshot

        snapshot = tuple(self._loader())
        with self._lock:
            # A write that invalidated mid-load makes this snapshot stale; do not keep it.
            if self._generation == generation:
                self._snapshot = snapshot
                self._loaded_at = now
                logger.debug("active zone cache refreshed (%d zones)", len(snapshot))
        return snapshot

    def invalidate(self) -> None:
        with self._lock:
            self._generation += 1
            self._snapshot = None
