from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Protocol

from ..common.datetime_utils import now_local
from ..core.exceptions import CheckInCancelledError, LocationUnavailableError
from ..geofence.geometry import Coordinate

logger = logging.getLogger(__name__)

# How often a pending acquisition re-checks the cancel event.
_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class Position:
    lat: float
    lng: float
    timestamp: datetime = field(default_factory=now_local)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class LocationProvider(Protocol):
    def get_current_position(self) -> Position:
        """Block until a fix is available; raise on denial or failure."""

        raise NotImplementedError


class StaticLocationProvider:
    """Provider for a position the client already resolved (e.g. posted in a request)."""

    def __init__(self, position: Position):
        self._position = position

    def get_current_position(self) -> Position:
        return self._position


class LocationAcquirer:
    """Runs a provider with a bounded wait and an optional cancel signal.

    Nothing is written during acquisition, so a timeout or a cancellation
    leaves no state behind. A provider call that outlives the timeout keeps
    running on its worker thread; its result is discarded.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        self._timeout = float(timeout_seconds)
        self._executor = executor
        self._clock = clock

    def acquire(
        self,
        provider: LocationProvider,
        *,
        employee_ref: Optional[str] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Position:
        executor = self._executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="location")
        try:
            future = executor.submit(provider.get_current_position)
            deadline = self._clock() + self._timeout
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    future.cancel()
                    raise CheckInCancelledError("Check-in cancelled while waiting for location", employee_ref=employee_ref)

                remaining = deadline - self._clock()
                if remaining <= 0:
                    future.cancel()
                    logger.info("location acquisition timed out employee=%s after %.1fs", employee_ref, self._timeout)
                    raise LocationUnavailableError(
                        f"Location not available within {self._timeout:g}s", employee_ref=employee_ref
                    )

                done, _ = wait([future], timeout=min(remaining, _POLL_SECONDS))
                if done:
                    break
        finally:
            if self._executor is None:
                executor.shutdown(wait=False, cancel_futures=True)

        try:
            return future.result()
        except LocationUnavailableError:
            raise
        except Exception as exc:
            logger.info("location provider failed employee=%s: %s", employee_ref, exc)
            raise LocationUnavailableError(f"Location unavailable: {exc}", employee_ref=employee_ref) from exc
