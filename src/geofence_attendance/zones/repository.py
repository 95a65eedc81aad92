from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..geofence.geometry import Coordinate
from .model import Zone


class ZoneRepository(Protocol):
    def list_all(self) -> Sequence[Zone]:
        """All zones, newest first."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Zone]:
        """Active zones in a stable order (oldest first, then id)."""

        raise NotImplementedError

    def get_by_id(self, zone_id: str) -> Optional[Zone]:
        raise NotImplementedError

    def create(self, *, name: str, vertices: Sequence[Coordinate], now: datetime) -> Zone:
        raise NotImplementedError

    def update(self, *, zone_id: str, name: str, vertices: Sequence[Coordinate], now: datetime) -> bool:
        raise NotImplementedError

    def delete(self, *, zone_id: str) -> bool:
        raise NotImplementedError

    def set_active(self, *, zone_id: str, active: bool, now: datetime) -> bool:
        raise NotImplementedError
