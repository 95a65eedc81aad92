from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_vertices
from ..core.exceptions import NotFoundError
from .cache import ActiveZoneCache
from .model import Zone
from .repository import ZoneRepository

logger = logging.getLogger(__name__)


class ZoneService:
    """Zone catalogue: CRUD plus the active-zone read path used by the geofence."""

    def __init__(self, zones: ZoneRepository, *, cache: Optional[ActiveZoneCache] = None):
        self._zones = zones
        self._cache = cache

    def create(self, name: str, vertices: Iterable[Any], *, now: Optional[datetime] = None) -> Zone:
        name = require_non_empty(name, "Zone name")
        ring = require_vertices(vertices)

        zone = self._zones.create(name=name, vertices=ring, now=now or now_local())
        self._invalidate()
        logger.info("zone created id=%s name=%r vertices=%d", zone.zone_id, zone.name, len(ring))
        return zone

    def update(self, zone_id: str, name: str, vertices: Iterable[Any], *, now: Optional[datetime] = None) -> Zone:
        name = require_non_empty(name, "Zone name")
        ring = require_vertices(vertices)
        self._require(zone_id)

        self._zones.update(zone_id=zone_id, name=name, vertices=ring, now=now or now_local())
        self._invalidate()
        logger.info("zone updated id=%s name=%r vertices=%d", zone_id, name, len(ring))
        return self._require(zone_id)

    def delete(self, zone_id: str) -> bool:
        """Hard delete. Deleting an unknown or already deleted zone is a no-op."""

        removed = self._zones.delete(zone_id=zone_id)
        self._invalidate()
        if removed:
            logger.info("zone deleted id=%s", zone_id)
        return removed

    def set_active(self, zone_id: str, active: bool, *, now: Optional[datetime] = None) -> Zone:
        zone = self._require(zone_id)
        if zone.active != bool(active):
            self._zones.set_active(zone_id=zone_id, active=bool(active), now=now or now_local())
            logger.info("zone %s id=%s", "activated" if active else "deactivated", zone_id)
        self._invalidate()
        return self._require(zone_id)

    def get(self, zone_id: str) -> Zone:
        return self._require(zone_id)

    def list_all(self) -> Sequence[Zone]:
        return list(self._zones.list_all())

    def list_active(self) -> Sequence[Zone]:
        if self._cache is not None:
            return self._cache.get()
        return tuple(self._zones.list_active())

    def _require(self, zone_id: str) -> Zone:
        zone = self._zones.get_by_id(zone_id)
        if not zone:
            raise NotFoundError(f"Zone {zone_id} does not exist", zone=zone_id)
        return zone

    def _invalidate(self) -> None:
        if self._cache is not None:
            self._cache.invalidate()
