from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..core.constants import MIN_ZONE_VERTICES
from ..core.enums import GeofenceOutcome
from ..zones.model import Zone
from .geometry import Coordinate, point_in_polygon


@dataclass(frozen=True)
class GeofenceResult:
    outcome: GeofenceOutcome
    zone_name: Optional[str] = None
    zone_id: Optional[str] = None

    @property
    def valid(self) -> bool:
        return self.outcome == GeofenceOutcome.INSIDE

    def as_dict(self) -> dict:
        return {
            "valid": self.valid,
            "outcome": self.outcome.value,
            "zone_name": self.zone_name,
            "zone_id": self.zone_id,
        }


def match_zone(point: Coordinate, zones: Sequence[Zone]) -> GeofenceResult:
    """Return the first zone (in the order given) whose polygon contains `point`.

    Overlapping zones resolve to the earliest one in `zones`. An empty zone
    list is UNCONFIGURED, not OUTSIDE. Zones with fewer than three usable
    vertices never match.
    """

    if not zones:
        return GeofenceResult(GeofenceOutcome.UNCONFIGURED)

    for zone in zones:
        if len(zone.vertices) < MIN_ZONE_VERTICES:
            continue
        if point_in_polygon(point, zone.vertices):
            return GeofenceResult(GeofenceOutcome.INSIDE, zone_name=zone.name, zone_id=zone.zone_id)
    return GeofenceResult(GeofenceOutcome.OUTSIDE)


class GeofenceValidator:
    """Single entry point for containment checks against the active zones."""

    def __init__(self, active_zones: Callable[[], Sequence[Zone]]):
        self._active_zones = active_zones

    def validate(self, point: Coordinate, zones: Optional[Sequence[Zone]] = None) -> GeofenceResult:
        if zones is None:
            zones = self._active_zones()
        return match_zone(point, zones)
