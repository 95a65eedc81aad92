from __future__ import annotations

import math
from typing import Any, Iterable, List

from ..core.constants import MIN_ZONE_VERTICES
from ..core.exceptions import ValidationError
from ..geofence.geometry import Coordinate


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def require_coordinate(lat: Any, lng: Any) -> Coordinate:
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid coordinate ({lat!r}, {lng!r})")
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        raise ValidationError(f"Invalid coordinate ({lat!r}, {lng!r})")
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0):
        raise ValidationError(f"Coordinate out of range ({lat_f}, {lng_f})")
    return Coordinate(lat=lat_f, lng=lng_f)


def require_vertices(vertices: Iterable[Any]) -> List[Coordinate]:
    """Normalize a polygon ring given as Coordinates, (lat, lng) pairs or dicts."""

    if vertices is None:
        raise ValidationError("Zone vertices are required")

    ring: List[Coordinate] = []
    for v in vertices:
        if isinstance(v, Coordinate):
            ring.append(require_coordinate(v.lat, v.lng))
        elif isinstance(v, dict):
            ring.append(require_coordinate(v.get("lat"), v.get("lng")))
        else:
            try:
                lat, lng = v
            except (TypeError, ValueError):
                raise ValidationError(f"Invalid vertex {v!r}")
            ring.append(require_coordinate(lat, lng))

    if len(ring) < MIN_ZONE_VERTICES:
        raise ValidationError(f"A zone needs at least {MIN_ZONE_VERTICES} vertices, got {len(ring)}")
    return ring
