from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Tuple

from ..geofence.geometry import Coordinate


@dataclass(frozen=True)
class Zone:
    """Domain entity: a named geofence polygon.

    `vertices` is the polygon ring in insertion order; the last vertex
    connects back to the first.
    """

    zone_id: str
    name: str
    vertices: Tuple[Coordinate, ...]
    active: bool
    created_at: datetime
    updated_at: datetime

    def as_dict(self) -> dict:
        return {
            "id": self.zone_id,
            "name": self.name,
            "vertices": [v.as_dict() for v in self.vertices],
            "active": self.active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def vertices_to_json(vertices) -> str:
    return json.dumps([{"lat": v.lat, "lng": v.lng} for v in vertices])


def parse_vertices(raw: Any) -> Tuple[Coordinate, ...]:
    """Parse stored coordinates leniently.

    Accepts a list or a JSON string of {"lat", "lng"} objects. Entries that
    are not numeric lat/lng pairs are dropped; undecodable input yields ().
    """

    if not raw:
        return ()
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return ()
    if not isinstance(raw, list):
        return ()

    out: List[Coordinate] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        lat: Optional[Any] = item.get("lat")
        lng: Optional[Any] = item.get("lng")
        # bool is an int subclass; exclude it explicitly
        if isinstance(lat, bool) or isinstance(lng, bool):
            continue
        if isinstance(lat, (int, float)) and isinstance(lng, (int, float)):
            out.append(Coordinate(lat=float(lat), lng=float(lng)))
    return tuple(out)
