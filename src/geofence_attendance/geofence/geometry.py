from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

# Collinearity tolerance in degrees^2; far below GPS precision.
EDGE_EPSILON = 1e-12


@dataclass(frozen=True)
class Coordinate:
    """Signed floating-point degrees."""

    lat: float
    lng: float

    def as_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


def _on_segment(p: Coordinate, a: Coordinate, b: Coordinate) -> bool:
    cross = (b.lat - a.lat) * (p.lng - a.lng) - (b.lng - a.lng) * (p.lat - a.lat)
    if abs(cross) > EDGE_EPSILON:
        return False
    return (
        min(a.lat, b.lat) - EDGE_EPSILON <= p.lat <= max(a.lat, b.lat) + EDGE_EPSILON
        and min(a.lng, b.lng) - EDGE_EPSILON <= p.lng <= max(a.lng, b.lng) + EDGE_EPSILON
    )


def on_boundary(point: Coordinate, ring: Sequence[Coordinate]) -> bool:
    n = len(ring)
    return any(_on_segment(point, ring[i], ring[(i + 1) % n]) for i in range(n))


def point_in_polygon(point: Coordinate, ring: Sequence[Coordinate]) -> bool:
    """Even-odd ray cast; the ring closes implicitly (last vertex -> first).

    Points exactly on an edge or vertex count as outside.
    """

    n = len(ring)
    if n < 3:
        return False
    if on_boundary(point, ring):
        return False

    x, y = point.lat, point.lng
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = ring[i].lat, ring[i].lng
        xj, yj = ring[j].lat, ring[j].lng
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside
