from geofence_attendance.geofence.geometry import Coordinate
from geofence_attendance.zones.model import parse_vertices, vertices_to_json


def test_parse_vertices_from_json_string():
    raw = '[{"lat": 1.5, "lng": 2}, {"lat": 3, "lng": 4}]'
    assert parse_vertices(raw) == (Coordinate(1.5, 2.0), Coordinate(3.0, 4.0))


def test_parse_vertices_drops_malformed_entries():
    raw = [{"lat": 1, "lng": 2}, {"lat": "x", "lng": 2}, {"lat": 1}, "junk", {"lat": True, "lng": 1}]
    assert parse_vertices(raw) == (Coordinate(1.0, 2.0),)


def test_parse_vertices_handles_garbage():
    assert parse_vertices(None) == ()
    assert parse_vertices("not json") == ()
    assert parse_vertices({"lat": 1, "lng": 2}) == ()


def test_json_roundtrip_keeps_ring_order():
    ring = (Coordinate(0, 0), Coordinate(0, 10), Coordinate(10, 10))
    assert parse_vertices(vertices_to_json(ring)) == ring
