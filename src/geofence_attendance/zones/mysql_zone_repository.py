from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json
from ..geofence.geometry import Coordinate
from .model import Zone, parse_vertices, vertices_to_json
from .repository import ZoneRepository

_COLUMNS = "zone_id, name, vertices, is_active, created_at, updated_at"


def _to_zone(r: dict) -> Zone:
    return Zone(
        zone_id=str(r["zone_id"]),
        name=r["name"],
        vertices=parse_vertices(load_json(r["vertices"])),
        active=bool(r["is_active"]),
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


class MySQLZoneRepository(ZoneRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Zone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM zones ORDER BY created_at DESC, zone_id ASC")
            return [_to_zone(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Zone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM zones WHERE is_active=1 ORDER BY created_at ASC, zone_id ASC")
            return [_to_zone(r) for r in fetchall(cur)]

    def get_by_id(self, zone_id: str) -> Optional[Zone]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM zones WHERE zone_id=%s", (str(zone_id),))
            r = fetchone(cur)
            return _to_zone(r) if r else None

    def create(self, *, name: str, vertices: Sequence[Coordinate], now: datetime) -> Zone:
        zone_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO zones(zone_id, name, vertices, is_active, created_at, updated_at)
                VALUES(%s,%s,%s,1,%s,%s)
                """,
                (zone_id, name, vertices_to_json(vertices), now, now),
            )
        return Zone(
            zone_id=zone_id,
            name=name,
            vertices=tuple(vertices),
            active=True,
            created_at=now,
            updated_at=now,
        )

    def update(self, *, zone_id: str, name: str, vertices: Sequence[Coordinate], now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE zones SET name=%s, vertices=%s, updated_at=%s WHERE zone_id=%s",
                (name, vertices_to_json(vertices), now, str(zone_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, zone_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM zones WHERE zone_id=%s", (str(zone_id),))
            return cur.rowcount > 0

    def set_active(self, *, zone_id: str, active: bool, now: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE zones SET is_active=%s, updated_at=%s WHERE zone_id=%s",
                (1 if active else 0, now, str(zone_id)),
            )
            return cur.rowcount > 0
