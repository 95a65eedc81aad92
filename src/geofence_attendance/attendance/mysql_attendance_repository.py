from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import AlreadyCheckedInError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord, RecordLocation
from .repository import AttendanceRepository

_COLUMNS = (
    "record_id, employee_ref, check_in_time, check_out_time, status, "
    "location_lat, location_lng, zone_label, photo_ref"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(r["record_id"]),
        employee_ref=str(r["employee_ref"]),
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        location=RecordLocation(
            lat=float(r["location_lat"]),
            lng=float(r["location_lng"]),
            zone_label=r.get("zone_label"),
        ),
        photo_ref=r.get("photo_ref"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE record_id=%s", (str(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_employee(self, employee_ref: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_ref=%s AND check_out_time IS NULL
                """,
                (str(employee_ref),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_employee(self, employee_ref: str, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE employee_ref=%s
                ORDER BY check_in_time DESC
                LIMIT %s
                """,
                (str(employee_ref), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        employee_ref: str,
        check_in_time: datetime,
        location: RecordLocation,
    ) -> AttendanceRecord:
        record_id = str(uuid.uuid4())
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance(
                        record_id, employee_ref, check_in_time, status,
                        location_lat, location_lng, zone_label
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record_id,
                        str(employee_ref),
                        check_in_time,
                        AttendanceStatus.CHECKED_IN.value,
                        location.lat,
                        location.lng,
                        location.zone_label,
                    ),
                )
        except mysql.connector.IntegrityError as exc:
            # uq_attendance_open: another open session exists
            if is_duplicate_key(exc):
                raise AlreadyCheckedInError("Open attendance record already exists", employee_ref=employee_ref) from exc
            raise

        return AttendanceRecord(
            record_id=record_id,
            employee_ref=str(employee_ref),
            check_in_time=check_in_time,
            check_out_time=None,
            status=AttendanceStatus.CHECKED_IN,
            location=location,
        )

    def update_checkout(self, *, record_id: str, check_out_time: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, status=%s
                WHERE record_id=%s AND check_out_time IS NULL AND status=%s
                """,
                (
                    check_out_time,
                    AttendanceStatus.CHECKED_OUT.value,
                    str(record_id),
                    AttendanceStatus.CHECKED_IN.value,
                ),
            )
            return cur.rowcount > 0

    def set_photo_ref(self, *, record_id: str, photo_ref: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET photo_ref=%s WHERE record_id=%s",
                (photo_ref, str(record_id)),
            )
            return cur.rowcount > 0
