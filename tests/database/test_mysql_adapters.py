from __future__ import annotations

import json
from datetime import datetime

import mysql.connector
import pytest
from mysql.connector import errorcode

from geofence_attendance.attendance.model import RecordLocation
from geofence_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from geofence_attendance.attendance.service import AttendanceService
from geofence_attendance.core.enums import TaskState
from geofence_attendance.core.exceptions import AlreadyCheckedInError, BackendUnavailableError
from geofence_attendance.database.bootstrap import apply_schema, packaged_schema, schema_statements
from geofence_attendance.database.mysql_base import db_cursor
from geofence_attendance.geofence.geometry import Coordinate
from geofence_attendance.geofence.validator import GeofenceValidator
from geofence_attendance.tasks.mysql_task_status_repository import MySQLTaskStatusRepository
from geofence_attendance.tasks.service import TaskStatusGuard
from geofence_attendance.zones.mysql_zone_repository import MySQLZoneRepository
from geofence_attendance.zones.service import ZoneService

NOW = datetime(2026, 3, 2, 8, 30, 0)


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 1
        self.lastrowid = 0

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.error is not None:
            raise self._conn.error

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    database = "geofence_attendance_test"

    def __init__(self, conn=None, connect_error=None):
        self.conn = conn or FakeConnection()
        self.connect_error = connect_error

    def connect(self, *, with_database=True):
        if self.connect_error is not None:
            raise self.connect_error
        return self.conn


def test_db_cursor_commits_and_closes():
    factory = FakeFactory()
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")
    assert factory.conn.committed and factory.conn.closed


def test_connect_failure_is_backend_unavailable():
    factory = FakeFactory(connect_error=mysql.connector.InterfaceError(msg="Can't connect"))
    with pytest.raises(BackendUnavailableError):
        with db_cursor(factory):
            pass


def test_unreachable_store_during_check_in_keeps_the_employee(zones_repo):
    zones = ZoneService(zones_repo)
    zones.create("HQ", [(0, 0), (0, 10), (10, 10), (10, 0)])
    offline = FakeFactory(connect_error=mysql.connector.InterfaceError(msg="Can't connect"))
    svc = AttendanceService(MySQLAttendanceRepository(offline), GeofenceValidator(zones.list_active))

    with pytest.raises(BackendUnavailableError) as exc_info:
        svc.check_in("EMP001", Coordinate(5, 5), now=NOW)

    audit = exc_info.value.audit()
    assert audit["employee_ref"] == "EMP001"
    assert audit["occurred_at"] == NOW.isoformat()
    assert audit["location"] == {"lat": 5.0, "lng": 5.0}


def test_unreachable_store_during_task_update_keeps_the_employee():
    offline = FakeFactory(connect_error=mysql.connector.InterfaceError(msg="Can't connect"))
    guard = TaskStatusGuard(MySQLTaskStatusRepository(offline))

    with pytest.raises(BackendUnavailableError) as exc_info:
        guard.update_status("EMP007", TaskState.TASK_STARTED, now=NOW)
    assert exc_info.value.employee_ref == "EMP007"
    assert exc_info.value.occurred_at == NOW


def test_query_failure_rolls_back_and_is_backend_unavailable():
    factory = FakeFactory(FakeConnection(error=mysql.connector.OperationalError(msg="gone away")))
    with pytest.raises(BackendUnavailableError):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")
    assert factory.conn.rolled_back and factory.conn.closed


def test_duplicate_open_record_maps_to_already_checked_in():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    repo = MySQLAttendanceRepository(FakeFactory(FakeConnection(error=dup)))

    with pytest.raises(AlreadyCheckedInError):
        repo.create_checkin(employee_ref="EMP001", check_in_time=NOW, location=RecordLocation(5, 5, "HQ"))


def test_other_integrity_errors_propagate():
    err = mysql.connector.IntegrityError(msg="Column cannot be null", errno=errorcode.ER_BAD_NULL_ERROR)
    repo = MySQLAttendanceRepository(FakeFactory(FakeConnection(error=err)))

    with pytest.raises(mysql.connector.IntegrityError):
        repo.create_checkin(employee_ref="EMP001", check_in_time=NOW, location=RecordLocation(5, 5))


def test_checkout_update_is_conditional_on_open_record():
    conn = FakeConnection()
    MySQLAttendanceRepository(FakeFactory(conn)).update_checkout(record_id="r1", check_out_time=NOW)

    sql, params = conn.executed[0]
    assert "check_out_time IS NULL" in sql
    assert params == (NOW, "checked_out", "r1", "checked_in")


def test_zone_rows_parse_json_vertices():
    row = {
        "zone_id": "z1",
        "name": "HQ",
        "vertices": json.dumps([{"lat": 0, "lng": 0}, {"lat": 0, "lng": 1}, {"lat": 1, "lng": 1}]),
        "is_active": 1,
        "created_at": NOW,
        "updated_at": NOW,
    }
    zones = MySQLZoneRepository(FakeFactory(FakeConnection(rows=[row]))).list_active()

    assert len(zones) == 1
    assert zones[0].active is True
    assert len(zones[0].vertices) == 3


def test_task_status_upsert_and_read():
    conn = FakeConnection(
        rows=[
            {
                "employee_ref": "EMP001",
                "task_status": "task_started",
                "active_task_ref": "t1",
                "started_at": NOW,
                "updated_at": NOW,
            }
        ]
    )
    status = MySQLTaskStatusRepository(FakeFactory(conn)).get("EMP001")

    assert status.status == TaskState.TASK_STARTED
    assert status.started_at == NOW


def test_schema_ships_inside_the_package():
    assert "uq_attendance_open" in packaged_schema()


def test_schema_splits_into_table_statements():
    statements = schema_statements()

    assert len(statements) == 3
    assert all(s.startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
    assert "uq_attendance_open" in statements[1]


def test_apply_schema_executes_every_statement():
    factory = FakeFactory()
    apply_schema(factory)

    executed = [sql for sql, _ in factory.conn.executed]
    assert executed[0].startswith("CREATE DATABASE IF NOT EXISTS `geofence_attendance_test`")
    assert len(executed) == 4
