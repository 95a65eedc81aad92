from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional

import pytest

from geofence_attendance.attendance.model import AttendanceRecord, RecordLocation
from geofence_attendance.core.enums import AttendanceStatus
from geofence_attendance.core.exceptions import AlreadyCheckedInError, BackendUnavailableError
from geofence_attendance.tasks.model import TaskStatus
from geofence_attendance.zones.model import Zone


class InMemoryZones:
    def __init__(self):
        self._zones: dict[str, Zone] = {}
        self._ids = itertools.count(1)
        self.list_active_calls = 0

    def list_all(self):
        return sorted(self._zones.values(), key=lambda z: (z.created_at, z.zone_id), reverse=True)

    def list_active(self):
        self.list_active_calls += 1
        return [z for z in self._zones.values() if z.active]

    def get_by_id(self, zone_id: str) -> Optional[Zone]:
        return self._zones.get(zone_id)

    def create(self, *, name, vertices, now):
        zone = Zone(
            zone_id=f"zone-{next(self._ids)}",
            name=name,
            vertices=tuple(vertices),
            active=True,
            created_at=now,
            updated_at=now,
        )
        self._zones[zone.zone_id] = zone
        return zone

    def update(self, *, zone_id, name, vertices, now):
        zone = self._zones.get(zone_id)
        if not zone:
            return False
        self._zones[zone_id] = replace(zone, name=name, vertices=tuple(vertices), updated_at=now)
        return True

    def delete(self, *, zone_id):
        return self._zones.pop(zone_id, None) is not None

    def set_active(self, *, zone_id, active, now):
        zone = self._zones.get(zone_id)
        if not zone:
            return False
        self._zones[zone_id] = replace(zone, active=active, updated_at=now)
        return True


class InMemoryAttendance:
    """Conditional insert under a lock, like the unique index on the real table."""

    def __init__(self):
        self._records: dict[str, AttendanceRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self.fail_writes = False

    def get_by_id(self, record_id):
        return self._records.get(record_id)

    def get_open_for_employee(self, employee_ref):
        for r in list(self._records.values()):
            if r.employee_ref == employee_ref and r.check_out_time is None:
                return r
        return None

    def open_count(self, employee_ref) -> int:
        return sum(1 for r in list(self._records.values()) if r.employee_ref == employee_ref and r.check_out_time is None)

    def all_for(self, employee_ref):
        return [r for r in list(self._records.values()) if r.employee_ref == employee_ref]

    def get_recent_for_employee(self, employee_ref, limit):
        items = self.all_for(employee_ref)
        items.sort(key=lambda r: r.check_in_time, reverse=True)
        return items[:limit]

    def create_checkin(self, *, employee_ref, check_in_time: datetime, location: RecordLocation):
        if self.fail_writes:
            raise BackendUnavailableError("store offline")
        with self._lock:
            if self.open_count(employee_ref):
                raise AlreadyCheckedInError("duplicate open record")
            rec = AttendanceRecord(
                record_id=f"att-{next(self._ids)}",
                employee_ref=employee_ref,
                check_in_time=check_in_time,
                check_out_time=None,
                status=AttendanceStatus.CHECKED_IN,
                location=location,
            )
            self._records[rec.record_id] = rec
            return rec

    def update_checkout(self, *, record_id, check_out_time):
        with self._lock:
            rec = self._records.get(record_id)
            if not rec or rec.check_out_time is not None or rec.status != AttendanceStatus.CHECKED_IN:
                return False
            self._records[record_id] = replace(rec, check_out_time=check_out_time, status=AttendanceStatus.CHECKED_OUT)
            return True

    def set_photo_ref(self, *, record_id, photo_ref):
        rec = self._records.get(record_id)
        if not rec:
            return False
        self._records[record_id] = replace(rec, photo_ref=photo_ref)
        return True


class InMemoryTaskStatuses:
    def __init__(self):
        self.rows: dict[str, TaskStatus] = {}

    def get(self, employee_ref):
        return self.rows.get(employee_ref)

    def upsert(self, status: TaskStatus) -> None:
        self.rows[status.employee_ref] = status


class RecordingStorage:
    def __init__(self, *, fail: bool = False):
        self.fail = fail
        self.uploads: dict[str, bytes] = {}

    def upload(self, filename: str, data: bytes) -> str:
        if self.fail:
            raise BackendUnavailableError("bucket unavailable")
        self.uploads[filename] = data
        return f"attendance-photos/{filename}"


@pytest.fixture
def zones_repo():
    return InMemoryZones()


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def task_repo():
    return InMemoryTaskStatuses()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def now():
    return datetime(2026, 3, 2, 8, 30, 0)
