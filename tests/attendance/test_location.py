from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from geofence_attendance.attendance.location import LocationAcquirer, Position, StaticLocationProvider
from geofence_attendance.attendance.service import AttendanceService
from geofence_attendance.core.exceptions import CheckInCancelledError, LocationUnavailableError
from geofence_attendance.geofence.validator import GeofenceValidator
from geofence_attendance.zones.service import ZoneService

SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0)]


class SlowProvider:
    """Blocks until released, like a device still searching for a GPS fix."""

    def __init__(self, position=None):
        self.release = threading.Event()
        self.position = position or Position(lat=5, lng=5)

    def get_current_position(self):
        self.release.wait(5)
        return self.position


class DeniedProvider:
    def get_current_position(self):
        raise PermissionError("User denied Geolocation")


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=False, cancel_futures=True)


def test_static_provider_resolves_immediately():
    acquirer = LocationAcquirer(timeout_seconds=1)
    position = acquirer.acquire(StaticLocationProvider(Position(lat=1.5, lng=2.5)))
    assert (position.lat, position.lng) == (1.5, 2.5)


def test_timeout_raises_location_unavailable(executor):
    provider = SlowProvider()
    acquirer = LocationAcquirer(timeout_seconds=0.1, executor=executor)
    try:
        with pytest.raises(LocationUnavailableError) as exc_info:
            acquirer.acquire(provider, employee_ref="EMP001")
        assert exc_info.value.employee_ref == "EMP001"
    finally:
        provider.release.set()


def test_provider_error_becomes_location_unavailable():
    acquirer = LocationAcquirer(timeout_seconds=1)
    with pytest.raises(LocationUnavailableError) as exc_info:
        acquirer.acquire(DeniedProvider())
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_cancel_event_aborts_pending_acquisition(executor):
    provider = SlowProvider()
    cancel = threading.Event()
    acquirer = LocationAcquirer(timeout_seconds=5, executor=executor)
    timer = threading.Timer(0.05, cancel.set)
    timer.start()
    try:
        with pytest.raises(CheckInCancelledError):
            acquirer.acquire(provider, cancel_event=cancel)
    finally:
        timer.cancel()
        provider.release.set()


def test_invalid_timeout_rejected():
    with pytest.raises(ValueError):
        LocationAcquirer(timeout_seconds=0)


def _service(zones_repo, attendance_repo, timeout=0.1, executor=None):
    zones = ZoneService(zones_repo)
    zones.create("Head Office", SQUARE)
    return AttendanceService(
        attendance_repo,
        GeofenceValidator(zones.list_active),
        location=LocationAcquirer(timeout_seconds=timeout, executor=executor),
    )


def test_check_in_with_provider_success(zones_repo, attendance_repo, now):
    svc = _service(zones_repo, attendance_repo)
    record = svc.check_in_with_provider("EMP001", StaticLocationProvider(Position(lat=5, lng=5)), now=now)
    assert record.location.zone_label == "Head Office"
    assert attendance_repo.open_count("EMP001") == 1


def test_check_in_timeout_leaves_no_record(zones_repo, attendance_repo, executor):
    svc = _service(zones_repo, attendance_repo, timeout=0.1, executor=executor)
    provider = SlowProvider()
    try:
        with pytest.raises(LocationUnavailableError):
            svc.check_in_with_provider("EMP001", provider)
    finally:
        provider.release.set()
    assert attendance_repo.all_for("EMP001") == []


def test_check_in_cancelled_leaves_no_record(zones_repo, attendance_repo):
    svc = _service(zones_repo, attendance_repo, timeout=1)
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(CheckInCancelledError):
        svc.check_in_with_provider("EMP001", StaticLocationProvider(Position(lat=5, lng=5)), cancel_event=cancel)
    assert attendance_repo.all_for("EMP001") == []
