from __future__ import annotations

import pytest

from geofence_attendance.container import CoreOptions, assemble
from geofence_attendance.geofence.geometry import Coordinate

SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0)]


def build(zones_repo, attendance_repo, task_repo, storage, workers):
    return assemble(
        zones_repo=zones_repo,
        attendance_repo=attendance_repo,
        task_status_repo=task_repo,
        options=CoreOptions(zone_cache_max_age_seconds=0, photo_upload_workers=workers),
        storage=storage,
    )


def test_close_drains_background_photo_uploads(zones_repo, attendance_repo, task_repo, storage, now):
    container = build(zones_repo, attendance_repo, task_repo, storage, workers=1)
    container.zone_service.create("HQ", SQUARE)

    record = container.attendance_service.check_in("EMP001", Coordinate(5, 5), b"\xff\xd8jpeg", now=now)
    container.close()

    assert list(storage.uploads.values()) == [b"\xff\xd8jpeg"]
    assert attendance_repo.get_by_id(record.record_id).photo_ref is not None
    with pytest.raises(RuntimeError):
        container.photo_executor.submit(print)


def test_close_without_upload_workers_is_a_no_op(zones_repo, attendance_repo, task_repo, storage):
    container = build(zones_repo, attendance_repo, task_repo, storage, workers=0)

    assert container.photo_executor is None
    container.close()
