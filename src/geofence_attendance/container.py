from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .attendance.location import LocationAcquirer
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.photos import LocalObjectStorage, ObjectStorage, PhotoAttacher
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import (
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_LOCATION_TIMEOUT_SECONDS,
    DEFAULT_ZONE_CACHE_MAX_AGE_SECONDS,
)
from .core.enums import UnconfiguredZonePolicy
from .database.connection import DatabaseConnection, DBConfig
from .geofence.validator import GeofenceValidator
from .tasks.mysql_task_status_repository import MySQLTaskStatusRepository
from .tasks.repository import TaskStatusRepository
from .tasks.service import TaskStatusGuard
from .zones.cache import ActiveZoneCache
from .zones.mysql_zone_repository import MySQLZoneRepository
from .zones.repository import ZoneRepository
from .zones.service import ZoneService


@dataclass(frozen=True)
class CoreOptions:
    zone_cache_max_age_seconds: float = DEFAULT_ZONE_CACHE_MAX_AGE_SECONDS
    location_timeout_seconds: float = DEFAULT_LOCATION_TIMEOUT_SECONDS
    unconfigured_zone_policy: UnconfiguredZonePolicy = UnconfiguredZonePolicy.REJECT
    photo_storage_dir: str = "storage/attendance-photos"
    photo_upload_workers: int = 2
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_settings(cls, settings) -> "CoreOptions":
        return cls(
            zone_cache_max_age_seconds=float(
                getattr(settings, "ZONE_CACHE_MAX_AGE_SECONDS", DEFAULT_ZONE_CACHE_MAX_AGE_SECONDS)
            ),
            location_timeout_seconds=float(
                getattr(settings, "LOCATION_TIMEOUT_SECONDS", DEFAULT_LOCATION_TIMEOUT_SECONDS)
            ),
            unconfigured_zone_policy=UnconfiguredZonePolicy(
                getattr(settings, "UNCONFIGURED_ZONE_POLICY", UnconfiguredZonePolicy.REJECT.value)
            ),
            photo_storage_dir=str(getattr(settings, "PHOTO_STORAGE_DIR", cls.photo_storage_dir)),
            photo_upload_workers=int(getattr(settings, "PHOTO_UPLOAD_WORKERS", cls.photo_upload_workers)),
            history_limit=int(getattr(settings, "HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT)),
        )


@dataclass(frozen=True)
class Container:
    zones_repo: ZoneRepository
    attendance_repo: AttendanceRepository
    task_status_repo: TaskStatusRepository

    zone_cache: ActiveZoneCache
    zone_service: ZoneService
    geofence: GeofenceValidator
    attendance_service: AttendanceService
    task_guard: TaskStatusGuard

    history_limit: int = DEFAULT_HISTORY_LIMIT
    conn: Optional[DatabaseConnection] = None
    photo_executor: Optional[Executor] = None

    def close(self) -> None:
        """Drain pending photo uploads; call once at process shutdown."""

        if self.photo_executor is not None:
            self.photo_executor.shutdown(wait=True)


def assemble(
    *,
    zones_repo: ZoneRepository,
    attendance_repo: AttendanceRepository,
    task_status_repo: TaskStatusRepository,
    options: CoreOptions,
    storage: Optional[ObjectStorage] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    zone_cache = ActiveZoneCache(zones_repo.list_active, max_age_seconds=options.zone_cache_max_age_seconds)
    zone_service = ZoneService(zones_repo, cache=zone_cache)
    geofence = GeofenceValidator(zone_service.list_active)

    photo_executor: Optional[Executor] = None
    if options.photo_upload_workers > 0:
        photo_executor = ThreadPoolExecutor(
            max_workers=options.photo_upload_workers, thread_name_prefix="photo-upload"
        )
    photos = PhotoAttacher(
        storage or LocalObjectStorage(Path(options.photo_storage_dir)),
        attendance_repo,
        executor=photo_executor,
    )

    attendance_service = AttendanceService(
        attendance_repo,
        geofence,
        photos=photos,
        location=LocationAcquirer(timeout_seconds=options.location_timeout_seconds),
        unconfigured_policy=options.unconfigured_zone_policy,
    )

    return Container(
        zones_repo=zones_repo,
        attendance_repo=attendance_repo,
        task_status_repo=task_status_repo,
        zone_cache=zone_cache,
        zone_service=zone_service,
        geofence=geofence,
        attendance_service=attendance_service,
        task_guard=TaskStatusGuard(task_status_repo),
        history_limit=options.history_limit,
        conn=conn,
        photo_executor=photo_executor,
    )


def build_container(*, db_config: dict, options: Optional[CoreOptions] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        zones_repo=MySQLZoneRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        task_status_repo=MySQLTaskStatusRepository(conn),
        options=options or CoreOptions(),
        conn=conn,
    )
