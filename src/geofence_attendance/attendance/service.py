from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LOCATION_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, GeofenceOutcome, UnconfiguredZonePolicy
from ..core.exceptions import (
    AlreadyCheckedInError,
    CheckInCancelledError,
    NoOpenRecordError,
    OutsideZoneError,
    ZonesNotConfiguredError,
    store_failure_context,
)
from ..geofence.geometry import Coordinate
from ..geofence.validator import GeofenceValidator
from .location import LocationAcquirer, LocationProvider
from .model import AttendanceRecord, RecordLocation
from .photos import PhotoAttacher, PhotoPayload
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Per-employee check-in/check-out lifecycle gated by the geofence.

    unchecked -> checked_in -> checked_out. `on_break` is only ever set by
    an administrative override outside this service.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        geofence: GeofenceValidator,
        *,
        photos: Optional[PhotoAttacher] = None,
        location: Optional[LocationAcquirer] = None,
        unconfigured_policy: UnconfiguredZonePolicy = UnconfiguredZonePolicy.REJECT,
    ):
        self._attendance = attendance
        self._geofence = geofence
        self._photos = photos
        self._location = location or LocationAcquirer(timeout_seconds=DEFAULT_LOCATION_TIMEOUT_SECONDS)
        self._unconfigured_policy = UnconfiguredZonePolicy(unconfigured_policy)

    def check_in(
        self,
        employee_ref: str,
        location: Coordinate,
        photo: Optional[PhotoPayload] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        employee_ref = require_non_empty(employee_ref, "Employee")

        with store_failure_context(employee_ref=employee_ref, occurred_at=now, location=location):
            self._ensure_no_open_record(employee_ref, location, now)
            result = self._geofence.validate(location)

        if result.outcome == GeofenceOutcome.UNCONFIGURED:
            if self._unconfigured_policy == UnconfiguredZonePolicy.REJECT:
                logger.info("check-in rejected, no active zones employee=%s", employee_ref)
                raise ZonesNotConfiguredError(
                    "No work zones are configured; check-in is not possible",
                    employee_ref=employee_ref,
                    occurred_at=now,
                    location=location,
                )
        elif not result.valid:
            logger.info(
                "check-in rejected outside zones employee=%s lat=%s lng=%s",
                employee_ref,
                location.lat,
                location.lng,
            )
            raise OutsideZoneError(
                "You are not in a work zone. Please come to the zone and then check in.",
                employee_ref=employee_ref,
                occurred_at=now,
                location=location,
            )

        with store_failure_context(
            employee_ref=employee_ref, occurred_at=now, location=location, zone=result.zone_name
        ):
            try:
                record = self._attendance.create_checkin(
                    employee_ref=employee_ref,
                    check_in_time=now,
                    location=RecordLocation(lat=location.lat, lng=location.lng, zone_label=result.zone_name),
                )
            except AlreadyCheckedInError as exc:
                raise AlreadyCheckedInError(
                    "You are already checked in",
                    employee_ref=employee_ref,
                    occurred_at=now,
                    location=location,
                    zone=result.zone_name,
                ) from exc

        logger.info("checked in employee=%s record=%s zone=%s", employee_ref, record.record_id, result.zone_name)

        if photo and self._photos is not None:
            path = self._photos.attach(record, photo, now=now)
            if path:
                record = replace(record, photo_ref=path)
        return record

    def check_in_with_provider(
        self,
        employee_ref: str,
        provider: LocationProvider,
        photo: Optional[PhotoPayload] = None,
        *,
        cancel_event: Optional[threading.Event] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Resolve the location under the configured timeout, then check in."""

        employee_ref = require_non_empty(employee_ref, "Employee")
        started = now or now_local()
        with store_failure_context(employee_ref=employee_ref, occurred_at=started):
            self._ensure_no_open_record(employee_ref, None, started)

        position = self._location.acquire(provider, employee_ref=employee_ref, cancel_event=cancel_event)
        if cancel_event is not None and cancel_event.is_set():
            raise CheckInCancelledError("Check-in cancelled", employee_ref=employee_ref, location=position.coordinate)

        return self.check_in(employee_ref, position.coordinate, photo, now=now)

    def check_out(self, record: AttendanceRecord, *, now: Optional[datetime] = None) -> AttendanceRecord:
        """Close an open session. The geofence is not consulted on the way out."""

        now = now or now_local()
        if record.status != AttendanceStatus.CHECKED_IN or record.check_out_time is not None:
            raise NoOpenRecordError(
                "This attendance record is not checked in",
                employee_ref=record.employee_ref,
                occurred_at=now,
            )

        # Clock skew between devices must not produce a negative duration.
        check_out_time = max(now, record.check_in_time)
        with store_failure_context(employee_ref=record.employee_ref, occurred_at=now):
            closed = self._attendance.update_checkout(record_id=record.record_id, check_out_time=check_out_time)
        if not closed:
            raise NoOpenRecordError(
                "This attendance record was already closed",
                employee_ref=record.employee_ref,
                occurred_at=now,
            )

        logger.info("checked out employee=%s record=%s", record.employee_ref, record.record_id)
        return replace(record, check_out_time=check_out_time, status=AttendanceStatus.CHECKED_OUT)

    def check_out_employee(self, employee_ref: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        record = self.get_open_record(employee_ref, now=now)
        if not record:
            raise NoOpenRecordError(
                "You have not checked in",
                employee_ref=employee_ref,
                occurred_at=now or now_local(),
            )
        return self.check_out(record, now=now)

    def get_open_record(self, employee_ref: str, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        with store_failure_context(employee_ref=employee_ref, occurred_at=now or now_local()):
            return self._attendance.get_open_for_employee(employee_ref)

    def history(self, employee_ref: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        with store_failure_context(employee_ref=employee_ref, occurred_at=now_local()):
            return list(self._attendance.get_recent_for_employee(employee_ref, int(limit)))

    def _ensure_no_open_record(self, employee_ref: str, location: Optional[Coordinate], now: datetime) -> None:
        # Fast path only; the store's conditional insert is what closes the race.
        if self._attendance.get_open_for_employee(employee_ref):
            raise AlreadyCheckedInError(
                "You are already checked in",
                employee_ref=employee_ref,
                occurred_at=now,
                location=location,
            )
