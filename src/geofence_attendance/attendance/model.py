from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class RecordLocation:
    lat: float
    lng: float
    zone_label: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one check-in/check-out session.

    A record with `check_out_time is None` is the employee's open session.
    """

    record_id: str
    employee_ref: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    location: RecordLocation
    photo_ref: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    @property
    def duration(self) -> Optional[timedelta]:
        if self.check_out_time is None:
            return None
        return self.check_out_time - self.check_in_time

    def as_dict(self) -> dict:
        duration = self.duration
        return {
            "id": self.record_id,
            "employee_ref": self.employee_ref,
            "check_in_time": self.check_in_time.isoformat(),
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "location": {
                "lat": self.location.lat,
                "lng": self.location.lng,
                "zone_label": self.location.zone_label,
            },
            "photo_ref": self.photo_ref,
            "duration_seconds": int(duration.total_seconds()) if duration is not None else None,
        }
