from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, RecordLocation


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_ref: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_employee(self, employee_ref: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_ref: str,
        check_in_time: datetime,
        location: RecordLocation,
    ) -> AttendanceRecord:
        """Insert a checked-in record only if the employee has no open record.

        Must be atomic at the store layer (unique constraint or conditional
        insert) and raise AlreadyCheckedInError when the condition fails.
        """

        raise NotImplementedError

    def update_checkout(self, *, record_id: str, check_out_time: datetime) -> bool:
        """Close an open record. Returns False if it was not open."""

        raise NotImplementedError

    def set_photo_ref(self, *, record_id: str, photo_ref: str) -> bool:
        raise NotImplementedError
