from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance record state as stored in the database."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    ON_BREAK = "on_break"


class TaskState(str, Enum):
    """Field-task progress tracked per employee for the logout guard."""

    IDLE = "idle"
    TASK_STARTED = "task_started"
    TASK_IN_PROGRESS = "task_in_progress"
    TASK_COMPLETED = "task_completed"


class GeofenceOutcome(str, Enum):
    INSIDE = "inside"
    OUTSIDE = "outside"
    UNCONFIGURED = "unconfigured"


class UnconfiguredZonePolicy(str, Enum):
    """What check-in does when no active zone exists at all."""

    REJECT = "reject"
    ALLOW = "allow"
