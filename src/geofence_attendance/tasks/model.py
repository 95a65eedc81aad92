from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import TaskState


@dataclass(frozen=True)
class TaskStatus:
    """One row per employee; a missing row reads as idle."""

    employee_ref: str
    status: TaskState
    active_task_ref: Optional[str] = None
    started_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def as_dict(self) -> dict:
        return {
            "employee_ref": self.employee_ref,
            "status": self.status.value,
            "active_task_ref": self.active_task_ref,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
