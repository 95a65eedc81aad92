from __future__ import annotations

from typing import Optional, Protocol

from .model import TaskStatus


class TaskStatusRepository(Protocol):
    def get(self, employee_ref: str) -> Optional[TaskStatus]:
        raise NotImplementedError

    def upsert(self, status: TaskStatus) -> None:
        """Create or replace the employee's single status row."""

        raise NotImplementedError
