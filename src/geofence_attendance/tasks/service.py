from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import TaskState
from ..core.exceptions import LogoutBlockedError, ValidationError, store_failure_context
from .model import TaskStatus
from .repository import TaskStatusRepository

logger = logging.getLogger(__name__)

_ORDER = {
    TaskState.IDLE: 0,
    TaskState.TASK_STARTED: 1,
    TaskState.TASK_IN_PROGRESS: 2,
    TaskState.TASK_COMPLETED: 3,
}

LOGOUT_ALLOWED = frozenset({TaskState.IDLE, TaskState.TASK_COMPLETED})
ACTIVE = frozenset({TaskState.TASK_STARTED, TaskState.TASK_IN_PROGRESS})


def is_allowed_transition(current: TaskState, new: TaskState) -> bool:
    if current == new:
        return True
    if current == TaskState.TASK_COMPLETED and new == TaskState.IDLE:
        return True
    return _ORDER[new] > _ORDER[current]


class TaskStatusGuard:
    """Field-task state per employee, consulted by the logout flow.

    idle -> task_started -> task_in_progress -> task_completed -> idle
    """

    def __init__(self, statuses: TaskStatusRepository):
        self._statuses = statuses

    def get_status(self, employee_ref: str) -> TaskStatus:
        return self._row(employee_ref) or TaskStatus(employee_ref=employee_ref, status=TaskState.IDLE)

    def update_status(
        self,
        employee_ref: str,
        new_status: TaskState | str,
        task_ref: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> bool:
        employee_ref = require_non_empty(employee_ref, "Employee")
        try:
            new_status = TaskState(new_status)
        except ValueError:
            raise ValidationError(f"Unknown task status {new_status!r}", employee_ref=employee_ref)

        now = now or now_local()
        row = self._row(employee_ref, now=now)
        current = row or TaskStatus(employee_ref=employee_ref, status=TaskState.IDLE)
        if not is_allowed_transition(current.status, new_status):
            logger.warning(
                "task transition refused employee=%s %s -> %s",
                employee_ref,
                current.status.value,
                new_status.value,
            )
            return False
        if row is None and new_status == TaskState.IDLE:
            # No row until the first move away from idle.
            return True

        if new_status == TaskState.IDLE:
            started_at = None
            active_task_ref = None
        elif current.status == TaskState.IDLE and new_status == TaskState.TASK_STARTED:
            started_at = now
            active_task_ref = task_ref
        else:
            started_at = current.started_at
            active_task_ref = task_ref or current.active_task_ref

        with store_failure_context(employee_ref=employee_ref, occurred_at=now):
            self._statuses.upsert(
                TaskStatus(
                    employee_ref=employee_ref,
                    status=new_status,
                    active_task_ref=active_task_ref,
                    started_at=started_at,
                    updated_at=now,
                )
            )
        logger.info("task status employee=%s %s -> %s", employee_ref, current.status.value, new_status.value)
        return True

    def can_logout(self, employee_ref: str) -> bool:
        return self.get_status(employee_ref).status in LOGOUT_ALLOWED

    def is_task_active(self, employee_ref: str) -> bool:
        return self.get_status(employee_ref).status in ACTIVE

    def ensure_can_logout(self, employee_ref: str) -> None:
        """Raise with a user-facing explanation when logout must be blocked."""

        status = self.get_status(employee_ref)
        if status.status in LOGOUT_ALLOWED:
            return
        logger.info("logout blocked employee=%s status=%s", employee_ref, status.status.value)
        raise LogoutBlockedError(
            "You have an active task in progress. Please complete your task before logging out.",
            employee_ref=employee_ref,
        )

    def _row(self, employee_ref: str, *, now: Optional[datetime] = None) -> Optional[TaskStatus]:
        with store_failure_context(employee_ref=employee_ref, occurred_at=now or now_local()):
            return self._statuses.get(employee_ref)
