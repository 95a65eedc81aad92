from __future__ import annotations

from typing import Optional

from ..core.enums import TaskState
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import TaskStatus
from .repository import TaskStatusRepository


class MySQLTaskStatusRepository(TaskStatusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_ref: str) -> Optional[TaskStatus]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_ref, task_status, active_task_ref, started_at, updated_at
                FROM employee_task_status
                WHERE employee_ref=%s
                """,
                (str(employee_ref),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return TaskStatus(
                employee_ref=str(r["employee_ref"]),
                status=TaskState(r["task_status"] or TaskState.IDLE.value),
                active_task_ref=r.get("active_task_ref"),
                started_at=r.get("started_at"),
                updated_at=r.get("updated_at"),
            )

    def upsert(self, status: TaskStatus) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_task_status(employee_ref, task_status, active_task_ref, started_at, updated_at)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    task_status=VALUES(task_status),
                    active_task_ref=VALUES(active_task_ref),
                    started_at=VALUES(started_at),
                    updated_at=VALUES(updated_at)
                """,
                (
                    status.employee_ref,
                    status.status.value,
                    status.active_task_ref,
                    status.started_at,
                    status.updated_at,
                ),
            )
