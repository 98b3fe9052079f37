import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select, func

from database.models import Task, TaskStatus
from database.repositories.base import BaseRepository, as_utc
from core.scorer.models import ScoringTask

logger = logging.getLogger(__name__)


class TaskRepository(BaseRepository):
    def get(self, org_id: Any, task_id: Any) -> Optional[Task]:
        stmt = select(Task).where(
            Task.id == task_id,
            Task.org_id == org_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_employee(self, org_id: Any, employee_id: Any) -> List[ScoringTask]:
        """Scoring snapshot: every non-deleted task assigned to the employee."""
        stmt = select(
            Task.status,
            Task.complexity_score,
            Task.due_date,
            Task.completed_at
        ).where(
            Task.org_id == org_id,
            Task.assigned_to == employee_id,
            Task.is_active.is_(True)
        )
        return [
            ScoringTask(
                status=TaskStatus(status).value,
                complexity_score=complexity,
                due_date=as_utc(due_date),
                completed_at=as_utc(completed_at),
            )
            for status, complexity, due_date, completed_at in self.db.execute(stmt).all()
        ]

    def open_counts(self, org_id: Any, employee_ids: Iterable[Any]) -> Dict[Any, int]:
        """Open (non-completed, non-deleted) task count per employee, one GROUP BY."""
        ids = list(employee_ids)
        if not ids:
            return {}
        stmt = select(
            Task.assigned_to,
            func.count(Task.id)
        ).where(
            Task.org_id == org_id,
            Task.assigned_to.in_(ids),
            Task.status != TaskStatus.COMPLETED,
            Task.is_active.is_(True)
        ).group_by(Task.assigned_to)
        return {assignee: count for assignee, count in self.db.execute(stmt).all()}

    def required_skills_for_assignees(self, org_id: Any, employee_ids: Iterable[Any]) -> List[List[str]]:
        """
        Required-skill lists of every task ever assigned to the given employees.

        Soft-deleted tasks are included: they still describe the scope of
        the role.
        """
        ids = list(employee_ids)
        if not ids:
            return []
        stmt = select(Task.required_skills).where(
            Task.org_id == org_id,
            Task.assigned_to.in_(ids)
        )
        return [skills or [] for (skills,) in self.db.execute(stmt).all()]

    def status_buckets(self, org_id: Any) -> List[Tuple[Any, str, int]]:
        """(assignee, status, count) for assigned, non-deleted tasks in the org."""
        stmt = select(
            Task.assigned_to,
            Task.status,
            func.count(Task.id)
        ).where(
            Task.org_id == org_id,
            Task.assigned_to.is_not(None),
            Task.is_active.is_(True)
        ).group_by(Task.assigned_to, Task.status)
        return [
            (assignee, TaskStatus(status).value, count)
            for assignee, status, count in self.db.execute(stmt).all()
        ]
