import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select, func

from database.models import ScoreLog
from database.repositories.base import BaseRepository, as_utc
from core.scorer.models import ScoreBreakdown, ScoreLogEntry

logger = logging.getLogger(__name__)


def _to_entry(row: ScoreLog) -> ScoreLogEntry:
    return ScoreLogEntry(
        id=row.id,
        org_id=row.org_id,
        employee_id=row.employee_id,
        score=float(row.score) if row.score is not None else None,
        breakdown=ScoreBreakdown.from_record(row.breakdown),
        computed_at=as_utc(row.computed_at),
    )


class ScoreLogRepository(BaseRepository):
    """
    History store for productivity scores.

    Append-only: there is an insert and there are reads. "Current" is
    resolved at read time by the greatest computed_at, so concurrent
    writers never need to coordinate.
    """

    def insert(
        self,
        org_id: Any,
        employee_id: Any,
        score: Optional[float],
        breakdown: Optional[ScoreBreakdown],
        computed_at: datetime
    ) -> ScoreLogEntry:
        row = ScoreLog(
            org_id=org_id,
            employee_id=employee_id,
            score=score,
            breakdown=breakdown.to_record() if breakdown else None,
            computed_at=computed_at,
        )
        self.db.add(row)
        self.db.flush()  # Generate ID
        return _to_entry(row)

    def query_range(self, org_id: Any, employee_id: Any, since: datetime) -> List[ScoreLogEntry]:
        """Scored rows computed at or after ``since``, oldest first."""
        stmt = select(ScoreLog).where(
            ScoreLog.org_id == org_id,
            ScoreLog.employee_id == employee_id,
            ScoreLog.computed_at >= since,
            ScoreLog.score.is_not(None)
        ).order_by(ScoreLog.computed_at.asc())
        return [_to_entry(row) for row in self.db.execute(stmt).scalars().all()]

    def latest(self, org_id: Any, employee_id: Any) -> Optional[ScoreLogEntry]:
        stmt = select(ScoreLog).where(
            ScoreLog.org_id == org_id,
            ScoreLog.employee_id == employee_id
        ).order_by(ScoreLog.computed_at.desc()).limit(1)
        row = self.db.execute(stmt).scalar_one_or_none()
        return _to_entry(row) if row else None

    def latest_per_employee(self, org_id: Any, employee_ids: Iterable[Any]) -> Dict[Any, float]:
        """
        Latest non-null score per employee in one windowed query.

        Employees without a scored row are absent from the result.
        """
        ids = list(employee_ids)
        if not ids:
            return {}

        ranked = select(
            ScoreLog.employee_id,
            ScoreLog.score,
            func.row_number().over(
                partition_by=ScoreLog.employee_id,
                order_by=ScoreLog.computed_at.desc()
            ).label('rn')
        ).where(
            ScoreLog.org_id == org_id,
            ScoreLog.employee_id.in_(ids),
            ScoreLog.score.is_not(None)
        ).subquery()

        stmt = select(ranked.c.employee_id, ranked.c.score).where(ranked.c.rn == 1)
        return {employee_id: float(score) for employee_id, score in self.db.execute(stmt).all()}

    def history(self, org_id: Any, employee_id: Any, limit: int = 50) -> List[ScoreLogEntry]:
        """Full audit history for one employee, newest first."""
        stmt = select(ScoreLog).where(
            ScoreLog.org_id == org_id,
            ScoreLog.employee_id == employee_id
        ).order_by(ScoreLog.computed_at.desc()).limit(limit)
        return [_to_entry(row) for row in self.db.execute(stmt).scalars().all()]

    def recent_for_org(self, org_id: Any, limit: int = 10) -> List[ScoreLogEntry]:
        """Newest scored rows across the org, for the dashboard feed."""
        stmt = select(ScoreLog).where(
            ScoreLog.org_id == org_id,
            ScoreLog.score.is_not(None)
        ).order_by(ScoreLog.computed_at.desc()).limit(limit)
        return [_to_entry(row) for row in self.db.execute(stmt).scalars().all()]
