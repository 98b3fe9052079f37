"""Dashboard Models - org-level summary records."""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class EmployeeCompletionStat:
    employee_id: str
    name: str
    job_title: Optional[str]
    department: Optional[str]
    is_active: bool
    tasks_assigned: int
    tasks_completed: int
    completion_rate: float  # 3 decimals
    productivity_score: Optional[float]  # Latest scored log, None if never scored


@dataclass(frozen=True)
class PerformerSummary:
    employee_id: str
    name: str
    score: float


@dataclass(frozen=True)
class RecentScoreLog:
    id: str
    employee_id: str
    employee_name: str
    score: float
    completion_rate: Optional[float]
    on_time_rate: Optional[float]
    avg_complexity: Optional[float]
    computed_at: str  # ISO-8601


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int
    active_employees: int
    tasks_assigned: int
    tasks_completed: int
    completion_rate: float
    avg_org_score: Optional[float]
    top_performer: Optional[PerformerSummary]
    lowest_performer: Optional[PerformerSummary]
    generated_at: datetime
    employee_stats: List[EmployeeCompletionStat] = field(default_factory=list)
    recent_score_logs: List[RecentScoreLog] = field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload['generated_at'] = self.generated_at.isoformat()
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DashboardSummary":
        top = payload.get('top_performer')
        lowest = payload.get('lowest_performer')
        return cls(
            total_employees=payload['total_employees'],
            active_employees=payload['active_employees'],
            tasks_assigned=payload['tasks_assigned'],
            tasks_completed=payload['tasks_completed'],
            completion_rate=payload['completion_rate'],
            avg_org_score=payload.get('avg_org_score'),
            top_performer=PerformerSummary(**top) if top else None,
            lowest_performer=PerformerSummary(**lowest) if lowest else None,
            generated_at=datetime.fromisoformat(payload['generated_at']),
            employee_stats=[EmployeeCompletionStat(**s) for s in payload.get('employee_stats', [])],
            recent_score_logs=[RecentScoreLog(**r) for r in payload.get('recent_score_logs', [])],
        )
