#!/usr/bin/env python3
"""
Scoring Models - Data structures for scores, trends and recommendations.

Everything here is plain data: no database or cache access. Records that
are persisted or cached expose ``to_record``/``to_payload`` and a matching
decoder so the JSON shape lives next to the type it describes.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from core.errors import MalformedHistoryError

logger = logging.getLogger(__name__)

COMPLETED = "COMPLETED"

BREAKDOWN_VERSION = 1

# Unversioned blobs written before the breakdown record was tagged
_LEGACY_BREAKDOWN_KEYS = {
    'completion_rate': 'completionRate',
    'on_time_rate': 'onTimeRate',
    'avg_complexity': 'avgComplexity',
    'total_assigned': 'totalTasksAssigned',
    'total_completed': 'totalCompleted',
    'total_on_time': 'totalOnTime',
}


@dataclass(frozen=True)
class ScoringTask:
    """Minimal task shape needed for score computation."""
    status: str
    complexity_score: int
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def is_completed(self) -> bool:
        return self.status == COMPLETED


@dataclass(frozen=True)
class ScoreBreakdown:
    """Display-rounded factors behind a productivity score."""
    completion_rate: float  # 0-1, 3 decimals
    on_time_rate: float  # 0-1, 3 decimals
    avg_complexity: float  # 1-5 raw mean, 2 decimals
    total_assigned: int
    total_completed: int
    total_on_time: int

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record['version'] = BREAKDOWN_VERSION
        return record

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def parse_record(cls, record: Any) -> "ScoreBreakdown":
        """Strict decoder. Raises MalformedHistoryError on any shape mismatch."""
        if not isinstance(record, dict):
            raise MalformedHistoryError(f"Breakdown is {type(record).__name__}, expected object")

        version = record.get('version')
        if version == BREAKDOWN_VERSION:
            values = {name: record.get(name) for name in _LEGACY_BREAKDOWN_KEYS}
        elif version is None:
            values = {name: record.get(legacy) for name, legacy in _LEGACY_BREAKDOWN_KEYS.items()}
        else:
            raise MalformedHistoryError(f"Unknown breakdown version {version!r}")

        for name in ('completion_rate', 'on_time_rate', 'avg_complexity'):
            value = values[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise MalformedHistoryError(f"Breakdown field {name} is {value!r}")
            values[name] = float(value)
        for name in ('total_assigned', 'total_completed', 'total_on_time'):
            value = values[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise MalformedHistoryError(f"Breakdown field {name} is {value!r}")

        return cls(**values)

    @classmethod
    def from_record(cls, record: Any) -> Optional["ScoreBreakdown"]:
        """Tolerant decoder for history rows: None instead of raising."""
        if record is None:
            return None
        try:
            return cls.parse_record(record)
        except MalformedHistoryError as e:
            logger.warning(f"Unreadable score breakdown ({e.code}): {e}")
            return None


@dataclass(frozen=True)
class ScoreResult:
    """Scorer output. All three fields are None when no tasks were assigned."""
    score: Optional[float] = None
    grade: Optional[str] = None
    breakdown: Optional[ScoreBreakdown] = None

    @property
    def is_scored(self) -> bool:
        return self.score is not None


@dataclass(frozen=True)
class ScoreLogEntry:
    """One append-only history row."""
    id: Any
    org_id: Any
    employee_id: Any
    score: Optional[float]
    breakdown: Optional[ScoreBreakdown]
    computed_at: datetime


@dataclass(frozen=True)
class TrendAnalysis:
    """
    Direction of an employee's score history.

    trend is one of 'up', 'down', 'flat' or 'insufficient_data'. In the last
    case delta and both averages are None.
    """
    trend: str
    delta: Optional[float] = None
    recent_avg: Optional[float] = None
    previous_avg: Optional[float] = None

    @property
    def label(self) -> str:
        return {
            'up': 'improving',
            'down': 'declining',
            'flat': 'stable',
        }.get(self.trend, 'insufficient_data')

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrendAnalysis":
        return cls(
            trend=data['trend'],
            delta=data.get('delta'),
            recent_avg=data.get('recent_avg'),
            previous_avg=data.get('previous_avg'),
        )


@dataclass(frozen=True)
class ProductivityScoreView:
    """Full read-path result for one employee, as cached and returned."""
    employee_id: str
    name: str
    score: Optional[float]
    grade: Optional[str]
    breakdown: Optional[ScoreBreakdown]
    trend: str
    trend_analysis: TrendAnalysis
    computed_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        return {
            'employee_id': self.employee_id,
            'name': self.name,
            'score': self.score,
            'grade': self.grade,
            'breakdown': self.breakdown.to_dict() if self.breakdown else None,
            'trend': self.trend,
            'trend_analysis': self.trend_analysis.to_dict(),
            'computed_at': self.computed_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ProductivityScoreView":
        breakdown = payload.get('breakdown')
        return cls(
            employee_id=payload['employee_id'],
            name=payload['name'],
            score=payload.get('score'),
            grade=payload.get('grade'),
            breakdown=ScoreBreakdown(**breakdown) if breakdown else None,
            trend=payload['trend'],
            trend_analysis=TrendAnalysis.from_dict(payload['trend_analysis']),
            computed_at=datetime.fromisoformat(payload['computed_at']),
        )


@dataclass(frozen=True)
class EmployeeSummary:
    id: str
    name: str
    job_title: Optional[str]
    department: Optional[str]
    skills: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationEntry:
    """One ranked candidate with the factors that produced its rank."""
    employee: EmployeeSummary
    skill_overlap: int
    skill_overlap_rate: float
    active_count: int
    perf_score: float
    rank: float

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload['employee']['skills'] = list(self.employee.skills)
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RecommendationEntry":
        employee = dict(payload['employee'])
        employee['skills'] = tuple(employee.get('skills') or ())
        return cls(
            employee=EmployeeSummary(**employee),
            skill_overlap=payload['skill_overlap'],
            skill_overlap_rate=payload['skill_overlap_rate'],
            active_count=payload['active_count'],
            perf_score=payload['perf_score'],
            rank=payload['rank'],
        )


@dataclass(frozen=True)
class SkillGapResult:
    employee_id: str
    name: str
    current_skills: List[str] = field(default_factory=list)
    required_skills: List[str] = field(default_factory=list)
    gap_skills: List[str] = field(default_factory=list)
    coverage_rate: float = 1.0

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SkillGapResult":
        return cls(**payload)
