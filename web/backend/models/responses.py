#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class BreakdownModel(BaseModel):
    """Display-rounded factors behind a productivity score."""
    completion_rate: float = Field(ge=0, le=1)
    on_time_rate: float = Field(ge=0, le=1)
    avg_complexity: float = Field(ge=0, le=5)
    total_assigned: int
    total_completed: int
    total_on_time: int


class TrendModel(BaseModel):
    trend: str
    delta: Optional[float] = None
    recent_avg: Optional[float] = None
    previous_avg: Optional[float] = None


class ScoreData(BaseModel):
    """Productivity score for one employee."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "employee_id": "550e8400-e29b-41d4-a716-446655440000",
                "name": "Priya Raman",
                "score": 65.0,
                "grade": "C",
                "breakdown": {
                    "completion_rate": 1.0,
                    "on_time_rate": 0.0,
                    "avg_complexity": 5.0,
                    "total_assigned": 2,
                    "total_completed": 2,
                    "total_on_time": 0
                },
                "trend": "stable",
                "trend_analysis": {"trend": "flat", "delta": 0.4, "recent_avg": 65.2, "previous_avg": 64.9},
                "computed_at": "2026-02-01T12:00:00+00:00"
            }
        }
    )

    employee_id: str
    name: str
    score: Optional[float] = Field(None, ge=0, le=100)
    grade: Optional[str] = None
    breakdown: Optional[BreakdownModel] = None
    trend: str
    trend_analysis: TrendModel
    computed_at: str


class ScoreResponse(BaseModel):
    success: bool
    data: ScoreData


class TrendResponse(BaseModel):
    success: bool
    employee_id: str
    label: str
    data: TrendModel


class HistoryEntryModel(BaseModel):
    id: str
    score: Optional[float] = None
    breakdown: Optional[BreakdownModel] = None
    computed_at: str


class HistoryResponse(BaseModel):
    success: bool
    employee_id: str
    count: int
    entries: List[HistoryEntryModel]


class CandidateModel(BaseModel):
    employee_id: str
    name: str
    job_title: Optional[str] = None
    department: Optional[str] = None
    skills: List[str] = Field(default_factory=list)


class RecommendationModel(BaseModel):
    """One ranked candidate with the factors behind the rank."""
    employee: CandidateModel
    skill_overlap: int
    skill_overlap_rate: float = Field(ge=0, le=1)
    active_count: int
    perf_score: float
    rank: float = Field(ge=0, le=100)


class RecommendResponse(BaseModel):
    success: bool
    task_id: str
    count: int
    recommendations: List[RecommendationModel]


class SkillGapData(BaseModel):
    employee_id: str
    name: str
    current_skills: List[str]
    required_skills: List[str]
    gap_skills: List[str]
    coverage_rate: float = Field(ge=0, le=1)


class SkillGapResponse(BaseModel):
    success: bool
    data: SkillGapData


class EmployeeStatModel(BaseModel):
    employee_id: str
    name: str
    job_title: Optional[str] = None
    department: Optional[str] = None
    is_active: bool
    tasks_assigned: int
    tasks_completed: int
    completion_rate: float
    productivity_score: Optional[float] = None


class PerformerModel(BaseModel):
    employee_id: str
    name: str
    score: float


class RecentScoreLogModel(BaseModel):
    id: str
    employee_id: str
    employee_name: str
    score: float
    completion_rate: Optional[float] = None
    on_time_rate: Optional[float] = None
    avg_complexity: Optional[float] = None
    computed_at: str


class DashboardData(BaseModel):
    total_employees: int
    active_employees: int
    tasks_assigned: int
    tasks_completed: int
    completion_rate: float
    avg_org_score: Optional[float] = None
    top_performer: Optional[PerformerModel] = None
    lowest_performer: Optional[PerformerModel] = None
    generated_at: str
    employee_stats: List[EmployeeStatModel]
    recent_score_logs: List[RecentScoreLogModel]


class DashboardResponse(BaseModel):
    success: bool
    data: DashboardData


class TaskCompletedResponse(BaseModel):
    success: bool
    queued: bool
