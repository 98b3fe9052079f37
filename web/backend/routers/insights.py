#!/usr/bin/env python3
"""
Insight endpoints - productivity scores, recommendations, skill gaps, dashboard.

Every route is tenant-scoped through the X-Org-Id header; an id from another
tenant is reported exactly like a missing one.
"""

import logging
from fastapi import APIRouter, Depends, Query

from core.app_context import AppContext
from core.dashboard.service import DashboardService
from core.recommender.service import RecommendationService
from core.scorer.service import ScoreService
from rescore import TaskCompletedEvent, should_dispatch
from ..dependencies import (
    get_app_context,
    get_dashboard_service,
    get_org_id,
    get_recommendation_service,
    get_score_service
)
from ..models.requests import TaskCompletedRequest
from ..models.responses import (
    DashboardResponse,
    HistoryResponse,
    RecommendResponse,
    ScoreResponse,
    SkillGapResponse,
    TaskCompletedResponse,
    TrendResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("/score/{employee_id}", response_model=ScoreResponse)
def get_score(
    employee_id: str,
    org_id: str = Depends(get_org_id),
    service: ScoreService = Depends(get_score_service)
):
    """
    Current productivity score, grade, breakdown and trend for an employee.
    """
    view = service.get_score(org_id, employee_id)
    return ScoreResponse(success=True, data=view.to_payload())


@router.get("/score/{employee_id}/trend", response_model=TrendResponse)
def get_trend(
    employee_id: str,
    org_id: str = Depends(get_org_id),
    service: ScoreService = Depends(get_score_service)
):
    """Recent (7 day) vs prior score average for an employee."""
    trend = service.get_trend(org_id, employee_id)
    return TrendResponse(
        success=True,
        employee_id=employee_id,
        label=trend.label,
        data=trend.to_dict()
    )


@router.get("/score/{employee_id}/history", response_model=HistoryResponse)
def get_history(
    employee_id: str,
    limit: int = Query(default=50, ge=1, le=500, description="Maximum entries to return"),
    org_id: str = Depends(get_org_id),
    service: ScoreService = Depends(get_score_service)
):
    """Audit history of score computations, newest first."""
    entries = service.get_history(org_id, employee_id, limit=limit)
    return HistoryResponse(
        success=True,
        employee_id=employee_id,
        count=len(entries),
        entries=[
            {
                "id": str(e.id),
                "score": e.score,
                "breakdown": e.breakdown.to_dict() if e.breakdown else None,
                "computed_at": e.computed_at.isoformat()
            }
            for e in entries
        ]
    )


@router.get("/recommend/{task_id}", response_model=RecommendResponse)
def recommend(
    task_id: str,
    org_id: str = Depends(get_org_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Top candidates for a task with the factors behind each rank."""
    entries = service.recommend(org_id, task_id)
    recommendations = []
    for entry in entries:
        payload = entry.to_payload()
        employee = payload.pop("employee")
        employee["employee_id"] = employee.pop("id")
        recommendations.append({"employee": employee, **payload})

    return RecommendResponse(
        success=True,
        task_id=task_id,
        count=len(recommendations),
        recommendations=recommendations
    )


@router.get("/skill-gap/{employee_id}", response_model=SkillGapResponse)
def get_skill_gap(
    employee_id: str,
    org_id: str = Depends(get_org_id),
    service: RecommendationService = Depends(get_recommendation_service)
):
    """Skills required across the employee's peer group that they lack."""
    result = service.detect_skill_gaps(org_id, employee_id)
    return SkillGapResponse(success=True, data=result.to_payload())


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    org_id: str = Depends(get_org_id),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Org-level task completion and score summary."""
    summary = service.get_dashboard(org_id)
    return DashboardResponse(success=True, data=summary.to_payload())


@router.post("/events/task-completed", response_model=TaskCompletedResponse, status_code=202)
def task_completed(
    request: TaskCompletedRequest,
    org_id: str = Depends(get_org_id),
    context: AppContext = Depends(get_app_context)
):
    """
    Report a task status transition.

    Returns as soon as the rescore is queued; the response never waits for
    the score to be recomputed.
    """
    if not should_dispatch(request.previous_status, request.status, request.employee_id):
        logger.debug(f"Ignoring non-completing transition for task {request.task_id}")
        return TaskCompletedResponse(success=True, queued=False)

    if context.dispatcher is None:
        logger.warning("Rescore dispatcher not configured, dropping completion event")
        return TaskCompletedResponse(success=True, queued=False)

    queued = context.dispatcher.on_task_completed(TaskCompletedEvent(
        org_id=org_id,
        task_id=request.task_id,
        employee_id=request.employee_id
    ))
    return TaskCompletedResponse(success=True, queued=queued)
