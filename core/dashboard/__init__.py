"""Dashboard Module - cached org-level summary of tasks and scores."""
from core.dashboard.models import (
    DashboardSummary,
    EmployeeCompletionStat,
    PerformerSummary,
    RecentScoreLog
)
from core.dashboard.service import DashboardService

__all__ = [
    'DashboardSummary',
    'EmployeeCompletionStat',
    'PerformerSummary',
    'RecentScoreLog',
    'DashboardService'
]
