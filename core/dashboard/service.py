#!/usr/bin/env python3
"""
Dashboard Service - org summary of task completion and productivity scores.

Aggregates come from a handful of set-based queries (status buckets grouped
by assignee and status, latest score per employee, recent score feed); no
query runs per employee. Unassigned tasks are excluded from every total.

Cached per org for a short TTL and invalidated by every rescore, so the
snapshot lags the task board by at most the dashboard TTL.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from core.cache import keys as cache_keys
from core.cache.views import CacheAside
from core.config_loader import AppConfig
from core.errors import NotFoundError, translate_dependency_errors
from core.utils import parse_id, utcnow
from database.repository import HrRepository

from core.dashboard.models import (
    DashboardSummary,
    EmployeeCompletionStat,
    PerformerSummary,
    RecentScoreLog
)
from core.scorer.models import COMPLETED
from core.scorer.productivity import round_half_up

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(
        self,
        repo: HrRepository,
        cache: Optional[CacheAside] = None,
        config: Optional[AppConfig] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.repo = repo
        self.config = config or AppConfig()
        self.cache = cache or CacheAside(config=self.config.cache)
        self.clock = clock or utcnow

    def get_dashboard(self, org_id: Any) -> DashboardSummary:
        """
        Summary for one org. An org with no employees yields zeroes, not an error.
        """
        org_id = parse_id(org_id, NotFoundError)
        key = self.cache.key(org_id, cache_keys.DASHBOARD, org_id)

        cached = self.cache.get_json(key)
        if cached is not None:
            try:
                return DashboardSummary.from_payload(cached)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Discarding malformed cached dashboard {key}: {e}")

        summary = self._build(org_id)
        self.cache.set_json(key, summary.to_payload(), self.cache.ttl(cache_keys.DASHBOARD))
        return summary

    def _build(self, org_id) -> DashboardSummary:
        with translate_dependency_errors("load dashboard employees"):
            employees = self.repo.employees.list_for_org(org_id)
        with translate_dependency_errors("load dashboard task buckets"):
            buckets = self.repo.tasks.status_buckets(org_id)
        with translate_dependency_errors("load dashboard scores"):
            score_map = self.repo.score_logs.latest_per_employee(org_id, [e.id for e in employees])
            recent_logs = self.repo.score_logs.recent_for_org(org_id, limit=10)

        counts: Dict[Any, Dict[str, int]] = {}
        tasks_assigned = 0
        tasks_completed = 0
        for assignee, status, count in buckets:
            entry = counts.setdefault(assignee, {'assigned': 0, 'completed': 0})
            entry['assigned'] += count
            tasks_assigned += count
            if status == COMPLETED:
                entry['completed'] += count
                tasks_completed += count

        names = {e.id: e.name for e in employees}

        employee_stats = []
        for employee in employees:
            c = counts.get(employee.id, {'assigned': 0, 'completed': 0})
            rate = c['completed'] / c['assigned'] if c['assigned'] else 0.0
            employee_stats.append(EmployeeCompletionStat(
                employee_id=str(employee.id),
                name=employee.name,
                job_title=employee.job_title,
                department=employee.department,
                is_active=bool(employee.is_active),
                tasks_assigned=c['assigned'],
                tasks_completed=c['completed'],
                completion_rate=round_half_up(rate, 3),
                productivity_score=score_map.get(employee.id),
            ))
        employee_stats.sort(key=lambda s: (-s.completion_rate, s.name))

        avg_org_score = None
        top_performer = None
        lowest_performer = None
        if score_map:
            avg_org_score = round_half_up(sum(score_map.values()) / len(score_map), 1)
            ranked = sorted(score_map.items(), key=lambda item: (-item[1], names.get(item[0], '')))
            top_id, top_score = ranked[0]
            low_id, low_score = ranked[-1]
            top_performer = PerformerSummary(str(top_id), names.get(top_id, str(top_id)), round_half_up(top_score, 1))
            lowest_performer = PerformerSummary(str(low_id), names.get(low_id, str(low_id)), round_half_up(low_score, 1))

        recent_score_logs = [
            RecentScoreLog(
                id=str(entry.id),
                employee_id=str(entry.employee_id),
                employee_name=names.get(entry.employee_id, 'Unknown'),
                score=entry.score,
                completion_rate=entry.breakdown.completion_rate if entry.breakdown else None,
                on_time_rate=entry.breakdown.on_time_rate if entry.breakdown else None,
                avg_complexity=entry.breakdown.avg_complexity if entry.breakdown else None,
                computed_at=entry.computed_at.isoformat(),
            )
            for entry in recent_logs
        ]

        logger.debug(f"Built dashboard for org {org_id}: {len(employees)} employees, {tasks_assigned} tasks")

        return DashboardSummary(
            total_employees=len(employees),
            active_employees=sum(1 for e in employees if e.is_active),
            tasks_assigned=tasks_assigned,
            tasks_completed=tasks_completed,
            completion_rate=round_half_up(tasks_completed / tasks_assigned, 3) if tasks_assigned else 0.0,
            avg_org_score=avg_org_score,
            top_performer=top_performer,
            lowest_performer=lowest_performer,
            generated_at=self.clock(),
            employee_stats=employee_stats,
            recent_score_logs=recent_score_logs,
        )
