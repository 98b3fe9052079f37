#!/usr/bin/env python3
"""
Score Service - read and write paths for productivity scores.

Read path (get_score / get_trend): cache-aside over a live computation from
the current task snapshot and the persisted score history.

Write path (recompute_and_persist): invoked only by the rescore job. Scores
the employee's full active task set, appends a ScoreLog row, then deletes
every cached view the new row makes stale.

The service never opens its own transaction; callers hand it an
HrRepository bound to a session (hr_uow() in jobs, get_db() in the web app).
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional

from core.cache import keys as cache_keys
from core.cache.views import CacheAside
from core.config_loader import AppConfig
from core.errors import (
    CacheUnavailableError,
    EmployeeNotFoundError,
    TaskNotFoundError,
    translate_dependency_errors
)
from core.utils import parse_id, utcnow
from database.repository import HrRepository

from core.scorer.models import (
    ProductivityScoreView,
    ScoreLogEntry,
    TrendAnalysis
)
from core.scorer.productivity import score_tasks
from core.scorer.trend import analyze_trend

logger = logging.getLogger(__name__)


class ScoreService:
    """Orchestrates scorer, trend analyzer, history store and cache."""

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

    def get_score(self, org_id: Any, employee_id: Any) -> ProductivityScoreView:
        """
        Current score, grade, breakdown and trend for one employee.

        Raises:
            EmployeeNotFoundError: employee absent or in another tenant
            DependencyTimeoutError: a store read exceeded its budget
        """
        org_id = parse_id(org_id, EmployeeNotFoundError)
        employee_id = parse_id(employee_id, EmployeeNotFoundError)
        key = self.cache.key(org_id, cache_keys.SCORE, employee_id)

        cached = self.cache.get_json(key)
        if cached is not None:
            try:
                view = ProductivityScoreView.from_payload(cached)
                logger.debug(f"Cache hit for score {employee_id}")
                return view
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Discarding malformed cached score {key}: {e}")

        employee = self._require_employee(org_id, employee_id)
        now = self.clock()

        with translate_dependency_errors("load employee tasks"):
            tasks = self.repo.tasks.list_for_employee(org_id, employee_id)
        result = score_tasks(tasks)
        trend = self._compute_trend(org_id, employee_id, now)

        view = ProductivityScoreView(
            employee_id=str(employee.id),
            name=employee.name,
            score=result.score,
            grade=result.grade,
            breakdown=result.breakdown,
            trend=trend.label,
            trend_analysis=trend,
            computed_at=now,
        )
        self.cache.set_json(key, view.to_payload(), self.cache.ttl(cache_keys.SCORE))
        return view

    def get_trend(self, org_id: Any, employee_id: Any) -> TrendAnalysis:
        """Trend over persisted history, cached under its own namespace."""
        org_id = parse_id(org_id, EmployeeNotFoundError)
        employee_id = parse_id(employee_id, EmployeeNotFoundError)
        key = self.cache.key(org_id, cache_keys.TREND, employee_id)

        cached = self.cache.get_json(key)
        if cached is not None:
            try:
                return TrendAnalysis.from_dict(cached)
            except (KeyError, TypeError) as e:
                logger.warning(f"Discarding malformed cached trend {key}: {e}")

        self._require_employee(org_id, employee_id)
        trend = self._compute_trend(org_id, employee_id, self.clock())
        self.cache.set_json(key, trend.to_dict(), self.cache.ttl(cache_keys.TREND))
        return trend

    def get_history(self, org_id: Any, employee_id: Any, limit: int = 50) -> List[ScoreLogEntry]:
        """Audit listing, newest first. Always read from the store."""
        org_id = parse_id(org_id, EmployeeNotFoundError)
        employee_id = parse_id(employee_id, EmployeeNotFoundError)
        self._require_employee(org_id, employee_id)

        with translate_dependency_errors("load score history"):
            return self.repo.score_logs.history(org_id, employee_id, limit=limit)

    def recompute_and_persist(self, org_id: Any, task_id: Any, employee_id: Any) -> ScoreLogEntry:
        """
        Append a fresh score for the employee and invalidate stale views.

        Store errors propagate so the caller's retry policy applies. A failed
        cache deletion is logged only; TTL expiry heals it.
        """
        org_id = parse_id(org_id, EmployeeNotFoundError)
        employee_id = parse_id(employee_id, EmployeeNotFoundError)
        if task_id is not None:
            task_id = parse_id(task_id, TaskNotFoundError)
        self._require_employee(org_id, employee_id)

        with translate_dependency_errors("load employee tasks"):
            tasks = self.repo.tasks.list_for_employee(org_id, employee_id)

        result = score_tasks(tasks)

        with translate_dependency_errors("insert score log"):
            entry = self.repo.score_logs.insert(
                org_id,
                employee_id,
                result.score,
                result.breakdown,
                computed_at=self.clock()
            )
            # Commit before invalidating so a concurrent miss cannot re-cache the old score
            self.repo.commit()

        self._invalidate(org_id, employee_id, task_id)

        logger.info(
            f"Rescored employee {employee_id} (org {org_id}, task {task_id}): "
            f"score={result.score} grade={result.grade} log_id={entry.id}"
        )
        return entry

    def _require_employee(self, org_id, employee_id):
        with translate_dependency_errors("load employee"):
            employee = self.repo.employees.get(org_id, employee_id)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")
        return employee

    def _compute_trend(self, org_id, employee_id, now: datetime) -> TrendAnalysis:
        policy = self.config.scoring.trend
        since = now - timedelta(days=policy.lookback_days)

        with translate_dependency_errors("load score history"):
            entries = self.repo.score_logs.query_range(org_id, employee_id, since)

        return analyze_trend(
            ((e.computed_at, e.score) for e in entries),
            now,
            policy
        )

    def _invalidate(self, org_id, employee_id, task_id) -> None:
        keys = cache_keys.invalidation_keys(
            org_id,
            employee_id,
            task_id,
            prefix=self.cache.config.key_prefix
        )
        try:
            deleted = self.cache.delete(*keys)
            logger.debug(f"Invalidated {deleted} cache entries for employee {employee_id}")
        except CacheUnavailableError as e:
            logger.warning(
                f"Cache invalidation failed for employee {employee_id}, "
                f"stale views expire by TTL: {e}"
            )
