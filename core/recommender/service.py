#!/usr/bin/env python3
"""
Recommendation Service - who should take a task, and what an employee lacks.

recommend():
    Candidates are every active employee in the tenant, narrowed to the
    current assignee's department when the task is already assigned.
    Workload and latest score are fetched for the whole candidate set with
    one query each, then every candidate is ranked and the top K returned.

detect_skill_gaps():
    The required-skill union comes from tasks assigned to peers with the
    same job title, or from the employee's own tasks when no title is set.
"""

import logging
from typing import Any, List, Optional

from core.cache import keys as cache_keys
from core.cache.views import CacheAside
from core.config_loader import AppConfig
from core.errors import (
    EmployeeNotFoundError,
    TaskNotFoundError,
    translate_dependency_errors
)
from core.utils import parse_id
from database.repository import HrRepository

from core.scorer.models import EmployeeSummary, RecommendationEntry, SkillGapResult
from core.scorer.productivity import round_half_up
from core.scorer.ranking import compute_rank, compute_skill_overlap, skill_overlap_rate
from core.scorer.skill_gap import detect_gaps, skill_union

logger = logging.getLogger(__name__)


class RecommendationService:
    """Ranks candidates for a task and reports per-employee skill gaps."""

    def __init__(
        self,
        repo: HrRepository,
        cache: Optional[CacheAside] = None,
        config: Optional[AppConfig] = None
    ):
        self.repo = repo
        self.config = config or AppConfig()
        self.cache = cache or CacheAside(config=self.config.cache)

    def recommend(self, org_id: Any, task_id: Any) -> List[RecommendationEntry]:
        """
        Top candidates for a task, best first.

        Ties on rank are broken by name, then id, so repeated calls over the
        same data return the same order.

        Raises:
            TaskNotFoundError: task absent or in another tenant
        """
        org_id = parse_id(org_id, TaskNotFoundError)
        task_id = parse_id(task_id, TaskNotFoundError)
        key = self.cache.key(org_id, cache_keys.RECOMMEND, task_id)

        cached = self.cache.get_json(key)
        if cached is not None:
            try:
                return [RecommendationEntry.from_payload(p) for p in cached['candidates']]
            except (KeyError, TypeError) as e:
                logger.warning(f"Discarding malformed cached recommendation {key}: {e}")

        with translate_dependency_errors("load task"):
            task = self.repo.tasks.get(org_id, task_id)
        if task is None:
            raise TaskNotFoundError("Task not found")

        required = list(task.required_skills or [])
        candidates = self._candidate_pool(org_id, task)
        candidate_ids = [c.id for c in candidates]

        with translate_dependency_errors("load candidate workload"):
            open_counts = self.repo.tasks.open_counts(org_id, candidate_ids)
        with translate_dependency_errors("load candidate scores"):
            latest_scores = self.repo.score_logs.latest_per_employee(org_id, candidate_ids)

        policy = self.config.recommendation
        ranked = []
        for employee in candidates:
            skills = list(employee.skills or [])
            overlap = compute_skill_overlap(skills, required)
            active_count = open_counts.get(employee.id, 0)
            perf_score = latest_scores.get(employee.id, policy.default_perf_score)
            rank = compute_rank(
                overlap,
                len(required),
                active_count,
                perf_score,
                workload_cap=policy.workload_cap
            )
            entry = RecommendationEntry(
                employee=EmployeeSummary(
                    id=str(employee.id),
                    name=employee.name,
                    job_title=employee.job_title,
                    department=employee.department,
                    skills=tuple(skills),
                ),
                skill_overlap=overlap,
                skill_overlap_rate=round_half_up(skill_overlap_rate(overlap, len(required)), 3),
                active_count=active_count,
                perf_score=perf_score,
                rank=round_half_up(rank, 2),
            )
            ranked.append((rank, entry))

        # Order on the unrounded rank; the rounded one is for display only
        ranked.sort(key=lambda r: (-r[0], r[1].employee.name, r[1].employee.id))
        top = [entry for _, entry in ranked[:policy.top_k]]

        logger.debug(f"Ranked {len(ranked)} candidates for task {task_id}, returning {len(top)}")

        self.cache.set_json(
            key,
            {'task_id': str(task_id), 'candidates': [e.to_payload() for e in top]},
            self.cache.ttl(cache_keys.RECOMMEND)
        )
        return top

    def detect_skill_gaps(self, org_id: Any, employee_id: Any) -> SkillGapResult:
        """
        Skills required across the employee's peer population that they lack.

        Raises:
            EmployeeNotFoundError: employee absent or in another tenant
        """
        org_id = parse_id(org_id, EmployeeNotFoundError)
        employee_id = parse_id(employee_id, EmployeeNotFoundError)
        key = self.cache.key(org_id, cache_keys.SKILL_GAP, employee_id)

        cached = self.cache.get_json(key)
        if cached is not None:
            try:
                return SkillGapResult.from_payload(cached)
            except TypeError as e:
                logger.warning(f"Discarding malformed cached skill gap {key}: {e}")

        with translate_dependency_errors("load employee"):
            employee = self.repo.employees.get(org_id, employee_id, active_only=True)
        if employee is None:
            raise EmployeeNotFoundError("Employee not found")

        peer_ids = [employee.id]
        if employee.job_title:
            with translate_dependency_errors("load peers"):
                peer_ids = self.repo.employees.ids_by_job_title(org_id, employee.job_title) or peer_ids

        with translate_dependency_errors("load peer task skills"):
            skill_lists = self.repo.tasks.required_skills_for_assignees(org_id, peer_ids)

        required = skill_union(skill_lists)
        current = list(employee.skills or [])
        gaps, coverage = detect_gaps(current, required)

        result = SkillGapResult(
            employee_id=str(employee.id),
            name=employee.name,
            current_skills=current,
            required_skills=required,
            gap_skills=gaps,
            coverage_rate=coverage,
        )
        self.cache.set_json(key, result.to_payload(), self.cache.ttl(cache_keys.SKILL_GAP))
        return result

    def _candidate_pool(self, org_id, task) -> list:
        department = None
        if task.assigned_to is not None:
            with translate_dependency_errors("load assignee"):
                assignee = self.repo.employees.get(org_id, task.assigned_to)
            department = assignee.department if assignee else None

        with translate_dependency_errors("load candidates"):
            return self.repo.employees.list_active(org_id, department=department)
