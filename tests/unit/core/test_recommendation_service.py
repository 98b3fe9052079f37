#!/usr/bin/env python3
"""
Tests for RecommendationService: candidate ranking and skill gap detection.
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest

from core.cache import keys as cache_keys
from core.errors import EmployeeNotFoundError, TaskNotFoundError
from core.recommender.service import RecommendationService
from database.models import TaskStatus
from tests.fixtures.hr_fixtures import NOW, make_employee, make_org, make_score_log, make_task


@pytest.fixture
def org(db_session):
    return make_org(db_session, "Acme")


@pytest.fixture
def team(db_session, org):
    """
    Ana and Dan: full overlap, idle, latest score 80  -> 96.0
    Ben: half overlap, two open tasks, never scored   -> 59.0
    Cara: no overlap, idle, latest score 100          -> 50.0
    Eve: full overlap but inactive                    -> excluded
    """
    ana = make_employee(db_session, org, "Ana", skills=["python", "sql"], department="Eng")
    ben = make_employee(db_session, org, "Ben", skills=["python"], department="Eng")
    cara = make_employee(db_session, org, "Cara", skills=[], department="Ops")
    dan = make_employee(db_session, org, "Dan", skills=["Python", "SQL"], department="Ops")
    eve = make_employee(db_session, org, "Eve", skills=["python", "sql"], is_active=False)

    make_task(db_session, org, ben, TaskStatus.ASSIGNED)
    make_task(db_session, org, ben, TaskStatus.IN_PROGRESS)
    make_task(db_session, org, ben, TaskStatus.COMPLETED)

    make_score_log(db_session, org, ana, 20.0, NOW - timedelta(days=9))
    make_score_log(db_session, org, ana, 80.0, NOW - timedelta(days=1))
    make_score_log(db_session, org, cara, 100.0, NOW - timedelta(days=1))
    make_score_log(db_session, org, dan, 80.0, NOW - timedelta(days=1))

    return {'ana': ana, 'ben': ben, 'cara': cara, 'dan': dan, 'eve': eve}


@pytest.fixture
def open_task(db_session, org):
    return make_task(db_session, org, None, TaskStatus.ASSIGNED, required_skills=["python", "sql"])


@pytest.mark.db
class TestRecommend:

    def test_top_three_best_first(self, repo, org, team, open_task, any_cache):
        top = RecommendationService(repo, any_cache).recommend(org.id, open_task.id)

        assert [e.employee.name for e in top] == ["Ana", "Dan", "Ben"]
        assert [e.rank for e in top] == [96.0, 96.0, 59.0]

    def test_factors_reported(self, repo, org, team, open_task, any_cache):
        top = RecommendationService(repo, any_cache).recommend(org.id, open_task.id)
        ben = top[2]

        assert ben.employee.id == str(team['ben'].id)
        assert ben.skill_overlap == 1
        assert ben.skill_overlap_rate == 0.5
        assert ben.active_count == 2
        assert ben.perf_score == 50.0

    def test_case_insensitive_overlap(self, repo, org, team, open_task, null_cache):
        top = RecommendationService(repo, null_cache).recommend(org.id, open_task.id)
        dan = next(e for e in top if e.employee.name == "Dan")
        assert dan.skill_overlap == 2
        assert dan.employee.skills == ("Python", "SQL")

    def test_inactive_employees_excluded(self, repo, db_session, org, team, null_cache, app_config):
        task = make_task(db_session, org, None, required_skills=["python"])
        app_config.recommendation.top_k = 10

        ranked = RecommendationService(repo, null_cache, app_config).recommend(org.id, task.id)

        assert "Eve" not in [e.employee.name for e in ranked]
        assert len(ranked) == 4

    def test_assigned_task_narrows_to_assignee_department(self, repo, db_session, org, team, null_cache):
        task = make_task(db_session, org, team['ben'], TaskStatus.ASSIGNED, required_skills=["python", "sql"])

        top = RecommendationService(repo, null_cache).recommend(org.id, task.id)

        assert [e.employee.name for e in top] == ["Ana", "Ben"]
        # The task itself now counts toward Ben's workload
        assert top[1].active_count == 3

    def test_assignee_without_department_uses_whole_org(self, repo, db_session, org, team, null_cache):
        loner = make_employee(db_session, org, "Zed", skills=[])
        task = make_task(db_session, org, loner, TaskStatus.ASSIGNED, required_skills=["python", "sql"])

        top = RecommendationService(repo, null_cache).recommend(org.id, task.id)

        assert [e.employee.name for e in top] == ["Ana", "Dan", "Ben"]

    def test_task_without_required_skills(self, repo, db_session, org, team, null_cache):
        task = make_task(db_session, org, None, required_skills=[])
        top = RecommendationService(repo, null_cache).recommend(org.id, task.id)
        # Availability and performance only: Cara 30+20, Ana and Dan 30+16
        assert [e.employee.name for e in top] == ["Cara", "Ana", "Dan"]
        assert all(e.skill_overlap_rate == 0.0 for e in top)

    def test_workload_and_scores_fetched_once(self, repo, org, team, open_task, null_cache):
        service = RecommendationService(repo, null_cache)
        with patch.object(repo.tasks, 'open_counts', wraps=repo.tasks.open_counts) as open_counts, \
                patch.object(repo.score_logs, 'latest_per_employee',
                             wraps=repo.score_logs.latest_per_employee) as latest:
            service.recommend(org.id, open_task.id)

        open_counts.assert_called_once()
        latest.assert_called_once()

    def test_cached_result_reused(self, repo, org, team, open_task, fake_redis, redis_cache):
        service = RecommendationService(repo, redis_cache)
        first = service.recommend(org.id, open_task.id)

        with patch.object(repo.tasks, 'get') as get_task:
            second = service.recommend(org.id, open_task.id)

        get_task.assert_not_called()
        assert second == first
        key = cache_keys.cache_key(org.id, cache_keys.RECOMMEND, open_task.id)
        assert fake_redis.ttls[key] == 300

    def test_repeated_calls_identical(self, repo, org, team, open_task, any_cache):
        service = RecommendationService(repo, any_cache)
        assert service.recommend(org.id, open_task.id) == service.recommend(org.id, open_task.id)

    def test_unknown_task(self, repo, org, any_cache):
        with pytest.raises(TaskNotFoundError):
            RecommendationService(repo, any_cache).recommend(org.id, uuid.uuid4())

    def test_task_in_other_tenant(self, repo, db_session, open_task, any_cache):
        other = make_org(db_session, "Globex")
        with pytest.raises(TaskNotFoundError):
            RecommendationService(repo, any_cache).recommend(other.id, open_task.id)

    def test_malformed_task_id(self, repo, org, any_cache):
        with pytest.raises(TaskNotFoundError) as ctx:
            RecommendationService(repo, any_cache).recommend(org.id, "task-1")
        assert str(ctx.value) == "Task not found"

    def test_order_uses_unrounded_rank(self, repo, db_session, org, null_cache, app_config):
        # Both display as 42.38; Zed is ahead by under 0.001 before rounding
        app_config.recommendation.workload_cap = 7
        ana = make_employee(db_session, org, "Ana", skills=[])
        zed = make_employee(db_session, org, "Zed", skills=["python"])
        make_task(db_session, org, zed, TaskStatus.ASSIGNED)
        make_score_log(db_session, org, ana, 61.9, NOW - timedelta(days=1))
        make_score_log(db_session, org, zed, 0.0, NOW - timedelta(days=1))
        task = make_task(db_session, org, None, required_skills=["python", "sql", "go"])

        top = RecommendationService(repo, null_cache, app_config).recommend(org.id, task.id)

        assert [e.employee.name for e in top] == ["Zed", "Ana"]
        assert [e.rank for e in top] == [42.38, 42.38]


@pytest.mark.db
class TestDetectSkillGaps:

    @pytest.fixture
    def engineers(self, db_session, org):
        ana = make_employee(db_session, org, "Ana", skills=["Python", "sql"], job_title="Engineer")
        ben = make_employee(db_session, org, "Ben", skills=["go"], job_title="Engineer")
        make_task(db_session, org, ana, required_skills=["sql"])
        make_task(db_session, org, ben, required_skills=["python", "Docker"])
        # Soft-deleted tasks still describe the role
        make_task(db_session, org, ben, required_skills=["kubernetes"], is_active=False)
        return ana, ben

    def test_gaps_against_peer_population(self, repo, org, engineers, any_cache):
        ana, _ = engineers
        result = RecommendationService(repo, any_cache).detect_skill_gaps(org.id, ana.id)

        assert result.employee_id == str(ana.id)
        assert sorted(result.required_skills) == ["docker", "kubernetes", "python", "sql"]
        assert sorted(result.gap_skills) == ["docker", "kubernetes"]
        assert result.coverage_rate == 0.5
        assert result.current_skills == ["Python", "sql"]

    def test_no_job_title_uses_own_tasks(self, repo, db_session, org, null_cache):
        solo = make_employee(db_session, org, "Solo", skills=["sql"])
        make_task(db_session, org, solo, required_skills=["sql", "excel", "SQL"])

        result = RecommendationService(repo, null_cache).detect_skill_gaps(org.id, solo.id)

        assert sorted(result.required_skills) == ["excel", "sql"]
        assert result.gap_skills == ["excel"]
        assert result.coverage_rate == 0.5

    def test_nothing_required_is_full_coverage(self, repo, db_session, org, null_cache):
        idle = make_employee(db_session, org, "Idle", skills=["sql"])
        result = RecommendationService(repo, null_cache).detect_skill_gaps(org.id, idle.id)
        assert result.required_skills == []
        assert result.gap_skills == []
        assert result.coverage_rate == 1.0

    def test_coverage_rounded_to_three_places(self, repo, db_session, org, null_cache):
        emp = make_employee(db_session, org, "Tri", skills=["a", "b"])
        make_task(db_session, org, emp, required_skills=["a", "b", "c"])
        result = RecommendationService(repo, null_cache).detect_skill_gaps(org.id, emp.id)
        assert result.coverage_rate == 0.667

    def test_cached_under_skill_gap_namespace(self, repo, org, engineers, fake_redis, redis_cache):
        ana, _ = engineers
        service = RecommendationService(repo, redis_cache)
        first = service.detect_skill_gaps(org.id, ana.id)

        with patch.object(repo.employees, 'get') as get_employee:
            second = service.detect_skill_gaps(org.id, ana.id)

        get_employee.assert_not_called()
        assert second == first
        assert cache_keys.cache_key(org.id, cache_keys.SKILL_GAP, ana.id) in fake_redis.store

    def test_unknown_employee(self, repo, org, any_cache):
        with pytest.raises(EmployeeNotFoundError):
            RecommendationService(repo, any_cache).detect_skill_gaps(org.id, uuid.uuid4())

    def test_inactive_employee_not_found(self, repo, db_session, org, any_cache):
        gone = make_employee(db_session, org, "Gone", skills=["sql"], is_active=False)
        make_task(db_session, org, gone, required_skills=["sql", "excel"])

        with pytest.raises(EmployeeNotFoundError):
            RecommendationService(repo, any_cache).detect_skill_gaps(org.id, gone.id)
