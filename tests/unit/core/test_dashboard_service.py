#!/usr/bin/env python3
"""
Tests for DashboardService org summaries.
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest

from core.cache import keys as cache_keys
from core.dashboard.service import DashboardService
from core.errors import NotFoundError
from core.scorer.models import ScoreBreakdown
from core.scorer.service import ScoreService
from database.models import TaskStatus
from tests.fixtures.hr_fixtures import NOW, make_employee, make_org, make_score_log, make_task

BREAKDOWN = ScoreBreakdown(0.667, 0.5, 3.0, 3, 2, 1)


@pytest.fixture
def org(db_session):
    return make_org(db_session, "Acme")


@pytest.fixture
def staff(db_session, org):
    ana = make_employee(db_session, org, "Ana", job_title="Engineer", department="Eng")
    ben = make_employee(db_session, org, "Ben", job_title="Analyst", department="Ops")
    cara = make_employee(db_session, org, "Cara", is_active=False)

    make_task(db_session, org, ana, TaskStatus.COMPLETED)
    make_task(db_session, org, ana, TaskStatus.COMPLETED)
    make_task(db_session, org, ana, TaskStatus.ASSIGNED)
    make_task(db_session, org, ana, TaskStatus.ASSIGNED, is_active=False)
    make_task(db_session, org, ben, TaskStatus.COMPLETED)
    make_task(db_session, org, None, TaskStatus.ASSIGNED)

    make_score_log(db_session, org, ana, 50.0, NOW - timedelta(days=5))
    make_score_log(db_session, org, ben, 60.0, NOW - timedelta(days=2))
    make_score_log(db_session, org, ana, 80.0, NOW - timedelta(days=1), breakdown=BREAKDOWN.to_record())

    other = make_org(db_session, "Globex")
    outsider = make_employee(db_session, other, "Olga")
    make_task(db_session, other, outsider, TaskStatus.COMPLETED)
    make_score_log(db_session, other, outsider, 99.0, NOW - timedelta(hours=1))

    return ana, ben, cara


@pytest.mark.db
class TestDashboard:

    def test_totals(self, repo, org, staff, any_cache, clock):
        summary = DashboardService(repo, any_cache, clock=clock).get_dashboard(org.id)

        assert summary.total_employees == 3
        assert summary.active_employees == 2
        assert summary.tasks_assigned == 4
        assert summary.tasks_completed == 3
        assert summary.completion_rate == 0.75
        assert summary.generated_at == NOW

    def test_scores_use_latest_log_per_employee(self, repo, org, staff, any_cache, clock):
        ana, ben, _ = staff
        summary = DashboardService(repo, any_cache, clock=clock).get_dashboard(org.id)

        assert summary.avg_org_score == 70.0
        assert summary.top_performer.employee_id == str(ana.id)
        assert summary.top_performer.score == 80.0
        assert summary.lowest_performer.name == "Ben"
        assert summary.lowest_performer.score == 60.0

    def test_employee_stats_sorted_by_completion_rate(self, repo, org, staff, any_cache, clock):
        summary = DashboardService(repo, any_cache, clock=clock).get_dashboard(org.id)

        stats = summary.employee_stats
        assert [s.name for s in stats] == ["Ben", "Ana", "Cara"]
        assert [s.completion_rate for s in stats] == [1.0, 0.667, 0.0]
        assert stats[1].tasks_assigned == 3
        assert stats[1].productivity_score == 80.0
        assert stats[2].is_active is False
        assert stats[2].productivity_score is None

    def test_recent_score_feed_newest_first(self, repo, org, staff, any_cache, clock):
        summary = DashboardService(repo, any_cache, clock=clock).get_dashboard(org.id)

        feed = summary.recent_score_logs
        assert [(r.employee_name, r.score) for r in feed] == [("Ana", 80.0), ("Ben", 60.0), ("Ana", 50.0)]
        assert feed[0].completion_rate == 0.667
        assert feed[0].computed_at == (NOW - timedelta(days=1)).isoformat()
        assert feed[1].completion_rate is None

    def test_recent_feed_capped_at_ten(self, repo, db_session, org, null_cache, clock):
        emp = make_employee(db_session, org, "Busy")
        for i in range(12):
            make_score_log(db_session, org, emp, 50.0 + i, NOW - timedelta(hours=i))

        summary = DashboardService(repo, null_cache, clock=clock).get_dashboard(org.id)

        assert len(summary.recent_score_logs) == 10
        assert summary.recent_score_logs[0].score == 50.0

    def test_empty_org(self, repo, org, any_cache, clock):
        summary = DashboardService(repo, any_cache, clock=clock).get_dashboard(org.id)

        assert summary.total_employees == 0
        assert summary.tasks_assigned == 0
        assert summary.completion_rate == 0.0
        assert summary.avg_org_score is None
        assert summary.top_performer is None
        assert summary.lowest_performer is None
        assert summary.employee_stats == []

    def test_single_scored_employee_is_top_and_lowest(self, repo, db_session, org, null_cache, clock):
        solo = make_employee(db_session, org, "Solo")
        make_score_log(db_session, org, solo, 72.5, NOW - timedelta(days=1))

        summary = DashboardService(repo, null_cache, clock=clock).get_dashboard(org.id)

        assert summary.top_performer == summary.lowest_performer
        assert summary.avg_org_score == 72.5

    def test_idempotent(self, repo, org, staff, any_cache, clock):
        service = DashboardService(repo, any_cache, clock=clock)
        assert service.get_dashboard(org.id) == service.get_dashboard(str(org.id))

    def test_cached_with_short_ttl(self, repo, org, staff, fake_redis, redis_cache, clock):
        service = DashboardService(repo, redis_cache, clock=clock)
        first = service.get_dashboard(org.id)

        with patch.object(repo.employees, 'list_for_org') as list_for_org:
            clock.advance(seconds=30)
            second = service.get_dashboard(org.id)

        list_for_org.assert_not_called()
        assert second == first
        assert fake_redis.ttls[cache_keys.cache_key(org.id, cache_keys.DASHBOARD, org.id)] == 60

    def test_rescore_invalidates_dashboard(self, repo, db_session, org, staff, redis_cache, clock):
        ana, ben, _ = staff
        dashboard = DashboardService(repo, redis_cache, clock=clock)
        assert dashboard.get_dashboard(org.id).top_performer.name == "Ana"

        # Ben: one completed task, complexity 3, no due date -> 40 + 0 + 15
        clock.advance(minutes=1)
        ScoreService(repo, redis_cache, clock=clock).recompute_and_persist(org.id, None, ben.id)

        summary = dashboard.get_dashboard(org.id)
        assert summary.lowest_performer.score == 55.0
        assert summary.recent_score_logs[0].employee_name == "Ben"
        assert summary.generated_at == clock.now

    def test_malformed_org_id(self, repo, null_cache):
        with pytest.raises(NotFoundError):
            DashboardService(repo, null_cache).get_dashboard("acme")

    def test_unknown_org_is_empty(self, repo, staff, null_cache, clock):
        summary = DashboardService(repo, null_cache, clock=clock).get_dashboard(uuid.uuid4())
        assert summary.total_employees == 0
