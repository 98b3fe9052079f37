#!/usr/bin/env python3
"""
Candidate Ranking - Fit of an employee for a specific task.

rank = skillOverlapRate * 50 + inverseActiveRate * 30 + perfRate * 20

Every factor is normalised to [0, 1] before weighting, so rank is bounded to
[0, 100] whatever the task's skill count.
"""

from typing import Iterable

WEIGHT_SKILL = 50
WEIGHT_AVAILABILITY = 30
WEIGHT_PERFORMANCE = 20
DEFAULT_WORKLOAD_CAP = 10


def compute_skill_overlap(employee_skills: Iterable[str], required_skills: Iterable[str]) -> int:
    """
    Count required skills the employee has, case-insensitively.

    Both sides are de-duplicated, so the count never exceeds the smaller
    set and unrelated employee skills never inflate it.
    """
    required = {s.lower() for s in required_skills}
    owned = {s.lower() for s in employee_skills}
    return len(required & owned)


def skill_overlap_rate(overlap: int, required_count: int) -> float:
    return overlap / max(required_count, 1)


def compute_rank(
    overlap: int,
    required_count: int,
    active_count: int,
    perf_score: float,
    workload_cap: int = DEFAULT_WORKLOAD_CAP
) -> float:
    """
    Composite 0-100 rank for assigning a task to an employee.

    Args:
        overlap: Matched skills between employee and task
        required_count: Skills the task requires (denominator for overlap)
        active_count: Open (non-completed) tasks currently assigned
        perf_score: Latest productivity score; callers pass 50 when absent
        workload_cap: Open-task count at which availability reaches zero

    Returns:
        Rank in [0, 100], higher is a better fit.
    """
    overlap_rate = skill_overlap_rate(overlap, required_count)
    inverse_active_rate = max(0, workload_cap - active_count) / workload_cap
    perf_rate = min(max(perf_score, 0.0), 100.0) / 100

    return (
        overlap_rate * WEIGHT_SKILL
        + inverse_active_rate * WEIGHT_AVAILABILITY
        + perf_rate * WEIGHT_PERFORMANCE
    )
