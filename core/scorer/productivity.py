#!/usr/bin/env python3
"""
Productivity Score - Weighted 0-100 score from an employee's task history.

Formula: completionRate * 40 + onTimeRate * 35 + (avgComplexity / 5) * 25

- completionRate: completed / assigned
- onTimeRate: completed-on-or-before-due / completed-with-a-due-date
  (0 when no completed task carries a due date)
- avgComplexity: mean complexity over ALL assigned tasks, not just completed

The score is rounded from the unrounded factors; breakdown fields are rounded
separately for display and need not recompute to the score exactly.
"""

import math
from typing import Sequence

from core.scorer.models import ScoringTask, ScoreBreakdown, ScoreResult

WEIGHT_COMPLETION = 40
WEIGHT_ON_TIME = 35
WEIGHT_COMPLEXITY = 25
MAX_COMPLEXITY = 5

GRADE_THRESHOLDS = (
    (90.0, 'A+'),
    (80.0, 'A'),
    (70.0, 'B'),
    (60.0, 'C'),
)


def round_half_up(value: float, places: int) -> float:
    """Round halves toward +infinity, matching the scores already in the history."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def score_to_grade(score: float) -> str:
    """A+ >= 90 | A >= 80 | B >= 70 | C >= 60 | D below. Lower edges inclusive."""
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return 'D'


def score_tasks(tasks: Sequence[ScoringTask]) -> ScoreResult:
    """
    Compute the productivity score for one employee.

    Args:
        tasks: Every non-deleted task assigned to the employee, any status.

    Returns:
        ScoreResult; all fields None when ``tasks`` is empty so "unscored"
        stays distinguishable from a score of 0.
    """
    total_assigned = len(tasks)
    if total_assigned == 0:
        return ScoreResult()

    completed = [t for t in tasks if t.is_completed]
    total_completed = len(completed)
    completion_rate = total_completed / total_assigned

    # Tasks without a deadline cannot be judged late
    with_due_date = [t for t in completed if t.due_date is not None]
    total_on_time = len([
        t for t in with_due_date
        if t.completed_at is not None and t.completed_at <= t.due_date
    ])
    on_time_rate = total_on_time / len(with_due_date) if with_due_date else 0.0

    avg_complexity = sum(t.complexity_score for t in tasks) / total_assigned

    raw_score = (
        completion_rate * WEIGHT_COMPLETION
        + on_time_rate * WEIGHT_ON_TIME
        + (avg_complexity / MAX_COMPLEXITY) * WEIGHT_COMPLEXITY
    )
    score = round_half_up(raw_score, 1)

    return ScoreResult(
        score=score,
        grade=score_to_grade(score),
        breakdown=ScoreBreakdown(
            completion_rate=round_half_up(completion_rate, 3),
            on_time_rate=round_half_up(on_time_rate, 3),
            avg_complexity=round_half_up(avg_complexity, 2),
            total_assigned=total_assigned,
            total_completed=total_completed,
            total_on_time=total_on_time,
        ),
    )
