#!/usr/bin/env python3
"""
Scoring Module - deterministic productivity scoring and ranking.

Public API (pure, no I/O):
- score_tasks / score_to_grade: productivity score and letter grade
- compute_rank / compute_skill_overlap: candidate fit for a task
- detect_gaps / skill_union: skill gap analysis
- analyze_trend: recent-vs-prior score direction

The modules are split by responsibility:

- models.py: Data structures (ScoreResult, ScoreBreakdown, TrendAnalysis, ...)
- productivity.py: Productivity score formula and grade mapping
- ranking.py: Recommendation rank formula and skill overlap
- skill_gap.py: Skill union and gap/coverage calculation
- trend.py: Trend windowing and classification
- service.py: ScoreService orchestrator (cache + history store); import it
  from core.scorer.service directly, it pulls in the database layer
"""

from core.scorer.models import (
    ScoringTask,
    ScoreBreakdown,
    ScoreResult,
    ScoreLogEntry,
    TrendAnalysis,
    ProductivityScoreView,
    RecommendationEntry,
    SkillGapResult,
)
from core.scorer.productivity import score_tasks, score_to_grade, round_half_up
from core.scorer.ranking import compute_rank, compute_skill_overlap
from core.scorer.skill_gap import detect_gaps, skill_union, normalize_skills
from core.scorer.trend import analyze_trend

__all__ = [
    'ScoringTask',
    'ScoreBreakdown',
    'ScoreResult',
    'ScoreLogEntry',
    'TrendAnalysis',
    'ProductivityScoreView',
    'RecommendationEntry',
    'SkillGapResult',
    'score_tasks',
    'score_to_grade',
    'round_half_up',
    'compute_rank',
    'compute_skill_overlap',
    'detect_gaps',
    'skill_union',
    'normalize_skills',
    'analyze_trend',
]
