"""
Recommendation Module - candidate ranking for tasks and skill gap detection.

Both read paths are cache-aside over live employee/task pools; the formulas
themselves live in core.scorer.ranking and core.scorer.skill_gap.
"""
from core.recommender.service import RecommendationService

__all__ = ['RecommendationService']
