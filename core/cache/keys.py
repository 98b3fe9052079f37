"""
Cache key policy.

Keys are ``{prefix}:{org}:{namespace}:{discriminator}``. The org segment is
always present, so a key built for one tenant can never be read by another.
"""
from typing import Any, List, Optional

from core.config_loader import CacheConfig

SCORE = "score"
TREND = "trend"
SKILL_GAP = "skill_gap"
RECOMMEND = "recommend"
DASHBOARD = "dashboard"

# Explanation-layer variants, written by the enrichment consumer
AI_SCORE = "ai:score"
AI_TREND = "ai:trend"
AI_SKILL_GAP = "ai:skill_gap"
AI_RECOMMEND = "ai:recommend"

EMPLOYEE_NAMESPACES = (SCORE, TREND, SKILL_GAP, AI_SCORE, AI_TREND, AI_SKILL_GAP)
TASK_NAMESPACES = (RECOMMEND, AI_RECOMMEND)

DEFAULT_PREFIX = "hrms"


def cache_key(org_id: Any, namespace: str, discriminator: Any, prefix: str = DEFAULT_PREFIX) -> str:
    return f"{prefix}:{org_id}:{namespace}:{discriminator}"


def employee_keys(org_id: Any, employee_id: Any, prefix: str = DEFAULT_PREFIX) -> List[str]:
    """Every employee-scoped view, including enrichment variants."""
    return [cache_key(org_id, ns, employee_id, prefix) for ns in EMPLOYEE_NAMESPACES]


def invalidation_keys(
    org_id: Any,
    employee_id: Any,
    task_id: Optional[Any] = None,
    prefix: str = DEFAULT_PREFIX
) -> List[str]:
    """Keys made stale by a rescore of ``employee_id`` triggered by ``task_id``."""
    keys = employee_keys(org_id, employee_id, prefix)
    if task_id is not None:
        keys.extend(cache_key(org_id, ns, task_id, prefix) for ns in TASK_NAMESPACES)
    keys.append(cache_key(org_id, DASHBOARD, org_id, prefix))
    return keys


def ttl_for(namespace: str, config: CacheConfig) -> int:
    if namespace.startswith("ai:"):
        return config.enrichment_ttl_seconds
    return {
        SCORE: config.score_ttl_seconds,
        TREND: config.trend_ttl_seconds,
        SKILL_GAP: config.skill_gap_ttl_seconds,
        RECOMMEND: config.recommend_ttl_seconds,
        DASHBOARD: config.dashboard_ttl_seconds,
    }[namespace]
