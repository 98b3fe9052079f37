#!/usr/bin/env python3
"""
Trend Analysis - Recent vs. prior window comparison over score history.

Windows (relative to ``now``):
    recent   -> [now - recent_days, now]
    previous -> [now - lookback_days, now - recent_days)

delta % = ((recentAvg - previousAvg) / previousAvg) * 100, rounded to 1 d.p.

    'up'   -> delta >  threshold
    'down' -> delta < -threshold
    'flat' -> otherwise

When either window is empty the result is 'insufficient_data' with no delta
and no averages.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Tuple

from core.config_loader import TrendConfig
from core.scorer.models import TrendAnalysis
from core.scorer.productivity import round_half_up

INSUFFICIENT_DATA = TrendAnalysis(trend='insufficient_data')


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def split_windows(
    entries: Iterable[Tuple[datetime, Optional[float]]],
    now: datetime,
    policy: TrendConfig
) -> Tuple[List[float], List[float]]:
    """Bucket (computed_at, score) pairs into (recent, previous) score lists."""
    recent_start = now - timedelta(days=policy.recent_days)
    lookback_start = now - timedelta(days=policy.lookback_days)

    recent: List[float] = []
    previous: List[float] = []
    for computed_at, score in entries:
        if score is None or computed_at > now or computed_at < lookback_start:
            continue
        if computed_at >= recent_start:
            recent.append(score)
        else:
            previous.append(score)
    return recent, previous


def analyze_trend(
    entries: Iterable[Tuple[datetime, Optional[float]]],
    now: datetime,
    policy: Optional[TrendConfig] = None
) -> TrendAnalysis:
    """
    Classify the direction of an employee's scores.

    Args:
        entries: (computed_at, score) pairs; None scores are ignored
        now: Reference instant for both windows
        policy: Window sizes and threshold (defaults: 7 / 30 days, +-1 %)
    """
    policy = policy or TrendConfig()
    recent, previous = split_windows(entries, now, policy)

    if not recent or not previous:
        return INSUFFICIENT_DATA

    recent_avg = _mean(recent)
    previous_avg = _mean(previous)

    if previous_avg == 0:
        # A zero baseline has no relative change to speak of
        return INSUFFICIENT_DATA

    delta = round_half_up(((recent_avg - previous_avg) / previous_avg) * 100, 1)

    if delta > policy.threshold_pct:
        trend = 'up'
    elif delta < -policy.threshold_pct:
        trend = 'down'
    else:
        trend = 'flat'

    return TrendAnalysis(
        trend=trend,
        delta=delta,
        recent_avg=round_half_up(recent_avg, 1),
        previous_avg=round_half_up(previous_avg, 1),
    )
