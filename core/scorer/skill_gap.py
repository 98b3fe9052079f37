"""Skill gap detection - set difference over case-normalised skill collections."""

from typing import Iterable, List, Tuple

from core.scorer.productivity import round_half_up


def normalize_skills(skills: Iterable[str]) -> List[str]:
    """Lower-case, strip and de-duplicate, keeping first-seen order."""
    seen = []
    for skill in skills:
        key = skill.strip().lower()
        if key and key not in seen:
            seen.append(key)
    return seen


def skill_union(skill_lists: Iterable[Iterable[str]]) -> List[str]:
    """Union of several required-skill lists, normalised."""
    return normalize_skills(skill for skills in skill_lists for skill in skills)


def detect_gaps(current_skills: Iterable[str], required_union: Iterable[str]) -> Tuple[List[str], float]:
    """
    Return (gap_skills, coverage_rate).

    coverage_rate is (|required| - |gaps|) / |required|, rounded to 3
    decimals, and exactly 1.0 when nothing is required.
    """
    required = normalize_skills(required_union)
    owned = set(normalize_skills(current_skills))

    gaps = [s for s in required if s not in owned]

    if not required:
        return gaps, 1.0

    coverage = (len(required) - len(gaps)) / len(required)
    return gaps, round_half_up(coverage, 3)
