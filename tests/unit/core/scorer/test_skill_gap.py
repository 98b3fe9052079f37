#!/usr/bin/env python3
"""
Test suite for skill gap detection.
"""

import unittest

from core.scorer.skill_gap import detect_gaps, normalize_skills, skill_union


class TestSkillGap(unittest.TestCase):

    def test_empty_union_is_full_coverage(self):
        self.assertEqual(detect_gaps([], []), ([], 1.0))
        self.assertEqual(detect_gaps(["python", "sql"], []), ([], 1.0))

    def test_gaps_are_case_insensitive(self):
        gaps, coverage = detect_gaps(["Python"], ["python", "Docker"])
        self.assertEqual(gaps, ["docker"])
        self.assertEqual(coverage, 0.5)

    def test_coverage_rounded_to_three_decimals(self):
        gaps, coverage = detect_gaps(["a"], ["a", "b", "c"])
        self.assertEqual(gaps, ["b", "c"])
        self.assertEqual(coverage, 0.333)

    def test_no_gaps(self):
        self.assertEqual(detect_gaps(["a", "b", "c"], ["b", "a"]), ([], 1.0))

    def test_union_dedupes_across_lists_in_first_seen_order(self):
        union = skill_union([["Python", "SQL"], ["sql", "Docker"], [], [" python "]])
        self.assertEqual(union, ["python", "sql", "docker"])

    def test_normalize_drops_blank_entries(self):
        self.assertEqual(normalize_skills(["", "  ", "Go"]), ["go"])


if __name__ == '__main__':
    unittest.main()
