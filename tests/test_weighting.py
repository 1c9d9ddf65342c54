"""
Submission weights: completeness, recency and clamping.
Run with: python -m pytest tests/test_weighting.py -v
"""
import unittest
from datetime import datetime, timedelta, timezone

from erasmus_journey.analyzer.extractors import extract
from erasmus_journey.analyzer.weighting import (
    MAX_WEIGHT,
    MIN_WEIGHT,
    calculate_weight,
    combine_weight,
    completeness_factor,
    determine_contribution_type,
    recency_factor,
)
from erasmus_journey.models.extraction_models import AccommodationFacts, GenericFacts

from factories import make_submission

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestRecency(unittest.TestCase):
    def test_new_submission_full_weight(self):
        self.assertEqual(recency_factor(0), 1.0)

    def test_one_year_hits_floor(self):
        self.assertEqual(recency_factor(365), 0.5)
        self.assertEqual(recency_factor(1000), 0.5)

    def test_linear_decay(self):
        self.assertAlmostEqual(recency_factor(73), 0.8)

    def test_future_timestamp_counts_as_new(self):
        self.assertEqual(recency_factor(-10), 1.0)


class TestCompleteness(unittest.TestCase):
    def test_partial(self):
        facts = AccommodationFacts(accommodation_type="flat")
        self.assertEqual(completeness_factor("accommodation", facts), 0.5)

    def test_type_without_requirements(self):
        self.assertEqual(completeness_factor("story", GenericFacts()), 1.0)


class TestCombinedWeight(unittest.TestCase):
    def test_bounds(self):
        for completeness in (0.0, 0.25, 1.0):
            for age in (-5, 0, 100, 365, 5000):
                weight = combine_weight(completeness, age)
                self.assertGreaterEqual(weight, MIN_WEIGHT)
                self.assertLessEqual(weight, MAX_WEIGHT)

    def test_empty_submission_clamped_to_minimum(self):
        self.assertEqual(combine_weight(0.0, 0), MIN_WEIGHT)

    def test_old_complete_submission(self):
        submission = make_submission(
            "accommodation",
            {"accommodationType": "flat", "monthlyRent": 400},
            created_at=NOW - timedelta(days=365),
        )
        self.assertEqual(calculate_weight(submission, extract(submission), NOW), 0.5)

    def test_naive_timestamp_treated_as_utc(self):
        submission = make_submission(
            "accommodation",
            {"accommodationType": "flat", "monthlyRent": 400},
            created_at=NOW.replace(tzinfo=None),
        )
        self.assertEqual(calculate_weight(submission, extract(submission), NOW), 1.0)


class TestContributionType(unittest.TestCase):
    def test_classification(self):
        self.assertEqual(determine_contribution_type("basic-info"), "primary")
        self.assertEqual(determine_contribution_type("experience"), "primary")
        self.assertEqual(determine_contribution_type("accommodation"), "supporting")
        self.assertEqual(determine_contribution_type("course-matching"), "supporting")
        self.assertEqual(determine_contribution_type("quick-tip"), "reference")


if __name__ == "__main__":
    unittest.main()
