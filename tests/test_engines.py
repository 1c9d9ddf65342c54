"""
Statistics helpers and facet engines.
Run with: python -m pytest tests/test_engines.py -v
"""
import unittest

from erasmus_journey.analyzer.accommodation_engine import compute_accommodation
from erasmus_journey.analyzer.course_engine import compute_courses
from erasmus_journey.analyzer.demographics_engine import compute_demographics
from erasmus_journey.analyzer.expenses_engine import compute_living_expenses
from erasmus_journey.analyzer.rating_engine import compute_average_rating
from erasmus_journey.analyzer.stats import frequency_table, median, numeric_stats, top_n
from erasmus_journey.models.extraction_models import (
    AccommodationFacts,
    BasicInfoFacts,
    CourseFacts,
    ExperienceFacts,
    LivingExpenseFacts,
)


class TestStats(unittest.TestCase):
    def test_median_takes_upper_middle(self):
        self.assertEqual(median([4, 1, 3, 2]), 3)
        self.assertEqual(median([5, 1, 3]), 3)

    def test_empty_inputs(self):
        self.assertIsNone(median([]))
        self.assertIsNone(numeric_stats([]))

    def test_average_within_range(self):
        stats = numeric_stats([120.5, 80, 300, 99.99])
        self.assertLessEqual(stats.min, stats.average)
        self.assertLessEqual(stats.average, stats.max)
        self.assertEqual(stats.sample_size, 4)

    def test_frequency_skips_missing(self):
        self.assertEqual(frequency_table(["a", None, "b", "a"]), {"a": 2, "b": 1})

    def test_top_n_ties_keep_first_seen(self):
        counts = frequency_table(["dorm", "flat", "studio", "flat", "dorm", "host"])
        self.assertEqual(top_n(counts, 3), [("dorm", 2), ("flat", 2), ("studio", 1)])


class TestEmptyEngines(unittest.TestCase):
    def test_every_engine_returns_none(self):
        self.assertIsNone(compute_accommodation([]))
        self.assertIsNone(compute_courses([]))
        self.assertIsNone(compute_living_expenses([]))
        self.assertIsNone(compute_average_rating([]))
        self.assertIsNone(compute_demographics([]))


class TestAccommodationEngine(unittest.TestCase):
    def test_rent_ignores_missing_values(self):
        summary = compute_accommodation(
            [
                AccommodationFacts(accommodation_type="flat", monthly_rent=320),
                AccommodationFacts(accommodation_type="dorm", monthly_rent=480),
                AccommodationFacts(accommodation_type="flat"),
            ]
        )
        self.assertEqual(summary.total_submissions, 3)
        self.assertEqual(summary.average_rent, 400)
        self.assertEqual(summary.rent_range.min, 320)
        self.assertEqual(summary.rent_range.max, 480)
        self.assertEqual(summary.rent_sample_size, 2)
        self.assertEqual(summary.accommodation_types, {"flat": 2, "dorm": 1})
        self.assertEqual(summary.popular_options[0], ("flat", 2))
        self.assertIsNone(summary.average_rating)

    def test_no_rents_at_all(self):
        summary = compute_accommodation([AccommodationFacts(accommodation_type="flat")])
        self.assertIsNone(summary.average_rent)
        self.assertIsNone(summary.rent_range)
        self.assertEqual(summary.rent_sample_size, 0)


class TestOtherEngines(unittest.TestCase):
    def test_living_expenses_per_category_samples(self):
        summary = compute_living_expenses(
            [
                LivingExpenseFacts(food=200, total_monthly_budget=800),
                LivingExpenseFacts(food=300),
            ]
        )
        self.assertEqual(summary.food.sample_size, 2)
        self.assertEqual(summary.food.average, 250)
        self.assertEqual(summary.total.sample_size, 1)
        self.assertIsNone(summary.rent)

    def test_course_summary(self):
        summary = compute_courses(
            [
                CourseFacts(host_department="Law", host_course_count=4, difficulty="hard"),
                CourseFacts(host_department="Law", host_course_count=6),
                CourseFacts(host_department="Economics"),
            ]
        )
        self.assertEqual(summary.popular_departments[0], ("Law", 2))
        self.assertEqual(summary.average_course_count, 5)
        self.assertEqual(summary.difficulty_distribution, {"hard": 1})

    def test_average_rating(self):
        facts = [ExperienceFacts(overall_rating=4), ExperienceFacts(), ExperienceFacts(overall_rating=5)]
        self.assertEqual(compute_average_rating(facts), 4.5)

    def test_demographics(self):
        summary = compute_demographics(
            [
                BasicInfoFacts(nationality="German", study_level="bachelor"),
                BasicInfoFacts(nationality="Spanish", study_level="master"),
                BasicInfoFacts(nationality="German"),
            ]
        )
        self.assertEqual(summary.total_students, 3)
        self.assertEqual(summary.top_nationalities, [("German", 2), ("Spanish", 1)])
        self.assertEqual(summary.study_level_distribution, {"bachelor": 1, "master": 1})


if __name__ == "__main__":
    unittest.main()
