"""
Field extraction from drifting submission payloads.
Run with: python -m pytest tests/test_extractors.py -v
"""
import unittest

from erasmus_journey.analyzer.extractors import (
    extract,
    extract_accommodation,
    extract_course,
    extract_experience,
    extract_living_expenses,
    load_payload,
    present_fields,
)
from erasmus_journey.models.extraction_models import AccommodationFacts, GenericFacts

from factories import make_submission


class TestMoneyPrecedence(unittest.TestCase):
    def test_cents_beat_euros(self):
        facts = extract_accommodation({"monthlyRentCents": 65000, "monthlyRent": 500})
        self.assertEqual(facts.monthly_rent, 650.0)

    def test_top_level_beats_nested(self):
        facts = extract_accommodation(
            {"monthlyRent": 420, "accommodation": {"monthlyRent": 999}}
        )
        self.assertEqual(facts.monthly_rent, 420.0)

    def test_nested_cents(self):
        facts = extract_accommodation({"accommodation": {"monthlyRentCents": 35050}})
        self.assertEqual(facts.monthly_rent, 350.5)

    def test_nested_euros_last_resort(self):
        facts = extract_accommodation({"accommodation": {"monthlyRent": "300"}})
        self.assertEqual(facts.monthly_rent, 300.0)

    def test_malformed_candidate_falls_through(self):
        facts = extract_accommodation({"monthlyRentCents": "abc", "monthlyRent": 480})
        self.assertEqual(facts.monthly_rent, 480.0)

    def test_non_positive_amount_is_missing(self):
        self.assertIsNone(extract_accommodation({"monthlyRent": 0}).monthly_rent)
        self.assertIsNone(extract_accommodation({"monthlyRent": -50}).monthly_rent)

    def test_boolean_is_not_money(self):
        self.assertIsNone(extract_accommodation({"monthlyRent": True}).monthly_rent)

    def test_living_expense_categories(self):
        facts = extract_living_expenses(
            {
                "monthlyFoodCents": 20000,
                "livingExpenses": {"monthlyTransport": 30, "totalMonthlyBudget": 900},
            }
        )
        self.assertEqual(facts.food, 200.0)
        self.assertEqual(facts.transport, 30.0)
        self.assertEqual(facts.total_monthly_budget, 900.0)
        self.assertIsNone(facts.rent)
        self.assertIsNone(facts.entertainment)


class TestOtherKinds(unittest.TestCase):
    def test_rating_bounds(self):
        self.assertEqual(extract_experience({"overallRating": 5}).overall_rating, 5.0)
        self.assertEqual(extract_experience({"overallRating": "4"}).overall_rating, 4.0)
        self.assertIsNone(extract_experience({"overallRating": 7}).overall_rating)
        self.assertIsNone(extract_experience({"overallRating": 0}).overall_rating)

    def test_rating_fallback_path(self):
        facts = extract_experience({"overallRating": 9, "ratings": {"overallRating": 3}})
        self.assertEqual(facts.overall_rating, 3.0)

    def test_course_count_from_list(self):
        facts = extract_course({"courses": [{"name": "A"}, {"name": "B"}, {"name": "C"}]})
        self.assertEqual(facts.host_course_count, 3)

    def test_fractional_count_rejected(self):
        self.assertIsNone(extract_course({"courseCount": 2.5}).host_course_count)

    def test_blank_text_is_missing(self):
        self.assertIsNone(extract_experience({"advice": "   "}).advice)
        self.assertEqual(extract_experience({"advice": "  Go!  "}).advice, "Go!")

    def test_present_fields(self):
        facts = AccommodationFacts(accommodation_type="flat", monthly_rent=None)
        self.assertEqual(present_fields(facts), {"accommodation_type"})


class TestPayloads(unittest.TestCase):
    def test_unparseable_payload_yields_empty_facts(self):
        submission = make_submission("accommodation")
        submission.data_json = "{not json"
        self.assertEqual(load_payload(submission), {})
        facts = extract(submission)
        self.assertIsInstance(facts, AccommodationFacts)
        self.assertIsNone(facts.monthly_rent)

    def test_non_object_payload(self):
        submission = make_submission("accommodation", data=[1, 2, 3])
        self.assertEqual(load_payload(submission), {})

    def test_unknown_type_is_generic(self):
        facts = extract(make_submission("quick-tip", {"tip": "Buy a tram pass"}))
        self.assertIsInstance(facts, GenericFacts)
        self.assertEqual(facts.text, "Buy a tram pass")


if __name__ == "__main__":
    unittest.main()
