"""
SQL submission store: location and status matching, isolated fetches.
Run with: python -m pytest tests/test_submission_repository.py -v
"""
import unittest
from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from erasmus_journey.repositories.submission_repository import SqlSubmissionRepository

from factories import PRAGUE, make_engine, make_submission

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class RepositoryTestCase(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.session = Session(self.engine)
        self.repo = SqlSubmissionRepository(self.session)

    def tearDown(self):
        self.session.close()
        self.engine.dispose()

    def add(self, *submissions):
        self.session.add_all(submissions)
        self.session.commit()
        return [s.id for s in submissions]


class TestFindSubmissions(RepositoryTestCase):
    def test_location_spacing_variants_match(self):
        ids = self.add(
            make_submission("experience", {}, location="Prague,Czech Republic"),
            make_submission("experience", {}, location=" Prague ,Czech Republic  "),
            make_submission("experience", {}),
        )
        found = self.repo.find_submissions(location=PRAGUE)
        self.assertEqual({s.id for s in found}, set(ids))

        found = self.repo.find_submissions(location="Prague,Czech Republic")
        self.assertEqual(len(found), 3)

    def test_substring_locations_do_not_match(self):
        self.add(
            make_submission("experience", {}, location="New Prague, Czech Republic"),
            make_submission("experience", {}, location="Prague, Czech Republic East"),
        )
        self.assertEqual(self.repo.find_submissions(location=PRAGUE), [])

    def test_unparseable_location_finds_nothing(self):
        self.add(make_submission("experience", {}))
        self.assertEqual(self.repo.find_submissions(location="Prague"), [])

    def test_status_case_is_ignored(self):
        self.add(
            make_submission("experience", {}, status="published"),
            make_submission("experience", {}, status="Approved"),
            make_submission("experience", {}, status="Draft"),
        )
        found = self.repo.find_submissions(location=PRAGUE)
        self.assertEqual(sorted(s.status for s in found), ["Approved", "published"])

        found = self.repo.find_submissions(statuses=["draft"])
        self.assertEqual([s.status for s in found], ["Draft"])

    def test_limit_applies_after_location_match(self):
        self.add(
            *[
                make_submission(
                    "experience",
                    {},
                    location="New Prague, Czech Republic",
                    created_at=NOW - timedelta(days=i),
                )
                for i in range(3)
            ],
            make_submission("experience", {}, created_at=NOW - timedelta(days=10), title="Old"),
        )
        found = self.repo.find_submissions(location=PRAGUE, limit=1)
        self.assertEqual([s.title for s in found], ["Old"])


class TestGetManyIsolated(RepositoryTestCase):
    def test_rows_come_back_detached(self):
        ids = self.add(
            make_submission("experience", {"overallRating": 4}, title="One"),
            make_submission("accommodation", {"monthlyRent": 300}, title="Two"),
        )
        self.session.expunge_all()

        rows = self.repo.get_many_isolated(ids)

        self.assertEqual(sorted(s.title for s in rows), ["One", "Two"])
        self.assertEqual(len(self.session.identity_map), 0)

    def test_empty_ids(self):
        self.assertEqual(self.repo.get_many_isolated([]), [])


if __name__ == "__main__":
    unittest.main()
