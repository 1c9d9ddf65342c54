"""
Stale-while-revalidate reads and the background refresh queue.
Run with: python -m pytest tests/test_refresh.py -v
"""
import asyncio
import json
import threading
import time
import unittest
from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import patch

from sqlmodel import Session

from erasmus_journey.config import settings
from erasmus_journey.core.errors import RefreshFailure
from erasmus_journey.models.submission_models import Submission
from erasmus_journey.repositories.destination_repository import SqlDestinationRepository
from erasmus_journey.repositories.submission_repository import SqlSubmissionRepository
from erasmus_journey.scheduler.refresh_queue import RefreshQueue
from erasmus_journey.services.destination_service import (
    DestinationService,
    build_destination_service,
)
from erasmus_journey.services.presentation import load_aggregation

from factories import make_engine, make_submission


class SlowSqlSubmissions(SqlSubmissionRepository):
    """SQL store whose isolated fetch outlives the refresh timeout."""

    def __init__(self, session: Session):
        super().__init__(session)
        self.finished = threading.Event()
        self.rows: List[Submission] = []

    def get_many_isolated(self, ids) -> List[Submission]:
        time.sleep(0.3)
        self.rows = super().get_many_isolated(ids)
        self.finished.set()
        return self.rows


class RefreshTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.engine = make_engine()
        self.session = Session(self.engine)
        self.experience = make_submission("experience", {"overallRating": 5, "advice": "Great"})
        self.session.add(self.experience)
        self.session.commit()

        self.queue = RefreshQueue(self.refresh_in_own_session)
        self.queue.start()
        self.destinations = SqlDestinationRepository(self.session)
        self.service = DestinationService(
            SqlSubmissionRepository(self.session), self.destinations, self.queue
        )
        self.destination = self.service.create_from_submissions("Prague", "Czech Republic")

    async def asyncTearDown(self):
        await self.queue.stop()
        self.session.close()
        self.engine.dispose()

    async def refresh_in_own_session(self, destination_id: str):
        with Session(self.engine) as session:
            await build_destination_service(session).refresh(destination_id)

    def age_destination(self, hours: float):
        self.destination.last_data_update = datetime.now(timezone.utc) - timedelta(hours=hours)
        self.destination = self.destinations.save(self.destination)

    def change_rating(self, rating: int):
        self.experience.data_json = json.dumps({"overallRating": rating, "advice": "Great"})
        self.session.add(self.experience)
        self.session.commit()


class TestStaleRead(RefreshTestCase):
    async def test_stale_read_returns_cached_then_refreshes(self):
        self.age_destination(settings.stale_after_hours + 1)
        stale_timestamp = self.destination.last_data_update
        self.change_rating(3)

        view = self.service.get_destination("prague-czech-republic")
        self.assertEqual(view.aggregated_data["average_rating"], 5)
        self.assertEqual(view.last_data_update, stale_timestamp)

        await self.queue.join()

        self.session.expire_all()
        refreshed = self.destinations.get(self.destination.id)
        self.assertGreater(refreshed.last_data_update, stale_timestamp)
        self.assertEqual(load_aggregation(refreshed).average_rating, 3)

    async def test_fresh_read_does_not_enqueue(self):
        self.assertFalse(self.service.schedule_refresh(self.destination))
        self.assertTrue(self.queue.enqueue(self.destination.id))
        await self.queue.join()

    async def test_admin_read_enqueues_stale(self):
        self.age_destination(settings.stale_after_hours * 2)
        destination = self.service.get_with_aggregations(self.destination.id)
        self.assertEqual(destination.id, self.destination.id)
        self.assertFalse(self.queue.enqueue(self.destination.id))
        await self.queue.join()

    async def test_stale_sweep(self):
        self.age_destination(settings.stale_after_hours + 5)
        self.assertEqual(self.service.schedule_stale_refreshes(), 1)
        await self.queue.join()
        self.session.expire_all()
        self.assertEqual(self.service.schedule_stale_refreshes(), 0)


class TestOverlappingRefreshes(RefreshTestCase):
    async def test_pending_ids_are_deduplicated(self):
        self.age_destination(settings.stale_after_hours + 1)
        self.assertTrue(self.service.schedule_refresh(self.destination))
        self.assertFalse(self.service.schedule_refresh(self.destination))
        await self.queue.join()

    async def test_repeated_refreshes_converge(self):
        self.change_rating(4)
        first = await self.service.refresh(self.destination.id)
        first_json = first.aggregated_json
        second = await self.service.refresh(self.destination.id)
        self.assertEqual(second.aggregated_json, first_json)
        self.assertEqual(load_aggregation(second).average_rating, 4)


class TestRefreshFailures(RefreshTestCase):
    async def test_fetch_timeout_leaves_caller_session_alone(self):
        experience_id = self.experience.id
        caller = Session(self.engine)
        submissions = SlowSqlSubmissions(caller)
        service = DestinationService(submissions, SqlDestinationRepository(caller))

        with patch.object(settings, "submission_fetch_timeout_seconds", 0.05):
            with self.assertRaises(RefreshFailure):
                await service.refresh(self.destination.id)
        # the job scope closes its session while the fetch thread is still running
        caller.close()
        self.assertFalse(submissions.finished.is_set())

        await asyncio.to_thread(submissions.finished.wait, 2)
        self.assertTrue(submissions.finished.is_set())
        self.assertEqual([s.id for s in submissions.rows], [experience_id])
        self.assertEqual(len(caller.identity_map), 0)

    async def test_worker_survives_failing_handler(self):
        calls = []

        async def failing(destination_id):
            calls.append(destination_id)
            raise RefreshFailure(destination_id, "boom")

        queue = RefreshQueue(failing)
        queue.start()
        try:
            self.assertTrue(queue.enqueue("abc"))
            await queue.join()
            self.assertTrue(queue.running)
            # a failed refresh can be requested again
            self.assertTrue(queue.enqueue("abc"))
            await queue.join()
            self.assertEqual(calls, ["abc", "abc"])
        finally:
            await queue.stop()
        self.assertFalse(queue.running)

    async def test_no_eligible_links_keeps_cache(self):
        cached = self.destination.aggregated_json
        self.experience.status = "ARCHIVED"
        self.session.add(self.experience)
        self.session.commit()

        destination = await self.service.refresh(self.destination.id)
        self.assertEqual(destination.aggregated_json, cached)


if __name__ == "__main__":
    unittest.main()
