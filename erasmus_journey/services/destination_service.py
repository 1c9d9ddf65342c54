"""Erasmus Journey — Destination Record Manager.

Turns orchestrator output into persisted destinations:
  fetch eligible submissions → aggregate → upsert destination → link → mark processed

and serves reads with stale-while-revalidate refreshes.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Dict, List, Optional

from erasmus_journey.config import settings
from erasmus_journey.analyzer.pipeline import (
    aggregate_submissions,
    group_by_location,
    is_eligible,
    is_stale,
)
from erasmus_journey.core.errors import DestinationNotFound, NoSubmissionsFound, RefreshFailure
from erasmus_journey.models.aggregation_models import (
    DestinationFilters,
    DestinationListItem,
    DestinationOverrides,
    DestinationView,
)
from erasmus_journey.models.destination_models import Destination, DestinationStatus, make_slug
from erasmus_journey.models.submission_models import Submission, format_location, parse_location
from erasmus_journey.repositories.base import DestinationRepository, SubmissionRepository
from erasmus_journey.repositories.destination_repository import SqlDestinationRepository
from erasmus_journey.repositories.submission_repository import SqlSubmissionRepository
from erasmus_journey.services.presentation import (
    apply_overrides,
    default_description,
    load_aggregation,
    to_list_item,
)
from erasmus_journey.core.logging import get_logger

if TYPE_CHECKING:
    from erasmus_journey.scheduler.refresh_queue import RefreshQueue

logger = get_logger("services.destinations")


def _canonical_order(submissions: List[Submission]) -> List[Submission]:
    """Oldest first, id as tie-break, so reruns see the same iteration order."""
    unique: Dict[str, Submission] = {s.id: s for s in submissions}

    def key(s: Submission):
        created = s.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return created, s.id

    return sorted(unique.values(), key=key)


class DestinationService:
    """Creates, refreshes and reads destinations over injected stores."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        destinations: DestinationRepository,
        refresh_queue: Optional["RefreshQueue"] = None,
    ):
        self.submissions = submissions
        self.destinations = destinations
        self.refresh_queue = refresh_queue

    # ── Writes ──

    def create_from_submissions(
        self,
        city: str,
        country: str,
        overrides: Optional[DestinationOverrides] = None,
    ) -> Destination:
        """Aggregate a location's submissions into its destination.

        The eligible set is every unprocessed published submission at the
        location plus those already linked to the destination. Re-running on
        an unchanged set rewrites the same snapshot and adds no links.
        """
        city, country = city.strip(), country.strip()
        if not city or not country:
            raise ValueError("City and country are required")
        location = format_location(city, country)

        pending = self.submissions.find_submissions(location=location, processed=False)
        existing = self.destinations.get_by_city_country(city, country)
        linked: List[Submission] = []
        if existing is not None:
            linked = [
                s
                for s in self.submissions.get_many(self.destinations.linked_submission_ids(existing.id))
                if is_eligible(s)
            ]

        eligible = _canonical_order(pending + linked)
        if not eligible:
            raise NoSubmissionsFound(city, country)

        run = aggregate_submissions(eligible)
        now = datetime.now(timezone.utc)

        destination = existing or Destination(
            slug=make_slug(city, country),
            city=city,
            country=country,
            status=DestinationStatus.PUBLISHED.value,
        )
        destination.name = location
        destination.description = default_description(city, country, len(eligible))
        destination.aggregated_json = run.aggregation.model_dump_json()
        destination.submission_count = len(eligible)
        destination.last_data_update = now
        if overrides is not None:
            self._store_overrides(destination, overrides)

        destination = self.destinations.save(destination)
        self.destinations.link_submissions(destination.id, run.contributions)
        self.submissions.mark_processed([s.id for s in pending])

        logger.info(
            f"Destination {location} built from {len(eligible)} submissions ({len(pending)} new)",
            extra={"destination_id": destination.id, "location": location},
        )
        return destination

    def generate_all(self) -> List[Destination]:
        """Build or update a destination for every location with pending submissions."""
        groups = group_by_location(self.submissions.find_submissions(processed=False))
        built: List[Destination] = []
        for city, country in sorted(groups):
            try:
                built.append(self.create_from_submissions(city, country))
            except NoSubmissionsFound:
                location = format_location(city, country)
                logger.warning(
                    f"Skipping {location}: no eligible submissions on re-read",
                    extra={"location": location},
                )
        logger.info(f"Generated {len(built)} destinations")
        return built

    def update_overrides(self, destination_id: str, overrides: DestinationOverrides) -> Destination:
        """Replace admin overrides. The aggregation and its timestamp are untouched."""
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise DestinationNotFound(destination_id)
        self._store_overrides(destination, overrides)
        return self.destinations.save(destination)

    @staticmethod
    def _store_overrides(destination: Destination, overrides: DestinationOverrides) -> None:
        destination.overrides_json = overrides.model_dump_json(exclude_none=True)
        # featured/status are curation columns, not aggregation fields
        if overrides.featured is not None:
            destination.featured = overrides.featured
        if overrides.status is not None:
            destination.status = overrides.status

    # ── Refresh ──

    async def refresh(self, destination_id: str) -> Destination:
        """Recompute a destination from its linked submissions.

        Weights and statistics are recomputed from current submission data;
        link weights stay as recorded. The fetch runs on a worker thread with
        its own session, so a timed-out fetch never touches this service's
        session. Raises RefreshFailure on fetch timeout.
        """
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise DestinationNotFound(destination_id)

        ids = self.destinations.linked_submission_ids(destination_id)
        try:
            submissions = await asyncio.wait_for(
                asyncio.to_thread(self.submissions.get_many_isolated, ids),
                timeout=settings.submission_fetch_timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise RefreshFailure(destination_id, "submission fetch timed out")

        eligible = _canonical_order([s for s in submissions if is_eligible(s)])
        if not eligible:
            logger.warning(
                "No eligible linked submissions; keeping cached aggregation",
                extra={"destination_id": destination_id},
            )
            return destination

        run = aggregate_submissions(eligible)
        destination.aggregated_json = run.aggregation.model_dump_json()
        destination.submission_count = len(eligible)
        destination.last_data_update = datetime.now(timezone.utc)
        return self.destinations.save(destination)

    def schedule_refresh(self, destination: Destination) -> bool:
        """Enqueue a background refresh if the destination is stale."""
        if not is_stale(destination):
            return False
        if self.refresh_queue is None:
            logger.debug(
                "Stale destination but no refresh queue configured",
                extra={"destination_id": destination.id},
            )
            return False
        return self.refresh_queue.enqueue(destination.id)

    def schedule_stale_refreshes(self) -> int:
        """Enqueue every stale published destination. Returns how many were queued."""
        cutoff = datetime.now(timezone.utc) - timedelta(hours=settings.stale_after_hours)
        queued = 0
        for destination in self.destinations.stale_published(cutoff):
            if self.schedule_refresh(destination):
                queued += 1
        return queued

    # ── Reads ──

    def get_with_aggregations(self, destination_id: str) -> Destination:
        """Return the stored record now; refresh in the background if stale."""
        destination = self.destinations.get(destination_id)
        if destination is None:
            raise DestinationNotFound(destination_id)
        self.schedule_refresh(destination)
        return destination

    def resolve(self, key: str, country: Optional[str] = None) -> Optional[Destination]:
        """Find a destination by id, slug, ``"City, Country"`` or (city, country)."""
        if country:
            return self.destinations.get_by_city_country(key.strip(), country.strip())
        destination = self.destinations.get(key) or self.destinations.get_by_slug(key)
        if destination is None:
            parsed = parse_location(key)
            if parsed is not None:
                destination = self.destinations.get_by_city_country(*parsed)
        return destination

    def get_destination(self, key: str, country: Optional[str] = None) -> Optional[DestinationView]:
        """Public read: published destinations only, overrides applied."""
        destination = self.resolve(key, country)
        if destination is None or destination.status != DestinationStatus.PUBLISHED.value:
            return None
        self.schedule_refresh(destination)
        return apply_overrides(destination, load_aggregation(destination))

    def view(self, destination: Destination) -> DestinationView:
        return apply_overrides(destination, load_aggregation(destination))

    def list_destinations(self, filters: Optional[DestinationFilters] = None) -> List[DestinationListItem]:
        """Paginated published destinations.

        Rating is inside the cached snapshot, so ``order_by="rating"`` sorts
        the fetched page in memory (missing ratings count as 0).
        """
        filters = filters or DestinationFilters(limit=settings.default_page_size)
        rows = self.destinations.list_published(
            featured=filters.featured,
            country=filters.country,
            order_by=filters.order_by,
            order=filters.order,
            limit=filters.limit,
            offset=filters.offset,
        )
        items = [to_list_item(d) for d in rows]
        if filters.order_by == "rating":
            items.sort(
                key=lambda item: item.average_rating or 0,
                reverse=filters.order == "desc",
            )
        return items

    def destinations_for_review(self) -> List[Destination]:
        return self.destinations.drafts()


def build_destination_service(session, refresh_queue: Optional["RefreshQueue"] = None) -> DestinationService:
    """DestinationService over the SQL stores for one session."""
    return DestinationService(
        SqlSubmissionRepository(session),
        SqlDestinationRepository(session),
        refresh_queue,
    )
