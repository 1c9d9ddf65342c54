"""Erasmus Journey — SQL Destination Store & Submission Linker."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlmodel import Session, or_, select

from erasmus_journey.models.aggregation_models import Contribution
from erasmus_journey.models.destination_models import (
    Destination,
    DestinationStatus,
    DestinationSubmission,
)
from erasmus_journey.repositories.base import DestinationRepository
from erasmus_journey.core.logging import get_logger

logger = get_logger("repositories.destinations")

# order_by option → column. "rating" lives inside aggregated_json, so the
# query orders by submission count and the service re-sorts the page.
ORDER_COLUMNS = {
    "name": Destination.name,
    "students": Destination.submission_count,
    "updated": Destination.last_data_update,
    "rating": Destination.submission_count,
}


class SqlDestinationRepository(DestinationRepository):
    """DestinationRepository backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, destination_id: str) -> Optional[Destination]:
        return self.session.get(Destination, destination_id)

    def get_by_slug(self, slug: str) -> Optional[Destination]:
        return self.session.exec(
            select(Destination).where(Destination.slug == slug)
        ).first()

    def get_by_city_country(self, city: str, country: str) -> Optional[Destination]:
        return self.session.exec(
            select(Destination).where(
                Destination.city == city,
                Destination.country == country,
            )
        ).first()

    def save(self, destination: Destination) -> Destination:
        destination.updated_at = datetime.now(timezone.utc)
        self.session.add(destination)
        self.session.commit()
        self.session.refresh(destination)
        return destination

    def list_published(
        self,
        featured: Optional[bool] = None,
        country: Optional[str] = None,
        order_by: str = "students",
        order: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> List[Destination]:
        query = select(Destination).where(
            Destination.status == DestinationStatus.PUBLISHED.value
        )
        if featured is not None:
            query = query.where(Destination.featured == featured)
        if country:
            query = query.where(Destination.country == country)

        column = ORDER_COLUMNS.get(order_by, Destination.submission_count)
        primary = column.asc() if order == "asc" else column.desc()  # type: ignore
        query = query.order_by(primary, Destination.name).offset(offset).limit(limit)
        return list(self.session.exec(query).all())

    def drafts(self) -> List[Destination]:
        return list(
            self.session.exec(
                select(Destination)
                .where(Destination.status == DestinationStatus.DRAFT.value)
                .order_by(Destination.created_at.desc())  # type: ignore
            ).all()
        )

    def stale_published(self, updated_before: datetime) -> List[Destination]:
        return list(
            self.session.exec(
                select(Destination).where(
                    Destination.status == DestinationStatus.PUBLISHED.value,
                    or_(
                        Destination.last_data_update == None,  # noqa: E711
                        Destination.last_data_update < updated_before,
                    ),
                )
            ).all()
        )

    def link_submissions(
        self, destination_id: str, contributions: Sequence[Contribution]
    ) -> int:
        existing = set(self.linked_submission_ids(destination_id))
        created = 0
        for c in contributions:
            if c.submission_id in existing:
                # Duplicate link attempt: keep the original weight for provenance
                continue
            self.session.add(
                DestinationSubmission(
                    destination_id=destination_id,
                    submission_id=c.submission_id,
                    contribution_type=c.contribution_type,
                    weight=c.weight,
                )
            )
            existing.add(c.submission_id)
            created += 1
        self.session.commit()
        logger.info(
            f"Linked {created} new submissions ({len(contributions) - created} already linked)",
            extra={"destination_id": destination_id},
        )
        return created

    def links(self, destination_id: str) -> List[DestinationSubmission]:
        return list(
            self.session.exec(
                select(DestinationSubmission).where(
                    DestinationSubmission.destination_id == destination_id
                )
            ).all()
        )
