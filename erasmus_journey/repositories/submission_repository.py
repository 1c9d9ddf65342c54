"""Erasmus Journey — SQL Submission Store."""

from typing import List, Optional, Sequence

from sqlmodel import Session, func, select

from erasmus_journey.models.submission_models import (
    ELIGIBLE_STATUSES,
    Submission,
    parse_location,
)
from erasmus_journey.repositories.base import SubmissionRepository
from erasmus_journey.core.logging import get_logger

logger = get_logger("repositories.submissions")


class SqlSubmissionRepository(SubmissionRepository):
    """SubmissionRepository backed by a SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    def find_submissions(
        self,
        location: Optional[str] = None,
        statuses: Sequence[str] = ELIGIBLE_STATUSES,
        types: Optional[Sequence[str]] = None,
        processed: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[Submission]:
        # Stored statuses are free-form case; compare upper-cased on both sides
        query = select(Submission).where(
            func.upper(Submission.status).in_([s.upper() for s in statuses])
        )
        key = None
        if location is not None:
            key = parse_location(location)
            if key is None:
                return []
            # LIKE narrows the scan; the parsed key decides the match
            city, country = key
            query = query.where(
                Submission.location.contains(city),  # type: ignore
                Submission.location.contains(country),  # type: ignore
            )
        if types:
            query = query.where(Submission.type.in_(list(types)))  # type: ignore
        if processed is not None:
            query = query.where(Submission.processed == processed)
        query = query.order_by(Submission.created_at.desc())  # type: ignore
        if limit is not None and key is None:
            query = query.limit(limit)

        rows = list(self.session.exec(query).all())
        if key is not None:
            rows = [s for s in rows if parse_location(s.location) == key]
            if limit is not None:
                rows = rows[:limit]
        return rows

    def get_many(self, ids: Sequence[str]) -> List[Submission]:
        if not ids:
            return []
        return list(
            self.session.exec(
                select(Submission).where(Submission.id.in_(list(ids)))  # type: ignore
            ).all()
        )

    def get_many_isolated(self, ids: Sequence[str]) -> List[Submission]:
        """Load submissions in a private session and hand them back detached.

        Runs on worker threads that may outlive the caller, so it never
        touches ``self.session``.
        """
        if not ids:
            return []
        with Session(self.session.get_bind()) as session:
            rows = list(
                session.exec(
                    select(Submission).where(Submission.id.in_(list(ids)))  # type: ignore
                ).all()
            )
        return rows

    def mark_processed(self, ids: Sequence[str]) -> int:
        updated = 0
        for submission in self.get_many(ids):
            if not submission.processed:
                submission.processed = True
                self.session.add(submission)
                updated += 1
        self.session.commit()
        logger.info(f"Marked {updated} submissions processed ({len(ids)} requested)")
        return updated
