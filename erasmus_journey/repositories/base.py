"""Erasmus Journey — Abstract Stores.

The aggregation engine only talks to persistence through these two
interfaces, so services can be built over any backing store.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from erasmus_journey.models.aggregation_models import Contribution
from erasmus_journey.models.destination_models import Destination, DestinationSubmission
from erasmus_journey.models.submission_models import ELIGIBLE_STATUSES, Submission


class SubmissionRepository(ABC):
    """Read access to student submissions plus the processed flag."""

    @abstractmethod
    def find_submissions(
        self,
        location: Optional[str] = None,
        statuses: Sequence[str] = ELIGIBLE_STATUSES,
        types: Optional[Sequence[str]] = None,
        processed: Optional[bool] = None,
        limit: Optional[int] = None,
    ) -> List[Submission]:
        """Submissions matching every given filter, newest first.

        ``location`` matches by parsed (city, country) key, so spacing around
        the comma does not matter. Statuses compare case-insensitively.
        """
        ...

    @abstractmethod
    def get_many(self, ids: Sequence[str]) -> List[Submission]:
        ...

    @abstractmethod
    def mark_processed(self, ids: Sequence[str]) -> int:
        """Set ``processed`` on the given submissions. Safe to repeat."""
        ...

    @abstractmethod
    def get_many_isolated(self, ids: Sequence[str]) -> List[Submission]:
        """Like get_many, but safe to run on a thread that may outlive the caller."""
        ...


class DestinationRepository(ABC):
    """Destination records and their submission links."""

    @abstractmethod
    def get(self, destination_id: str) -> Optional[Destination]:
        ...

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Destination]:
        ...

    @abstractmethod
    def get_by_city_country(self, city: str, country: str) -> Optional[Destination]:
        ...

    @abstractmethod
    def save(self, destination: Destination) -> Destination:
        ...

    @abstractmethod
    def list_published(
        self,
        featured: Optional[bool] = None,
        country: Optional[str] = None,
        order_by: str = "students",
        order: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> List[Destination]:
        ...

    @abstractmethod
    def drafts(self) -> List[Destination]:
        ...

    @abstractmethod
    def stale_published(self, updated_before: datetime) -> List[Destination]:
        """Published destinations whose aggregation predates the cutoff."""
        ...

    @abstractmethod
    def link_submissions(self, destination_id: str, contributions: Sequence[Contribution]) -> int:
        """Create missing links; existing pairs are left untouched. Returns new links."""
        ...

    @abstractmethod
    def links(self, destination_id: str) -> List[DestinationSubmission]:
        ...

    def linked_submission_ids(self, destination_id: str) -> List[str]:
        return [link.submission_id for link in self.links(destination_id)]
