"""Erasmus Journey — Destination & Link Models."""

import re
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from sqlmodel import SQLModel, Field, UniqueConstraint


class DestinationStatus(str, Enum):
    """Public visibility of a destination."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ContributionType(str, Enum):
    """How central a submission is to a destination's identity."""

    PRIMARY = "primary"
    SUPPORTING = "supporting"
    REFERENCE = "reference"


_WHITESPACE = re.compile(r"\s+")


def make_slug(city: str, country: str) -> str:
    """``"Prague", "Czech Republic"`` → ``"prague-czech-republic"``."""
    parts = [_WHITESPACE.sub("-", p.strip().lower()) for p in (city, country)]
    return "-".join(parts)


class Destination(SQLModel, table=True):
    """Curated, cached aggregation for one (city, country).

    ``aggregated_json`` is replaced wholesale on every recomputation.
    ``overrides_json`` is layered on top at read time and never written into it.
    """

    __tablename__ = "destinations"
    __table_args__ = (
        UniqueConstraint("city", "country", name="uq_destination_city_country"),
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    slug: str = Field(index=True, unique=True)
    name: str = Field(default="")
    city: str = Field(index=True)
    country: str = Field(index=True)
    description: str = Field(default="")
    image_url: Optional[str] = Field(default=None)
    featured: bool = Field(default=False, index=True)
    status: str = Field(default=DestinationStatus.DRAFT.value, index=True)
    source: str = Field(default="user_generated")
    aggregated_json: Optional[str] = Field(
        default=None, description="DestinationAggregation as JSON"
    )
    overrides_json: str = Field(
        default="{}", description="DestinationOverrides as JSON"
    )
    submission_count: int = Field(default=0, index=True)
    last_data_update: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class DestinationSubmission(SQLModel, table=True):
    """Provenance link: which submission fed which destination, and how much.

    The weight is frozen at link time for audit; re-aggregation always
    recomputes weights from the current submissions.
    """

    __tablename__ = "destination_submissions"
    __table_args__ = (
        UniqueConstraint(
            "destination_id", "submission_id", name="uq_destination_submission"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    destination_id: str = Field(index=True, foreign_key="destinations.id")
    submission_id: str = Field(index=True, foreign_key="form_submissions.id")
    contribution_type: str = Field(default=ContributionType.REFERENCE.value)
    weight: float = Field(default=1.0)
    admin_approved: bool = Field(default=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
