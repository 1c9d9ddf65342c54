"""Erasmus Journey — Student Submission Models.

Submissions are owned by the submission store. The aggregation engine reads
them and only ever flips the ``processed`` flag.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple
from sqlmodel import SQLModel, Field


class SubmissionType(str, Enum):
    """Kinds of student submission."""

    BASIC_INFO = "basic-info"
    ACCOMMODATION = "accommodation"
    COURSE_MATCHING = "course-matching"
    LIVING_EXPENSES = "living-expenses"
    HELP_FUTURE_STUDENTS = "help-future-students"
    EXPERIENCE = "experience"
    STORY = "story"
    QUICK_TIP = "quick-tip"
    DESTINATION_INFO = "destination-info"


class SubmissionStatus(str, Enum):
    """Submission lifecycle states."""

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"


ELIGIBLE_STATUSES = (SubmissionStatus.PUBLISHED.value, SubmissionStatus.APPROVED.value)

EXPERIENCE_TYPES = (
    SubmissionType.HELP_FUTURE_STUDENTS.value,
    SubmissionType.EXPERIENCE.value,
)


def is_eligible_status(status: str | None) -> bool:
    return (status or "").upper() in ELIGIBLE_STATUSES


def parse_location(location: Optional[str]) -> Optional[Tuple[str, str]]:
    """``"Prague, Czech Republic"`` → ``("Prague", "Czech Republic")``.

    Splits on the last comma. Blank or one-sided locations return None.
    Every location comparison goes through this key, never the raw string.
    """
    if not location or "," not in location:
        return None
    city, country = location.rsplit(",", 1)
    city, country = city.strip(), country.strip()
    if not city or not country:
        return None
    return city, country


def format_location(city: str, country: str) -> str:
    return f"{city.strip()}, {country.strip()}"


class Submission(SQLModel, table=True):
    """A single student-authored record of one experience facet.

    ``data_json`` holds the semi-structured form payload. Its shape depends on
    ``type`` and has drifted over time; only the extractors read it.
    """

    __tablename__ = "form_submissions"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    type: str = Field(index=True, description="SubmissionType value")
    status: str = Field(
        default=SubmissionStatus.DRAFT.value, index=True, description="Lifecycle state"
    )
    location: str = Field(default="", index=True, description='"City, Country"')
    title: str = Field(default="")
    data_json: str = Field(default="{}", description="Raw form payload as JSON")
    user_id: Optional[str] = Field(default=None, index=True)
    author_name: str = Field(default="")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    processed: bool = Field(default=False, index=True)
