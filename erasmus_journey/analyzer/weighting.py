"""Erasmus Journey — Submission Weighting.

weight = clamp(1.0 × completeness × recency, 0.1, 2.0)

- completeness: share of the type's required facts that were extracted
- recency: linear decay over a year, floored at 0.5

Weights are stored on destination links and classify contributions. The facet
statistics are deliberately unweighted.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from erasmus_journey.analyzer.extractors import present_fields
from erasmus_journey.core.field_registry import required_fields
from erasmus_journey.models.destination_models import ContributionType
from erasmus_journey.models.submission_models import Submission, SubmissionType

BASE_WEIGHT = 1.0
MIN_WEIGHT = 0.1
MAX_WEIGHT = 2.0
RECENCY_FLOOR = 0.5
DECAY_DAYS = 365.0

PRIMARY_TYPES = {
    SubmissionType.BASIC_INFO.value,
    SubmissionType.HELP_FUTURE_STUDENTS.value,
    SubmissionType.EXPERIENCE.value,
}
SUPPORTING_TYPES = {
    SubmissionType.ACCOMMODATION.value,
    SubmissionType.LIVING_EXPENSES.value,
    SubmissionType.COURSE_MATCHING.value,
}


def completeness_factor(submission_type: str, facts: BaseModel) -> float:
    """Share of required facts present; 1.0 for types without requirements."""
    required = required_fields(submission_type)
    if not required:
        return 1.0
    present = present_fields(facts)
    return sum(1 for name in required if name in present) / len(required)


def recency_factor(age_days: float) -> float:
    """``max(0.5, 1 - age/365)``; future timestamps count as brand new."""
    return max(RECENCY_FLOOR, 1.0 - max(age_days, 0.0) / DECAY_DAYS)


def combine_weight(completeness: float, age_days: float) -> float:
    weight = BASE_WEIGHT * completeness * recency_factor(age_days)
    return max(MIN_WEIGHT, min(MAX_WEIGHT, weight))


def _age_days(created_at: datetime, now: datetime) -> float:
    if created_at.tzinfo is None:
        # SQLite hands back naive datetimes; they were written as UTC
        created_at = created_at.replace(tzinfo=timezone.utc)
    return (now - created_at).total_seconds() / 86400


def calculate_weight(
    submission: Submission,
    facts: BaseModel,
    now: Optional[datetime] = None,
) -> float:
    """Weight for one submission given its extracted facts."""
    now = now or datetime.now(timezone.utc)
    return combine_weight(
        completeness_factor(submission.type, facts),
        _age_days(submission.created_at, now),
    )


def determine_contribution_type(submission_type: str) -> str:
    if submission_type in PRIMARY_TYPES:
        return ContributionType.PRIMARY.value
    if submission_type in SUPPORTING_TYPES:
        return ContributionType.SUPPORTING.value
    return ContributionType.REFERENCE.value
