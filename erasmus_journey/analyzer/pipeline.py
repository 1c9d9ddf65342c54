"""Erasmus Journey — Aggregation Orchestrator.

Runs the submission data flow for one location:
  group → partition by type → extract + weight → run facet engines → assemble

The orchestrator is pure: it takes submissions and returns an AggregationRun.
Persistence, linking and the processed flag belong to the destination service.
"""

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from erasmus_journey.config import settings
from erasmus_journey.analyzer.extractors import extract
from erasmus_journey.analyzer.weighting import calculate_weight, determine_contribution_type
from erasmus_journey.analyzer.accommodation_engine import compute_accommodation
from erasmus_journey.analyzer.course_engine import compute_courses
from erasmus_journey.analyzer.expenses_engine import compute_living_expenses
from erasmus_journey.analyzer.rating_engine import compute_average_rating
from erasmus_journey.analyzer.demographics_engine import compute_demographics
from erasmus_journey.models.aggregation_models import (
    AggregationRun,
    Contribution,
    DestinationAggregation,
    UserExperience,
)
from erasmus_journey.models.destination_models import Destination
from erasmus_journey.models.submission_models import (
    EXPERIENCE_TYPES,
    Submission,
    SubmissionType,
    is_eligible_status,
    parse_location,
)
from erasmus_journey.core.logging import get_logger

logger = get_logger("analyzer.pipeline")

# Facet bucket names
BASIC_INFO = "basic_info"
ACCOMMODATION = "accommodation"
LIVING_EXPENSES = "living_expenses"
COURSES = "courses"
EXPERIENCE = "experience"

BUCKET_BY_TYPE = {
    SubmissionType.BASIC_INFO.value: BASIC_INFO,
    SubmissionType.ACCOMMODATION.value: ACCOMMODATION,
    SubmissionType.LIVING_EXPENSES.value: LIVING_EXPENSES,
    SubmissionType.COURSE_MATCHING.value: COURSES,
    **{t: EXPERIENCE for t in EXPERIENCE_TYPES},
}


# ── Locations ──


def is_eligible(submission: Submission) -> bool:
    """Published/approved and tied to a well-formed location."""
    return is_eligible_status(submission.status) and parse_location(submission.location) is not None


def group_by_location(
    submissions: Iterable[Submission],
) -> Dict[Tuple[str, str], List[Submission]]:
    """Eligible submissions keyed by (city, country), in first-seen order."""
    groups: Dict[Tuple[str, str], List[Submission]] = {}
    skipped = 0
    for s in submissions:
        key = parse_location(s.location) if is_eligible_status(s.status) else None
        if key is None:
            skipped += 1
            continue
        groups.setdefault(key, []).append(s)
    if skipped:
        logger.info(f"Skipped {skipped} submissions without eligible status or location")
    return groups


# ── Staleness ──


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_stale(destination: Destination, now: Optional[datetime] = None) -> bool:
    """Cached aggregation older than ``stale_after_hours`` (or never computed)."""
    if destination.last_data_update is None or destination.aggregated_json is None:
        return True
    now = now or datetime.now(timezone.utc)
    age = now - _as_utc(destination.last_data_update)
    return age > timedelta(hours=settings.stale_after_hours)


# ── Aggregation ──


def _user_experiences(pairs: list) -> List[UserExperience]:
    """Most recent first, capped; excerpts, not a full aggregate."""
    ordered = sorted(pairs, key=lambda p: _as_utc(p[0].created_at), reverse=True)
    experiences = []
    for submission, facts in ordered[: settings.user_experience_limit]:
        experiences.append(
            UserExperience(
                id=submission.id,
                user_id=submission.user_id,
                title=submission.title,
                excerpt=(facts.advice or "")[: settings.excerpt_length],
                rating=facts.overall_rating,
                author_name=submission.author_name or "Anonymous",
                created_at=submission.created_at,
            )
        )
    return experiences


def aggregate_submissions(
    submissions: List[Submission],
    now: Optional[datetime] = None,
) -> AggregationRun:
    """Build the composite aggregation and link instructions for one location.

    Statistics are unweighted means/medians; weights only travel with the
    contributions for provenance.
    """
    now = now or datetime.now(timezone.utc)

    buckets: Dict[str, list] = defaultdict(list)
    contributions: List[Contribution] = []

    for submission in submissions:
        facts = extract(submission)
        contributions.append(
            Contribution(
                submission_id=submission.id,
                contribution_type=determine_contribution_type(submission.type),
                weight=round(calculate_weight(submission, facts, now), 4),
            )
        )
        bucket = BUCKET_BY_TYPE.get(submission.type)
        if bucket is not None:
            buckets[bucket].append((submission, facts))

    def facts_of(bucket: str) -> list:
        return [facts for _, facts in buckets[bucket]]

    living_expenses = compute_living_expenses(facts_of(LIVING_EXPENSES))

    aggregation = DestinationAggregation(
        schema_version=settings.aggregation_schema_version,
        total_submissions=len(submissions),
        average_rating=compute_average_rating(facts_of(EXPERIENCE)),
        average_cost=(
            living_expenses.total.average
            if living_expenses is not None and living_expenses.total is not None
            else None
        ),
        accommodation_data=compute_accommodation(facts_of(ACCOMMODATION)),
        course_data=compute_courses(facts_of(COURSES)),
        living_expenses_data=living_expenses,
        user_experiences=_user_experiences(buckets[EXPERIENCE]),
        demographics=compute_demographics(facts_of(BASIC_INFO)),
    )

    sizes = {name: len(pairs) for name, pairs in buckets.items()}
    logger.info(f"Aggregated {len(submissions)} submissions: {sizes}")
    return AggregationRun(aggregation=aggregation, contributions=contributions)
