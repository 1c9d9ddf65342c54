"""Erasmus Journey — Field Extractors.

Turns a submission's raw payload into a typed facts record using the field
registry. Resolution is deterministic: candidates are tried in registry order
and the first valid value wins. Malformed values become ``None`` and are
logged as ExtractionAnomaly; extraction itself never raises.
"""

import json
import math
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel

from erasmus_journey.core.errors import ExtractionAnomaly
from erasmus_journey.core.field_registry import (
    ACCOMMODATION_FIELDS,
    BASIC_INFO_FIELDS,
    COURSE_FIELDS,
    EXPERIENCE_FIELDS,
    GENERIC_FIELDS,
    LIVING_EXPENSE_FIELDS,
    FieldDefinition,
    FieldKind,
)
from erasmus_journey.models.extraction_models import (
    AccommodationFacts,
    BasicInfoFacts,
    CourseFacts,
    ExperienceFacts,
    GenericFacts,
    LivingExpenseFacts,
)
from erasmus_journey.models.submission_models import Submission, SubmissionType
from erasmus_journey.core.logging import get_logger

logger = get_logger("analyzer.extractors")

MIN_RATING = 1.0
MAX_RATING = 5.0

_MISSING = object()

Facts = Union[
    BasicInfoFacts,
    AccommodationFacts,
    CourseFacts,
    LivingExpenseFacts,
    ExperienceFacts,
    GenericFacts,
]


def load_payload(submission: Submission) -> Dict[str, Any]:
    """Decode ``data_json``; anything other than a JSON object is empty."""
    try:
        payload = json.loads(submission.data_json or "{}")
    except (TypeError, ValueError):
        logger.warning(
            f"Unparseable payload on submission {submission.id}",
            extra={"submission_id": submission.id},
        )
        return {}
    if not isinstance(payload, dict):
        logger.warning(
            f"Payload of submission {submission.id} is {type(payload).__name__}, expected object",
            extra={"submission_id": submission.id},
        )
        return {}
    return payload


def _lookup(data: Dict[str, Any], path: str) -> Any:
    """Follow a dotted path; ``_MISSING`` if any step is absent or not a mapping."""
    node: Any = data
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _to_number(path: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ExtractionAnomaly(path, value, "boolean is not a number")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise ExtractionAnomaly(path, value, "not numeric")
    else:
        raise ExtractionAnomaly(path, value, f"unexpected {type(value).__name__}")
    if math.isnan(number) or math.isinf(number):
        raise ExtractionAnomaly(path, value, "not finite")
    return number


def _convert(kind: FieldKind, path: str, value: Any, scale: float) -> Any:
    """Validate one raw value for a field kind. Raises ExtractionAnomaly."""
    if kind == FieldKind.MONEY:
        amount = round(_to_number(path, value) * scale, 2)
        if amount <= 0:
            raise ExtractionAnomaly(path, value, "amount must be positive")
        return amount

    if kind == FieldKind.RATING:
        rating = _to_number(path, value)
        if rating < MIN_RATING or rating > MAX_RATING:
            raise ExtractionAnomaly(path, value, "rating outside 1-5")
        return rating

    if kind == FieldKind.COUNT:
        if isinstance(value, list):
            count = len(value)
        else:
            number = _to_number(path, value)
            if number != int(number):
                raise ExtractionAnomaly(path, value, "count is fractional")
            count = int(number)
        if count <= 0:
            raise ExtractionAnomaly(path, value, "count must be positive")
        return count

    if kind == FieldKind.CATEGORY and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)

    # TEXT / CATEGORY
    if not isinstance(value, str):
        raise ExtractionAnomaly(path, value, f"expected text, got {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ExtractionAnomaly(path, value, "blank")
    return text


def resolve_field(
    data: Dict[str, Any],
    definition: FieldDefinition,
    submission_id: Optional[str] = None,
) -> Any:
    """Return the first valid candidate value for a field, or None."""
    for source in definition.sources:
        raw = _lookup(data, source.path)
        if raw is _MISSING or raw is None:
            continue
        try:
            return _convert(definition.kind, source.path, raw, source.scale)
        except ExtractionAnomaly as anomaly:
            logger.debug(
                f"Dropped {definition.name}: {anomaly}",
                extra={"submission_id": submission_id},
            )
    return None


def _resolve_all(
    data: Dict[str, Any],
    fields: Dict[str, FieldDefinition],
    submission_id: Optional[str],
) -> Dict[str, Any]:
    return {
        name: resolve_field(data, definition, submission_id)
        for name, definition in fields.items()
    }


# ─────────────────────────────────────────────
# PER-TYPE EXTRACTORS
# ─────────────────────────────────────────────


def extract_basic_info(data: Dict[str, Any], submission_id: Optional[str] = None) -> BasicInfoFacts:
    return BasicInfoFacts(**_resolve_all(data, BASIC_INFO_FIELDS, submission_id))


def extract_accommodation(
    data: Dict[str, Any], submission_id: Optional[str] = None
) -> AccommodationFacts:
    """Monthly rent precedence: monthlyRentCents/100, accommodation.monthlyRentCents/100,
    monthlyRent, accommodation.monthlyRent."""
    return AccommodationFacts(**_resolve_all(data, ACCOMMODATION_FIELDS, submission_id))


def extract_course(data: Dict[str, Any], submission_id: Optional[str] = None) -> CourseFacts:
    return CourseFacts(**_resolve_all(data, COURSE_FIELDS, submission_id))


def extract_living_expenses(
    data: Dict[str, Any], submission_id: Optional[str] = None
) -> LivingExpenseFacts:
    """Each amount: <key>Cents/100, livingExpenses.<key>Cents/100, <key>,
    livingExpenses.<key>."""
    return LivingExpenseFacts(**_resolve_all(data, LIVING_EXPENSE_FIELDS, submission_id))


def extract_experience(data: Dict[str, Any], submission_id: Optional[str] = None) -> ExperienceFacts:
    return ExperienceFacts(**_resolve_all(data, EXPERIENCE_FIELDS, submission_id))


def extract_generic(data: Dict[str, Any], submission_id: Optional[str] = None) -> GenericFacts:
    return GenericFacts(**_resolve_all(data, GENERIC_FIELDS, submission_id))


EXTRACTORS = {
    SubmissionType.BASIC_INFO.value: extract_basic_info,
    SubmissionType.ACCOMMODATION.value: extract_accommodation,
    SubmissionType.COURSE_MATCHING.value: extract_course,
    SubmissionType.LIVING_EXPENSES.value: extract_living_expenses,
    SubmissionType.HELP_FUTURE_STUDENTS.value: extract_experience,
    SubmissionType.EXPERIENCE.value: extract_experience,
}


def extract(submission: Submission) -> Facts:
    """Extract the typed facts for a submission according to its type."""
    extractor = EXTRACTORS.get(submission.type, extract_generic)
    return extractor(load_payload(submission), submission.id)


def present_fields(facts: BaseModel) -> set[str]:
    """Names of facts holding a usable value."""
    return {name for name, value in facts.model_dump().items() if value not in (None, "")}
