"""Erasmus Journey — Submission Field Registry.

Declares, per submission type, where each fact lives in the form payload.
Payload shapes have drifted between form versions, so every fact lists its
candidate key paths in priority order. The extractor returns the first
candidate that holds a valid value.

When a form version adds a new spelling for an existing fact, append (or
insert, if it should win) a FieldSource here; nothing else changes.
"""

from enum import Enum
from typing import Dict, List

from erasmus_journey.models.submission_models import SubmissionType

CENTS = 0.01


class FieldKind(str, Enum):
    """How a raw value is validated and converted."""

    MONEY = "money"  # Positive amount in euros
    COUNT = "count"  # Positive integer, or length of a list
    RATING = "rating"  # 1-5 inclusive
    TEXT = "text"  # Non-blank string
    CATEGORY = "category"  # Non-blank string or number, kept as a label


class FieldSource:
    """One candidate location of a fact inside the payload."""

    def __init__(self, path: str, scale: float = 1.0):
        self.path = path
        self.scale = scale

    def __repr__(self) -> str:
        if self.scale != 1.0:
            return f"<{self.path} ×{self.scale}>"
        return f"<{self.path}>"


class FieldDefinition:
    """A normalized fact and its ordered candidate sources."""

    def __init__(
        self,
        name: str,
        kind: FieldKind,
        sources: List[FieldSource],
        description: str = "",
    ):
        self.name = name
        self.kind = kind
        self.sources = sources
        self.description = description

    def __repr__(self) -> str:
        return f"<Field {self.name} ({self.kind.value}) {self.sources}>"


def _money(key: str, section: str, name: str, description: str) -> FieldDefinition:
    """Cents first, then euros; top-level before nested section."""
    return FieldDefinition(
        name,
        FieldKind.MONEY,
        [
            FieldSource(f"{key}Cents", CENTS),
            FieldSource(f"{section}.{key}Cents", CENTS),
            FieldSource(key),
            FieldSource(f"{section}.{key}"),
        ],
        description,
    )


def _field(name: str, kind: FieldKind, *paths: str) -> FieldDefinition:
    return FieldDefinition(name, kind, [FieldSource(p) for p in paths])


# ─────────────────────────────────────────────
# PER-TYPE REGISTRIES
# ─────────────────────────────────────────────

BASIC_INFO_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f
    for f in [
        _field("host_city", FieldKind.TEXT, "hostCity", "basicInfo.hostCity"),
        _field("host_country", FieldKind.TEXT, "hostCountry", "basicInfo.hostCountry"),
        _field(
            "host_university",
            FieldKind.TEXT,
            "hostUniversity",
            "hostUniversity.name",
            "basicInfo.hostUniversity",
        ),
        _field(
            "host_department",
            FieldKind.TEXT,
            "hostDepartment",
            "basicInfo.hostDepartment",
        ),
        _field("nationality", FieldKind.CATEGORY, "nationality", "basicInfo.nationality"),
        _field("home_country", FieldKind.CATEGORY, "homeCountry", "basicInfo.homeCountry"),
        _field(
            "study_level",
            FieldKind.CATEGORY,
            "levelOfStudy",
            "studyLevel",
            "basicInfo.studyLevel",
        ),
    ]
}

ACCOMMODATION_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f
    for f in [
        _field(
            "accommodation_type",
            FieldKind.CATEGORY,
            "accommodationType",
            "accommodation.accommodationType",
            "accommodation.type",
        ),
        _money("monthlyRent", "accommodation", "monthly_rent", "Monthly rent in EUR"),
        _field(
            "accommodation_rating",
            FieldKind.RATING,
            "accommodationRating",
            "accommodation.rating",
            "ratings.accommodationRating",
        ),
        _field(
            "description",
            FieldKind.TEXT,
            "accommodationDescription",
            "accommodation.description",
        ),
    ]
}

COURSE_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f
    for f in [
        _field("host_university", FieldKind.TEXT, "hostUniversity", "hostUniversity.name"),
        _field("host_department", FieldKind.TEXT, "hostDepartment", "department"),
        _field("host_course_count", FieldKind.COUNT, "hostCourseCount", "courseCount", "courses"),
        _field("difficulty", FieldKind.CATEGORY, "difficulty", "courseDifficulty"),
    ]
}

LIVING_EXPENSE_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f
    for f in [
        _money("monthlyRent", "livingExpenses", "rent", "Monthly rent in EUR"),
        _money("monthlyFood", "livingExpenses", "food", "Monthly food in EUR"),
        _money("monthlyTransport", "livingExpenses", "transport", "Monthly transport in EUR"),
        _money(
            "monthlyEntertainment",
            "livingExpenses",
            "entertainment",
            "Monthly entertainment in EUR",
        ),
        _money(
            "totalMonthlyBudget",
            "livingExpenses",
            "total_monthly_budget",
            "Total monthly budget in EUR",
        ),
    ]
}

EXPERIENCE_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f
    for f in [
        _field(
            "overall_rating",
            FieldKind.RATING,
            "overallRating",
            "ratings.overallRating",
            "experience.overallRating",
        ),
        _field("advice", FieldKind.TEXT, "advice", "experience.highlights", "highlights"),
    ]
}

GENERIC_FIELDS: Dict[str, FieldDefinition] = {
    f.name: f for f in [_field("text", FieldKind.TEXT, "tip", "content", "description")]
}

FIELDS_BY_TYPE: Dict[str, Dict[str, FieldDefinition]] = {
    SubmissionType.BASIC_INFO.value: BASIC_INFO_FIELDS,
    SubmissionType.ACCOMMODATION.value: ACCOMMODATION_FIELDS,
    SubmissionType.COURSE_MATCHING.value: COURSE_FIELDS,
    SubmissionType.LIVING_EXPENSES.value: LIVING_EXPENSE_FIELDS,
    SubmissionType.HELP_FUTURE_STUDENTS.value: EXPERIENCE_FIELDS,
    SubmissionType.EXPERIENCE.value: EXPERIENCE_FIELDS,
}


# ─────────────────────────────────────────────
# COMPLETENESS — facts a submission of each type should carry
# ─────────────────────────────────────────────

REQUIRED_FIELDS: Dict[str, List[str]] = {
    SubmissionType.BASIC_INFO.value: ["host_city", "host_country", "host_university"],
    SubmissionType.ACCOMMODATION.value: ["accommodation_type", "monthly_rent"],
    SubmissionType.LIVING_EXPENSES.value: ["total_monthly_budget"],
    SubmissionType.COURSE_MATCHING.value: ["host_course_count"],
    SubmissionType.HELP_FUTURE_STUDENTS.value: ["overall_rating", "advice"],
    SubmissionType.EXPERIENCE.value: ["overall_rating", "advice"],
}


def get_fields(submission_type: str) -> Dict[str, FieldDefinition]:
    """Field definitions for a submission type (generic for unknown types)."""
    return FIELDS_BY_TYPE.get(submission_type, GENERIC_FIELDS)


def required_fields(submission_type: str) -> List[str]:
    """Required facts for a type; empty when the type has no list."""
    return REQUIRED_FIELDS.get(submission_type, [])
