"""Erasmus Journey — Course Engine.

Popular host departments, average matched course count and the raw
difficulty distribution. Difficulty is ordinal at best in the payloads, so it
is counted as a label and never averaged.
"""

from typing import List, Optional

from erasmus_journey.analyzer.stats import frequency_table, mean, top_n
from erasmus_journey.models.aggregation_models import CourseSummary
from erasmus_journey.models.extraction_models import CourseFacts

POPULAR_DEPARTMENTS_LIMIT = 5


def compute_courses(facts: List[CourseFacts]) -> Optional[CourseSummary]:
    if not facts:
        return None

    departments = frequency_table(f.host_department for f in facts)
    course_counts = [f.host_course_count for f in facts if f.host_course_count is not None]

    return CourseSummary(
        total_submissions=len(facts),
        popular_departments=top_n(departments, POPULAR_DEPARTMENTS_LIMIT),
        average_course_count=mean(course_counts),
        difficulty_distribution=frequency_table(f.difficulty for f in facts),
    )
