"""Erasmus Journey — Demographics Engine.

Who went: nationalities, home countries (top 5 each) and the full study-level
distribution, taken from basic-info submissions.
"""

from typing import List, Optional

from erasmus_journey.analyzer.stats import frequency_table, top_n
from erasmus_journey.models.aggregation_models import DemographicsSummary
from erasmus_journey.models.extraction_models import BasicInfoFacts

TOP_LIMIT = 5


def compute_demographics(facts: List[BasicInfoFacts]) -> Optional[DemographicsSummary]:
    if not facts:
        return None

    return DemographicsSummary(
        total_students=len(facts),
        top_nationalities=top_n(frequency_table(f.nationality for f in facts), TOP_LIMIT),
        top_home_countries=top_n(frequency_table(f.home_country for f in facts), TOP_LIMIT),
        study_level_distribution=frequency_table(f.study_level for f in facts),
    )
