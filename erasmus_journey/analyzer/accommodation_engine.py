"""Erasmus Journey — Accommodation Engine.

Frequency of accommodation types, rent average/range and the three most
popular options.
"""

from typing import List, Optional

from erasmus_journey.analyzer.stats import frequency_table, mean, top_n, value_range
from erasmus_journey.models.aggregation_models import AccommodationSummary
from erasmus_journey.models.extraction_models import AccommodationFacts
from erasmus_journey.core.logging import get_logger

logger = get_logger("analyzer.accommodation")

POPULAR_OPTIONS_LIMIT = 3


def compute_accommodation(facts: List[AccommodationFacts]) -> Optional[AccommodationSummary]:
    """Summarize accommodation submissions; None when there are none."""
    if not facts:
        return None

    types = frequency_table(f.accommodation_type for f in facts)
    rents = [f.monthly_rent for f in facts if f.monthly_rent is not None]
    ratings = [f.accommodation_rating for f in facts if f.accommodation_rating is not None]

    summary = AccommodationSummary(
        total_submissions=len(facts),
        accommodation_types=types,
        average_rent=mean(rents),
        rent_range=value_range(rents),
        rent_sample_size=len(rents),
        average_rating=mean(ratings),
        popular_options=top_n(types, POPULAR_OPTIONS_LIMIT),
    )
    logger.debug(
        f"Accommodation: {len(facts)} submissions, {len(rents)} rents, {len(types)} types"
    )
    return summary
