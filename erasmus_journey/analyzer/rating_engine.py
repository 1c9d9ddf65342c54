"""Erasmus Journey — Rating Engine."""

from typing import List, Optional

from erasmus_journey.analyzer.stats import mean
from erasmus_journey.models.extraction_models import ExperienceFacts


def compute_average_rating(facts: List[ExperienceFacts]) -> Optional[float]:
    """Plain mean of overall ratings from experience submissions."""
    return mean([f.overall_rating for f in facts if f.overall_rating is not None])
