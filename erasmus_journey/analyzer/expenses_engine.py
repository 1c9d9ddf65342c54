"""Erasmus Journey — Living Expenses Engine.

Average/median/min/max per expense category. Each category is computed over
the submissions that reported it, so sample sizes differ between categories.
"""

from typing import List, Optional

from erasmus_journey.analyzer.stats import numeric_stats
from erasmus_journey.models.aggregation_models import LivingExpensesSummary
from erasmus_journey.models.extraction_models import LivingExpenseFacts
from erasmus_journey.core.logging import get_logger

logger = get_logger("analyzer.expenses")

# Summary attribute → extracted fact
EXPENSE_CATEGORIES = {
    "rent": "rent",
    "food": "food",
    "transport": "transport",
    "entertainment": "entertainment",
    "total": "total_monthly_budget",
}


def compute_living_expenses(facts: List[LivingExpenseFacts]) -> Optional[LivingExpensesSummary]:
    if not facts:
        return None

    stats = {}
    for category, fact_name in EXPENSE_CATEGORIES.items():
        values = [getattr(f, fact_name) for f in facts]
        stats[category] = numeric_stats([v for v in values if v is not None])

    sampled = {k: v.sample_size for k, v in stats.items() if v is not None}
    logger.debug(f"Living expenses: {len(facts)} submissions, samples {sampled}")
    return LivingExpensesSummary(total_submissions=len(facts), **stats)
