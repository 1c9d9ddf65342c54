"""Erasmus Journey — Statistics Helpers shared by the facet engines.

All helpers return None for empty input instead of dividing by zero.
"""

from typing import Dict, Iterable, List, Optional

from erasmus_journey.models.aggregation_models import NumericStats, ValueRange


def mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def median(values: List[float]) -> Optional[float]:
    """Element at index floor(n/2) of the sorted values, no interpolation."""
    if not values:
        return None
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def value_range(values: List[float]) -> Optional[ValueRange]:
    if not values:
        return None
    return ValueRange(min=min(values), max=max(values))


def numeric_stats(values: List[float]) -> Optional[NumericStats]:
    if not values:
        return None
    return NumericStats(
        average=mean(values),
        median=median(values),
        min=min(values),
        max=max(values),
        sample_size=len(values),
    )


def frequency_table(labels: Iterable[Optional[str]]) -> Dict[str, int]:
    """Counts per label in first-seen order; None labels are skipped."""
    counts: Dict[str, int] = {}
    for label in labels:
        if label is None:
            continue
        counts[label] = counts.get(label, 0) + 1
    return counts


def top_n(counts: Dict[str, int], n: int) -> List[tuple[str, int]]:
    """Highest counts first. Ties keep first-seen order (sorted() is stable)."""
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)[:n]
