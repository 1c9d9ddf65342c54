"""Erasmus Journey — Read-time Presentation of Destinations.

Admin overrides are applied here, on the way out, and never written back into
the stored aggregation. A later re-aggregation therefore cannot silently
discard admin intent.
"""

import json
from typing import Optional

from pydantic import ValidationError

from erasmus_journey.models.aggregation_models import (
    DestinationAggregation,
    DestinationListItem,
    DestinationOverrides,
    DestinationView,
    SEOData,
)
from erasmus_journey.models.destination_models import Destination
from erasmus_journey.core.logging import get_logger

logger = get_logger("services.presentation")

SITE_NAME = "ErasmusJourney"


def load_aggregation(destination: Destination) -> Optional[DestinationAggregation]:
    """Decode the cached snapshot; a corrupt snapshot reads as missing."""
    if not destination.aggregated_json:
        return None
    try:
        return DestinationAggregation.model_validate_json(destination.aggregated_json)
    except ValidationError as e:
        logger.error(
            f"Unreadable aggregation on destination {destination.id}: {e}",
            extra={"destination_id": destination.id},
        )
        return None


def load_overrides(destination: Destination) -> DestinationOverrides:
    try:
        return DestinationOverrides.model_validate(json.loads(destination.overrides_json or "{}"))
    except (ValueError, ValidationError) as e:
        logger.error(
            f"Unreadable overrides on destination {destination.id}: {e}",
            extra={"destination_id": destination.id},
        )
        return DestinationOverrides()


def default_description(city: str, country: str, submission_count: int = 0) -> str:
    if submission_count:
        return (
            f"Study destination in {city}, {country} based on "
            f"{submission_count} student experiences"
        )
    return f"Study abroad in {city}, {country}"


def build_seo(view: DestinationView) -> SEOData:
    data = view.aggregated_data
    total = data.get("total_submissions") or 0
    rating = data.get("average_rating")

    description = f"Complete guide to studying in {view.city}, {view.country}. "
    if total > 0:
        description += f"Based on {total} student experiences. "
    if isinstance(rating, (int, float)):
        description += f"Average rating: {rating:.1f}/5. "
    description += "Find accommodation, courses, costs, and student stories."

    return SEOData(
        title=f"Study in {view.name} - Erasmus Exchange Guide | {SITE_NAME}",
        description=description,
        keywords=[
            "erasmus",
            "study abroad",
            view.city.lower(),
            view.country.lower(),
            "student exchange",
            "university",
            "accommodation",
            "living costs",
            "student experience",
        ],
        meta_image=view.image_url,
    )


def apply_overrides(
    destination: Destination,
    aggregation: Optional[DestinationAggregation],
) -> DestinationView:
    """Merge admin overrides over the record and its aggregation.

    Pure: neither ``destination`` nor ``aggregation`` is modified. Text
    overrides win when set; every key in ``stats_overrides`` wins over the
    aggregated field of the same name.
    """
    overrides = load_overrides(destination)
    aggregated = aggregation.model_dump(mode="json") if aggregation is not None else {}
    merged = {**aggregated, **overrides.stats_overrides}

    view = DestinationView(
        id=destination.id,
        slug=destination.slug,
        name=overrides.name or destination.name,
        city=destination.city,
        country=destination.country,
        description=(
            overrides.description
            or destination.description
            or default_description(destination.city, destination.country)
        ),
        image_url=overrides.image_url or destination.image_url,
        featured=destination.featured,
        status=destination.status,
        submission_count=destination.submission_count,
        last_data_update=destination.last_data_update,
        aggregated_data=merged,
    )
    view.seo = build_seo(view)
    return view


def to_list_item(destination: Destination) -> DestinationListItem:
    view = apply_overrides(destination, load_aggregation(destination))
    return DestinationListItem(
        id=view.id,
        slug=view.slug,
        name=view.name,
        city=view.city,
        country=view.country,
        description=view.description,
        image_url=view.image_url,
        featured=view.featured,
        submission_count=view.submission_count,
        average_rating=view.aggregated_data.get("average_rating"),
        average_cost=view.aggregated_data.get("average_cost"),
        last_updated=view.last_data_update,
    )
