"""Erasmus Journey — Admin Destination Routes.

Review queue, overrides and on-demand refresh. Unlike the public routes these
see drafts and archived destinations.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from erasmus_journey.api.dependencies import get_destination_service
from erasmus_journey.core.errors import DestinationNotFound, RefreshFailure
from erasmus_journey.models.aggregation_models import DestinationOverrides, DestinationView
from erasmus_journey.services.destination_service import DestinationService
from erasmus_journey.core.logging import get_logger

logger = get_logger("api.admin")

router = APIRouter(prefix="/admin/destinations", tags=["Admin"])


@router.get("/review", response_model=List[DestinationView])
async def review_queue(service: DestinationService = Depends(get_destination_service)):
    """Draft destinations awaiting review, newest first."""
    return [service.view(d) for d in service.destinations_for_review()]


@router.get("/{destination_id}", response_model=DestinationView)
async def get_destination_admin(
    destination_id: str,
    service: DestinationService = Depends(get_destination_service),
):
    """Any destination with its aggregation, whatever its status."""
    try:
        destination = service.get_with_aggregations(destination_id)
    except DestinationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return service.view(destination)


@router.put("/{destination_id}/overrides", response_model=DestinationView)
async def put_overrides(
    destination_id: str,
    overrides: DestinationOverrides,
    service: DestinationService = Depends(get_destination_service),
):
    """Replace the admin overrides layered over a destination."""
    try:
        destination = service.update_overrides(destination_id, overrides)
    except DestinationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    logger.info("Overrides updated", extra={"destination_id": destination_id})
    return service.view(destination)


@router.post("/{destination_id}/refresh", response_model=DestinationView)
async def refresh_destination(
    destination_id: str,
    service: DestinationService = Depends(get_destination_service),
):
    """Recompute a destination now and wait for the result."""
    try:
        destination = await service.refresh(destination_id)
    except DestinationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RefreshFailure as e:
        logger.error(f"Manual refresh failed: {e}", extra={"destination_id": destination_id})
        raise HTTPException(status_code=502, detail=str(e))
    return service.view(destination)
