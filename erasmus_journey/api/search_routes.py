"""Erasmus Journey — Search Routes."""

from typing import List, Literal

from fastapi import APIRouter, Depends, Query

from erasmus_journey.api.dependencies import get_search_service
from erasmus_journey.models.aggregation_models import SearchResult
from erasmus_journey.services.search_service import SearchService

router = APIRouter(tags=["Search"])


@router.get("/search", response_model=List[SearchResult])
async def search(
    q: str = Query("", description="Free-text query"),
    type: Literal["destinations", "accommodations", "exchanges", "all"] = Query("all"),
    limit: int = Query(20, ge=1, le=100),
    service: SearchService = Depends(get_search_service),
):
    """Search destinations, accommodation experiences and university exchanges."""
    return service.search_content(q, type=type, limit=limit)


@router.get("/accommodations", response_model=List[dict])
async def accommodations(
    limit: int = Query(50, ge=1, le=100),
    service: SearchService = Depends(get_search_service),
):
    """Processed accommodation experiences, newest first."""
    return service.accommodation_experiences(limit=limit)


@router.get("/exchanges", response_model=List[dict])
async def exchanges(
    limit: int = Query(50, ge=1, le=100),
    service: SearchService = Depends(get_search_service),
):
    """Host universities with how many students reported on them."""
    return service.university_exchanges(limit=limit)
