"""Erasmus Journey — Public Destination Routes."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from erasmus_journey.api.dependencies import get_destination_service
from erasmus_journey.core.errors import NoSubmissionsFound
from erasmus_journey.models.aggregation_models import (
    DestinationFilters,
    DestinationListItem,
    DestinationOverrides,
    DestinationView,
)
from erasmus_journey.services.destination_service import DestinationService
from erasmus_journey.services.presentation import to_list_item
from erasmus_journey.core.logging import get_logger

logger = get_logger("api.destinations")

router = APIRouter(prefix="/destinations", tags=["Destinations"])


# ── Request / Response Models ──


class GenerateDestinationRequest(BaseModel):
    """Request body for POST /destinations/generate."""

    city: str
    country: str
    overrides: Optional[DestinationOverrides] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"city": "Prague", "country": "Czech Republic"},
                {"city": "Lisbon", "country": "Portugal", "overrides": {"featured": True}},
            ]
        }
    }


class GenerateAllResponse(BaseModel):
    status: str = "success"
    generated: int
    destinations: List[DestinationListItem]


# ── Endpoints ──


@router.post("/generate", response_model=DestinationView, status_code=201)
async def generate_destination(
    request: GenerateDestinationRequest,
    service: DestinationService = Depends(get_destination_service),
):
    """Aggregate a location's published submissions into its destination."""
    try:
        destination = service.create_from_submissions(
            request.city, request.country, overrides=request.overrides
        )
    except NoSubmissionsFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return service.view(destination)


@router.post("/generate-all", response_model=GenerateAllResponse)
async def generate_all_destinations(
    service: DestinationService = Depends(get_destination_service),
):
    """Build or update destinations for every location with pending submissions."""
    built = service.generate_all()
    return GenerateAllResponse(
        generated=len(built),
        destinations=[to_list_item(d) for d in built],
    )


@router.get("", response_model=List[DestinationListItem])
async def list_destinations(
    featured: Optional[bool] = Query(None),
    country: Optional[str] = Query(None),
    order_by: Literal["name", "students", "updated", "rating"] = Query("students"),
    order: Literal["asc", "desc"] = Query("desc"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: DestinationService = Depends(get_destination_service),
):
    """Published destinations, paginated."""
    filters = DestinationFilters(
        featured=featured,
        country=country,
        order_by=order_by,
        order=order,
        limit=limit,
        offset=offset,
    )
    return service.list_destinations(filters)


@router.get("/lookup", response_model=DestinationView)
async def lookup_destination(
    city: str = Query(..., min_length=1),
    country: str = Query(..., min_length=1),
    service: DestinationService = Depends(get_destination_service),
):
    """Published destination by city and country."""
    view = service.get_destination(city, country)
    if view is None:
        raise HTTPException(status_code=404, detail=f"Destination not found: {city}, {country}")
    return view


@router.get("/{key}", response_model=DestinationView)
async def get_destination(
    key: str,
    service: DestinationService = Depends(get_destination_service),
):
    """Published destination by id or slug. Stale data triggers a background refresh."""
    view = service.get_destination(key)
    if view is None:
        raise HTTPException(status_code=404, detail=f"Destination not found: {key}")
    return view
