"""Places routes - Businesses around a coordinate."""

import httpx
from fastapi import APIRouter, Depends, Query

from leaseboost.api.deps import get_http_client, get_settings
from leaseboost.core.config import Settings
from leaseboost.schemas.api import ErrorResponse, NearbyPlacesResponse
from leaseboost.schemas.normalized import Coordinate
from leaseboost.services.business_service import NearbyBusinessService

router = APIRouter(prefix="/api/places", tags=["places"])


@router.get(
    "/nearby",
    response_model=NearbyPlacesResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def nearby_places(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Diverse nearby businesses: the top results of 15 Google Places categories,
    merged and deduplicated by place id.

    Without a Google Places key a small sample set is returned with a message.
    """
    service = NearbyBusinessService(client, settings)
    result = await service.find_nearby(Coordinate(latitude=lat, longitude=lng))
    return NearbyPlacesResponse(results=result.results, status=result.status, message=result.message)
