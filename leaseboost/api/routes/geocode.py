"""Geocode route - Free-text address to coordinate."""

import httpx
from fastapi import APIRouter, Depends

from leaseboost.api.deps import get_http_client, get_settings
from leaseboost.core.config import Settings
from leaseboost.core.logging import get_logger
from leaseboost.providers.nominatim import NominatimGeocoder
from leaseboost.schemas.api import ErrorResponse, GeocodeRequest, GeocodeResponse

router = APIRouter(prefix="/api", tags=["geocode"])

log = get_logger("api.geocode")


@router.post(
    "/geocode",
    response_model=GeocodeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def geocode(
    body: GeocodeRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Resolve an address with OpenStreetMap Nominatim.

    Returns 400 for a blank address, 404 when nothing matches and 500 when
    the geocoding service cannot be reached.
    """
    geocoder = NominatimGeocoder(client, user_agent=settings.NOMINATIM_USER_AGENT)
    result = await geocoder.geocode(body.address)
    return GeocodeResponse(
        latitude=result.coordinate.latitude,
        longitude=result.coordinate.longitude,
        display_name=result.display_name,
    )
