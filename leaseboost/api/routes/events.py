"""Events routes - Community events around a coordinate."""

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from leaseboost.api.deps import get_http_client, get_settings
from leaseboost.core.config import Settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.schemas.api import ErrorResponse, EventsResponse
from leaseboost.schemas.normalized import Coordinate
from leaseboost.services.event_service import EventAggregationService

router = APIRouter(prefix="/api/events", tags=["events"])

log = get_logger("api.events")


@router.get(
    "",
    response_model=EventsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def find_events(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    radius: float = Query(10, gt=0, description="Search radius in miles"),
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Aggregate events from every configured provider.

    ``source`` names the providers that contributed, joined with ``+``
    (``none`` when nothing was found or nothing is configured).
    """
    service = EventAggregationService(client, settings)
    try:
        result = await service.find_events(Coordinate(latitude=lat, longitude=lng), radius_miles=radius)
    except UpstreamUnavailable as exc:
        log.error(f"Event search failed at {lat},{lng}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": "Failed to fetch events", "events": []})
    return EventsResponse(events=result.events, source=result.source, message=result.message)
