"""Maps routes - Browser-side map configuration."""

from fastapi import APIRouter, Depends

from leaseboost.api.deps import get_settings
from leaseboost.core.config import Settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.schemas.api import ErrorResponse, MapsConfigResponse

router = APIRouter(prefix="/api/maps", tags=["maps"])


@router.get("/config", response_model=MapsConfigResponse, responses={500: {"model": ErrorResponse}})
def maps_config(settings: Settings = Depends(get_settings)):
    """Rendering key for the JavaScript map. Never the server-side Places key."""
    if not settings.GOOGLE_MAPS_API_KEY:
        raise UpstreamUnavailable("Google Maps API key not configured")
    return MapsConfigResponse(api_key=settings.GOOGLE_MAPS_API_KEY)
