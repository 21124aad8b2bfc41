"""Health routes - Liveness and configured providers."""

from fastapi import APIRouter, Depends

from leaseboost.api.deps import get_settings
from leaseboost.core.config import Settings
from leaseboost.schemas.api import HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health(settings: Settings = Depends(get_settings)):
    """
    Health check endpoint for load balancer and Docker health checks.

    Lists the upstream integrations that have credentials configured; no
    upstream is called.
    """
    return HealthResponse(status="ok", environment=settings.ENV, providers=settings.enabled_providers)
