"""API dependencies"""

from typing import AsyncGenerator

import httpx

from leaseboost.core.config import Settings, settings


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Outbound HTTP client, one per request, closed when the response is sent."""
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        yield client


def get_settings() -> Settings:
    return settings
