"""Enrichment routes - Attach contact details to records the client already holds.

Each call enriches a bounded batch (``limit``, default 2) unless explicit ids
are given, so callers page through their list with repeated requests.
"""

import httpx
from fastapi import APIRouter, Depends

from leaseboost.api.deps import get_http_client, get_settings
from leaseboost.core.config import Settings
from leaseboost.core.logging import get_logger
from leaseboost.schemas.api import (
    EnrichBusinessesRequest,
    EnrichBusinessesResponse,
    EnrichEventsRequest,
    EnrichEventsResponse,
    EnrichInstitutionsRequest,
    EnrichInstitutionsResponse,
    ErrorResponse,
)
from leaseboost.services.enrichment_service import EnrichmentService

router = APIRouter(prefix="/api", tags=["enrichment"])

log = get_logger("api.enrichment")

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@router.post("/businesses/enrich", response_model=EnrichBusinessesResponse, responses=ERROR_RESPONSES)
async def enrich_businesses(
    body: EnrichBusinessesRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """Phone, website and opening hours from Google Place Details."""
    service = EnrichmentService(client, settings)
    batch = await service.enrich_businesses(body.businesses, limit=body.limit, ids=body.ids)
    log.info(f"Enriched {batch.enriched}/{batch.total} businesses")
    return EnrichBusinessesResponse(businesses=batch.records, enriched=batch.enriched, total=batch.total)


@router.post("/events/enrich", response_model=EnrichEventsResponse, responses=ERROR_RESPONSES)
async def enrich_events(
    body: EnrichEventsRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """Venue contact details: Places text search on the venue, then Place Details."""
    service = EnrichmentService(client, settings)
    batch = await service.enrich_events(body.events, limit=body.limit, ids=body.ids)
    log.info(f"Enriched {batch.enriched}/{batch.total} event venues")
    return EnrichEventsResponse(events=batch.records, enriched=batch.enriched, total=batch.total)


@router.post("/institutions/enrich", response_model=EnrichInstitutionsResponse, responses=ERROR_RESPONSES)
async def enrich_institutions(
    body: EnrichInstitutionsRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Email, phone and social profiles from Hunter.io.

    Each processed institution costs one Hunter credit; ``creditsUsed``
    reports how many were spent by this call.
    """
    service = EnrichmentService(client, settings)
    result = await service.enrich_institutions(body.institutions, limit=body.limit, ids=body.institution_ids)
    return EnrichInstitutionsResponse(
        institutions=result.institutions,
        enriched=result.enriched,
        processed=result.processed,
        total=result.total,
        remaining=result.remaining,
        credits_used=result.credits_used,
        message=result.message,
    )
