# Services package
from leaseboost.services.business_service import NearbyBusinessService, NearbySearchResult
from leaseboost.services.enrichment_service import (
    EnrichmentBatch,
    EnrichmentService,
    InstitutionEnrichmentResult,
)
from leaseboost.services.event_service import EventAggregationService, EventSearchResult

__all__ = [
    "NearbyBusinessService",
    "NearbySearchResult",
    "EnrichmentBatch",
    "EnrichmentService",
    "InstitutionEnrichmentResult",
    "EventAggregationService",
    "EventSearchResult",
]
