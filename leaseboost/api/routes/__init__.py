from leaseboost.api.routes.enrichment import router as enrichment_router
from leaseboost.api.routes.events import router as events_router
from leaseboost.api.routes.geocode import router as geocode_router
from leaseboost.api.routes.health import router as health_router
from leaseboost.api.routes.maps import router as maps_router
from leaseboost.api.routes.places import router as places_router

__all__ = [
    "enrichment_router",
    "events_router",
    "geocode_router",
    "health_router",
    "maps_router",
    "places_router",
]
