"""Last-resort event source: community venues found through Places text search."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import search_url
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import GooglePlace
from .base import EventProvider, EventQuery
from .google_places import GooglePlacesClient

log = get_logger("providers.places_events")

SEARCH_QUERIES = (
    "farmers market",
    "farmers markets",
    "community center",
    "community centers",
    "outdoor market",
    "street market",
    "flea market",
    "artisan market",
    "local festival",
    "community park",
    "event venue",
    "event space",
    "community hall",
    "recreation center",
    "civic center",
)

EVENT_PLACE_TYPES = {
    "park",
    "community_center",
    "establishment",
    "point_of_interest",
    "store",
    "food",
    "market",
    "shopping_mall",
    "civic_building",
    "local_government_office",
}

QUERY_KEYWORDS = ("market", "community", "festival", "venue", "center", "hall", "park")
NAME_KEYWORDS = (
    "market",
    "festival",
    "fair",
    "community",
    "center",
    "hall",
    "venue",
    "park",
    "recreation",
    "civic",
)


def is_event_like(place: GooglePlace, search_query: str) -> bool:
    name = place.name.lower()
    term = search_query.lower()
    return (
        any(place_type in EVENT_PLACE_TYPES for place_type in place.types)
        or any(keyword in term for keyword in QUERY_KEYWORDS)
        or any(keyword in name for keyword in NAME_KEYWORDS)
    )


class GooglePlacesEventProvider(EventProvider):
    name = "google_places"

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None):
        super().__init__(client)
        self.api_key = api_key if api_key is not None else settings.GOOGLE_PLACES_API_KEY

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        places = GooglePlacesClient(self.client, self.api_key or "")
        log.info(f"Searching event venues near {query.latlng} within {query.radius_miles} miles")

        responses = await asyncio.gather(
            *(places.text_search(term, query.coordinate, query.radius_meters) for term in SEARCH_QUERIES),
            return_exceptions=True,
        )

        events: List[NormalizedEvent] = []
        failures = 0
        for term, response in zip(SEARCH_QUERIES, responses):
            if isinstance(response, BaseException):
                failures += 1
                log.error(f"Query '{term}' failed: {response!r}")
                continue
            for place in response:
                if place.place_id and is_event_like(place, term):
                    events.append(self._to_event(place, places, query))

        if failures == len(SEARCH_QUERIES):
            raise UpstreamUnavailable("Every Google Places text search failed")
        return events

    @staticmethod
    def _to_event(place: GooglePlace, places: GooglePlacesClient, query: EventQuery) -> NormalizedEvent:
        location = place.geometry.location if place.geometry else None
        address = place.vicinity or place.formatted_address or ""
        return NormalizedEvent(
            id=f"gplaces-{place.place_id}",
            name=place.name,
            description=place.formatted_address or place.vicinity or "",
            url=place.url or search_url(place.name, address),
            venue=Venue(
                name=place.name,
                address=address,
                latitude=location.lat if location else query.coordinate.latitude,
                longitude=location.lng if location else query.coordinate.longitude,
            ),
            online_event=False,
            logo=places.photo_url(place.photos[0].photo_reference) if place.photos else None,
            rating=place.rating,
            types=place.types,
        )
