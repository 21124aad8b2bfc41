"""Nearby business discovery: one Places query per category, run concurrently."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import List, Optional

import httpx

from leaseboost.core.config import Settings, settings as default_settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import dedup_businesses
from leaseboost.providers.google_places import GooglePlacesClient, to_business
from leaseboost.schemas.normalized import Coordinate, NormalizedBusiness

log = get_logger("business_service")

# Categories are complementary, so all are queried for diversity rather than as fallbacks.
CATEGORIES = (
    "restaurant",
    "cafe",
    "gym",
    "shopping_mall",
    "bank",
    "supermarket",
    "pharmacy",
    "school",
    "park",
    "hospital",
    "bar",
    "gas_station",
    "library",
    "movie_theater",
    "beauty_salon",
)

MOCK_MESSAGE = "Mock data - Add GOOGLE_PLACES_API_KEY to .env for real data"

MOCK_BUSINESSES = [
    {"name": "Sample Restaurant", "types": ["restaurant", "food"], "rating": 4.5, "vicinity": "123 Main St"},
    {"name": "Sample Coffee Shop", "types": ["cafe", "food"], "rating": 4.2, "vicinity": "456 Oak Ave"},
    {"name": "Sample Gym", "types": ["gym", "health"], "rating": 4.7, "vicinity": "789 Pine Rd"},
]


@dataclass(frozen=True)
class NearbySearchResult:
    results: List[NormalizedBusiness]
    status: str
    message: Optional[str] = None


class NearbyBusinessService:
    def __init__(self, client: httpx.AsyncClient, settings: Settings = default_settings):
        self.client = client
        self.settings = settings

    async def find_nearby(self, coordinate: Coordinate) -> NearbySearchResult:
        api_key = self.settings.GOOGLE_PLACES_API_KEY
        if not api_key:
            log.warning("GOOGLE_PLACES_API_KEY not configured; returning sample businesses")
            return NearbySearchResult(
                results=[NormalizedBusiness.model_validate(item) for item in MOCK_BUSINESSES],
                status="OK",
                message=MOCK_MESSAGE,
            )

        places = GooglePlacesClient(self.client, api_key)
        radius = self.settings.NEARBY_RADIUS_METERS
        per_category = self.settings.NEARBY_RESULTS_PER_CATEGORY

        responses = await asyncio.gather(
            *(places.nearby_search(coordinate, radius, place_type=category) for category in CATEGORIES),
            return_exceptions=True,
        )

        collected: List[NormalizedBusiness] = []
        failures = 0
        for category, response in zip(CATEGORIES, responses):
            if isinstance(response, BaseException):
                failures += 1
                log.error(f"Nearby search for category={category} failed: {response!r}")
                continue
            collected.extend(to_business(place) for place in response[:per_category])

        if failures == len(CATEGORIES):
            raise UpstreamUnavailable("Failed to fetch nearby businesses")

        results = dedup_businesses(collected)
        log.info(
            f"Nearby search at {coordinate.latitude},{coordinate.longitude}: "
            f"{len(collected)} hits, {len(results)} unique, {failures} failed categories"
        )
        return NearbySearchResult(results=results, status="OK" if results else "ZERO_RESULTS")
