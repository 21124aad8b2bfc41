"""Async client for the Google Places and Geocoding web services."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from leaseboost.core.logging import get_logger
from leaseboost.schemas.normalized import Coordinate, Geometry, LatLng, NormalizedBusiness
from leaseboost.schemas.raw import GoogleGeocodeResult, GooglePlace, GooglePlaceDetails

log = get_logger("providers.google_places")

PLACES_URL = "https://maps.googleapis.com/maps/api/place"
GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"

CONTACT_FIELDS = (
    "name,formatted_phone_number,international_phone_number,website,"
    "opening_hours,formatted_address"
)


class GooglePlacesError(RuntimeError):
    """Raised when a Google web service returns a non-successful status."""


class GooglePlacesClient:
    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self.client = client
        self.api_key = api_key

    async def _get(self, url: str, params: Dict[str, Any], operation: str) -> Dict[str, Any]:
        resp = await self.client.get(url, params={**params, "key": self.api_key})
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise GooglePlacesError(f"{operation} returned a non-object body")
        status = payload.get("status")
        if status not in {"OK", "ZERO_RESULTS"}:
            log.error(f"{operation} failed: status={status}, error_message={payload.get('error_message')}")
            raise GooglePlacesError(payload.get("error_message") or status or "unknown status")
        return payload

    async def nearby_search(
        self, coordinate: Coordinate, radius_meters: int, place_type: Optional[str] = None
    ) -> List[GooglePlace]:
        params: Dict[str, Any] = {
            "location": f"{coordinate.latitude},{coordinate.longitude}",
            "radius": radius_meters,
        }
        if place_type:
            params["type"] = place_type
        payload = await self._get(f"{PLACES_URL}/nearbysearch/json", params, "nearby_search")
        return [GooglePlace.model_validate(item) for item in payload.get("results") or []]

    async def text_search(
        self,
        query: str,
        coordinate: Optional[Coordinate] = None,
        radius_meters: Optional[int] = None,
    ) -> List[GooglePlace]:
        params: Dict[str, Any] = {"query": query}
        if coordinate is not None:
            params["location"] = f"{coordinate.latitude},{coordinate.longitude}"
        if radius_meters is not None:
            params["radius"] = radius_meters
        payload = await self._get(f"{PLACES_URL}/textsearch/json", params, "text_search")
        return [GooglePlace.model_validate(item) for item in payload.get("results") or []]

    async def place_details(self, place_id: str, fields: str = CONTACT_FIELDS) -> Optional[GooglePlaceDetails]:
        payload = await self._get(
            f"{PLACES_URL}/details/json", {"place_id": place_id, "fields": fields}, "place_details"
        )
        result = payload.get("result")
        if not result:
            return None
        return GooglePlaceDetails.model_validate(result)

    async def reverse_geocode(self, coordinate: Coordinate) -> Optional[GoogleGeocodeResult]:
        payload = await self._get(
            GEOCODE_URL, {"latlng": f"{coordinate.latitude},{coordinate.longitude}"}, "reverse_geocode"
        )
        results = payload.get("results") or []
        if not results:
            return None
        return GoogleGeocodeResult.model_validate(results[0])

    async def city_query(self, coordinate: Coordinate) -> Optional[str]:
        """Resolve a coordinate to ``"City, ST"`` (or just the city), or None."""
        result = await self.reverse_geocode(coordinate)
        if result is None:
            return None
        city = next((c.long_name for c in result.address_components if "locality" in c.types), "")
        state = next(
            (c.short_name for c in result.address_components if "administrative_area_level_1" in c.types), ""
        )
        if not city:
            return None
        return f"{city}, {state}" if state else city

    def photo_url(self, photo_reference: str, max_width: int = 400) -> str:
        return (
            f"{PLACES_URL}/photo?maxwidth={max_width}"
            f"&photo_reference={photo_reference}&key={self.api_key}"
        )


def to_business(place: GooglePlace) -> NormalizedBusiness:
    location = place.geometry.location if place.geometry else None
    return NormalizedBusiness(
        name=place.name,
        types=place.types,
        rating=place.rating,
        user_ratings_total=place.user_ratings_total,
        vicinity=place.vicinity or place.formatted_address or "",
        place_id=place.place_id,
        price_level=place.price_level,
        business_status=place.business_status,
        geometry=Geometry(location=LatLng(lat=location.lat, lng=location.lng)) if location else None,
    )
