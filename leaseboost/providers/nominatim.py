"""OpenStreetMap Nominatim geocoder."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from leaseboost.core.config import settings
from leaseboost.core.errors import InvalidInput, NotFound, UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.schemas.normalized import Coordinate
from leaseboost.schemas.raw import NominatimPlace

log = get_logger("providers.nominatim")

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


@dataclass(frozen=True)
class GeocodeResult:
    coordinate: Coordinate
    display_name: str


class NominatimGeocoder:
    """Turns a free-text address into a coordinate with a single lookup (no retry)."""

    def __init__(self, client: httpx.AsyncClient, user_agent: str | None = None):
        self.client = client
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT

    async def geocode(self, address: Any) -> GeocodeResult:
        if not isinstance(address, str) or not address.strip():
            raise InvalidInput("Address is required")

        params = {"format": "json", "q": address.strip(), "limit": 1}
        try:
            resp = await self.client.get(NOMINATIM_URL, params=params, headers={"User-Agent": self.user_agent})
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.error(f"Geocoding request failed for '{address}': {exc!r}")
            raise UpstreamUnavailable("Geocoding service unavailable") from exc

        if not isinstance(data, list):
            raise UpstreamUnavailable("Geocoding service returned an invalid result")
        if not data:
            log.info(f"No geocoding match for '{address}'")
            raise NotFound("Address not found")

        try:
            place = NominatimPlace.model_validate(data[0])
            coordinate = Coordinate(latitude=place.lat, longitude=place.lon)
        except ValidationError as exc:
            log.error(f"Unexpected geocoding payload for '{address}': {exc}")
            raise UpstreamUnavailable("Geocoding service returned an invalid result") from exc

        log.info(f"Geocoded '{address}' to {coordinate.latitude},{coordinate.longitude}")
        return GeocodeResult(coordinate=coordinate, display_name=place.display_name)
