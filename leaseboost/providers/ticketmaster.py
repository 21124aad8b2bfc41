"""Ticketmaster Discovery API provider."""

from __future__ import annotations

from typing import List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import join_address, search_url
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import TicketmasterEvent
from .base import EventProvider, EventQuery

log = get_logger("providers.ticketmaster")

DISCOVERY_URL = "https://app.ticketmaster.com/discovery/v2/events.json"
PAGE_SIZE = 50

ON_SALE = {"onsale"}
NOT_ON_SALE = {"offsale", "cancelled", "canceled"}


class TicketmasterProvider(EventProvider):
    name = "ticketmaster"

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None):
        super().__init__(client)
        self.api_key = api_key if api_key is not None else settings.TICKETMASTER_API_KEY

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        params = {
            "apikey": self.api_key,
            "latlong": query.latlng,
            "radius": max(1, round(query.radius_miles)),
            "unit": "miles",
            "size": PAGE_SIZE,
            "sort": "date,asc",
        }
        resp = await self.client.get(DISCOVERY_URL, params=params)
        resp.raise_for_status()
        events = (resp.json().get("_embedded") or {}).get("events") or []
        return [self._to_event(TicketmasterEvent.model_validate(item), query) for item in events]

    @staticmethod
    def _to_event(event: TicketmasterEvent, query: EventQuery) -> NormalizedEvent:
        raw_venue = event.embedded.venues[0] if event.embedded and event.embedded.venues else None
        venue = None
        if raw_venue:
            location = raw_venue.location
            venue = Venue(
                name=raw_venue.name or "",
                address=join_address(
                    raw_venue.address.line1 if raw_venue.address else None,
                    raw_venue.city.name if raw_venue.city else None,
                    raw_venue.state.state_code if raw_venue.state else None,
                ),
                latitude=(location.latitude if location else None) or query.coordinate.latitude,
                longitude=(location.longitude if location else None) or query.coordinate.longitude,
            )

        dates = event.dates
        start = None
        end = None
        if dates and dates.start:
            start = dates.start.date_time or dates.start.local_date
        if dates and dates.end:
            end = dates.end.date_time or dates.end.local_date

        status = (dates.status.code or "").lower() if dates and dates.status else ""
        has_tickets = True if status in ON_SALE else False if status in NOT_ON_SALE else None

        is_free = None
        if event.price_ranges:
            is_free = all((price.max or 0) == 0 for price in event.price_ranges)

        types: List[str] = []
        for classification in event.classifications:
            for part in (classification.segment, classification.genre):
                if part and part.name and part.name != "Undefined" and part.name not in types:
                    types.append(part.name)

        logo = max(event.images, key=lambda image: image.width).url if event.images else None

        return NormalizedEvent(
            id=f"tm-{event.id}",
            name=event.name,
            description=event.info or "",
            start=start,
            end=end,
            url=event.url or search_url(event.name, venue.name if venue else None, start),
            venue=venue,
            online_event=False,
            is_free=is_free,
            has_available_tickets=has_tickets,
            logo=logo,
            types=types,
        )
