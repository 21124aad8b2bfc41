"""PredictHQ event aggregator provider."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import first_external_url, search_url
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import PredictHQEvent
from .base import EventProvider, EventQuery

log = get_logger("providers.predicthq")

PREDICTHQ_URL = "https://api.predicthq.com/v1/events/"
CATEGORIES = "community,festivals,expos,concerts,performing-arts,sports"
PAGE_SIZE = 50


class PredictHQProvider(EventProvider):
    """PredictHQ gives no ticket links; URLs come from venue entities or a web search."""

    name = "predicthq"

    def __init__(self, client: httpx.AsyncClient, api_token: Optional[str] = None):
        super().__init__(client)
        self.api_token = api_token if api_token is not None else settings.PREDICTHQ_API_TOKEN

    @property
    def enabled(self) -> bool:
        return bool(self.api_token)

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        params = {
            "within": f"{query.radius_meters}m@{query.latlng}",
            "category": CATEGORIES,
            "active.gte": date.today().isoformat(),
            "sort": "start",
            "limit": PAGE_SIZE,
        }
        resp = await self.client.get(
            PREDICTHQ_URL,
            params=params,
            headers={"Authorization": f"Bearer {self.api_token}", "Accept": "application/json"},
        )
        resp.raise_for_status()
        results = resp.json().get("results") or []
        return [self._to_event(PredictHQEvent.model_validate(item), query) for item in results]

    @staticmethod
    def _to_event(event: PredictHQEvent, query: EventQuery) -> NormalizedEvent:
        venue_entity = next((e for e in event.entities if e.type == "venue"), None)

        venue = None
        if venue_entity or len(event.location) == 2:
            longitude, latitude = (
                event.location if len(event.location) == 2
                else (query.coordinate.longitude, query.coordinate.latitude)
            )
            venue = Venue(
                name=(venue_entity.name if venue_entity else None) or "",
                address=(venue_entity.formatted_address if venue_entity else None) or "",
                latitude=latitude,
                longitude=longitude,
            )

        related_urls = [url for e in event.entities for url in (e.website, e.url)]
        url = first_external_url(related_urls, internal_hosts=["predicthq.com"]) or search_url(
            event.title, venue.name if venue else None, event.start
        )

        types = [event.category] if event.category else []
        types += [label for label in event.labels if label not in types]

        return NormalizedEvent(
            id=f"phq-{event.id}",
            name=event.title,
            description=event.description or "",
            start=event.start,
            end=event.end,
            url=url,
            venue=venue,
            online_event=False,
            # rank is 0-100; expose it on the same 0-5 scale as place ratings
            rating=round(event.rank / 20, 1) if event.rank is not None else None,
            types=types,
            attendees=event.phq_attendance,
        )
