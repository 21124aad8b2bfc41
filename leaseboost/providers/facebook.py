"""Facebook Graph API event search provider."""

from __future__ import annotations

from typing import Dict, List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import join_address
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import FacebookEvent
from .base import EventProvider, EventQuery

log = get_logger("providers.facebook")

GRAPH_SEARCH_URL = "https://graph.facebook.com/v18.0/search"
EVENT_FIELDS = "id,name,description,start_time,end_time,place,cover,attending_count,interested_count,is_free"

EVENT_QUERIES = (
    "farmers market",
    "community event",
    "local festival",
    "street fair",
    "neighborhood event",
)

# Graph error code returned to apps that have not passed review for event search
MISSING_CAPABILITY = 3


class FacebookEventsProvider(EventProvider):
    name = "facebook"

    def __init__(self, client: httpx.AsyncClient, access_token: Optional[str] = None):
        super().__init__(client)
        self.access_token = access_token if access_token is not None else settings.FACEBOOK_ACCESS_TOKEN

    @property
    def enabled(self) -> bool:
        return bool(self.access_token)

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        collected: Dict[str, NormalizedEvent] = {}

        # Queries run one at a time: a capability error on one means all will fail.
        for term in EVENT_QUERIES:
            params = {
                "type": "event",
                "q": term,
                "center": query.latlng,
                "distance": query.radius_meters,
                "fields": EVENT_FIELDS,
                "access_token": self.access_token,
            }
            try:
                resp = await self.client.get(GRAPH_SEARCH_URL, params=params)
                payload = resp.json()
            except (httpx.HTTPError, ValueError) as exc:
                log.error(f"Facebook query '{term}' failed: {exc!r}")
                continue

            error = payload.get("error")
            if error:
                if error.get("code") == MISSING_CAPABILITY:
                    if not collected:
                        raise UpstreamUnavailable("Facebook app lacks event search capability (code 3)")
                    break
                log.warning(f"Facebook query '{term}' error: {error}")
                continue

            for raw in payload.get("data") or []:
                event = FacebookEvent.model_validate(raw)
                if event.id not in collected:
                    collected[event.id] = self._to_event(event, query)
            log.debug(f"Facebook query '{term}' -> {len(collected)} events so far")

        return list(collected.values())

    @staticmethod
    def _to_event(event: FacebookEvent, query: EventQuery) -> NormalizedEvent:
        venue = None
        if event.place:
            location = event.place.location
            venue = Venue(
                name=event.place.name or "",
                address=join_address(
                    location.street if location else None,
                    location.city if location else None,
                    " ".join(p for p in [location.state, location.zip] if p) if location else None,
                ),
                latitude=(location.latitude if location else None) or query.coordinate.latitude,
                longitude=(location.longitude if location else None) or query.coordinate.longitude,
            )
        return NormalizedEvent(
            id=f"fb-{event.id}",
            name=event.name,
            description=event.description or "",
            start=event.start_time,
            end=event.end_time,
            url=f"https://www.facebook.com/events/{event.id}",
            venue=venue,
            online_event=event.place is None,
            is_free=event.is_free,
            logo=event.cover.source if event.cover else None,
            attendees=event.attending_count,
        )
