"""Meetup GraphQL keyword-search provider (requires a Meetup Pro key)."""

from __future__ import annotations

from typing import List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import join_address, matches_keywords, search_url
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import MeetupEvent
from .base import EventProvider, EventQuery

log = get_logger("providers.meetup")

MEETUP_GQL_URL = "https://api.meetup.com/gql"

FIND_EVENTS_QUERY = """
query FindEvents($lat: Float!, $lon: Float!, $radius: Float!) {
  keywordSearch(
    input: {
      keyword: "community OR farmers market OR local event OR festival"
      lat: $lat
      lon: $lon
      radius: $radius
      source: EVENTS
    }
  ) {
    ... on KeywordSearchEventsConnection {
      count
      edges {
        node {
          id
          title
          description
          dateTime
          endTime
          eventUrl
          venue { name address city lat lon }
          group { name }
          going
          isOnline
        }
      }
    }
  }
}
"""


class MeetupProvider(EventProvider):
    name = "meetup"

    def __init__(self, client: httpx.AsyncClient, api_key: Optional[str] = None):
        super().__init__(client)
        self.api_key = api_key if api_key is not None else settings.MEETUP_API_KEY

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        body = {
            "query": FIND_EVENTS_QUERY,
            "variables": {
                "lat": query.coordinate.latitude,
                "lon": query.coordinate.longitude,
                "radius": query.radius_meters / 1000,  # km
            },
        }
        resp = await self.client.post(
            MEETUP_GQL_URL,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json=body,
        )
        payload = resp.json()
        edges = ((payload.get("data") or {}).get("keywordSearch") or {}).get("edges")
        if resp.is_error or edges is None:
            detail = payload.get("errors") or payload.get("message") or f"HTTP {resp.status_code}"
            raise UpstreamUnavailable(f"Meetup API error: {detail}")

        events = [self._to_event(MeetupEvent.model_validate(edge["node"]), query) for edge in edges]
        return [event for event in events if matches_keywords([event.name, event.description])]

    @staticmethod
    def _to_event(event: MeetupEvent, query: EventQuery) -> NormalizedEvent:
        venue = None
        if event.venue:
            venue = Venue(
                name=event.venue.name or "",
                address=join_address(event.venue.address, event.venue.city),
                latitude=event.venue.lat or query.coordinate.latitude,
                longitude=event.venue.lon or query.coordinate.longitude,
            )
        return NormalizedEvent(
            id=f"meetup-{event.id}",
            name=event.title,
            description=event.description or "",
            start=event.date_time,
            end=event.end_time,
            url=event.event_url or search_url(event.title, venue.name if venue else None, event.date_time),
            venue=venue,
            online_event=event.is_online,
            group=event.group.name if event.group else None,
            attendees=event.going,
        )
