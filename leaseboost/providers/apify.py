"""Apify meetup-scraper provider (submit job -> poll status -> read dataset)."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from leaseboost.core.config import settings
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import matches_keywords, search_url, stable_event_id
from leaseboost.schemas.normalized import NormalizedEvent, Venue
from leaseboost.schemas.raw import ApifyMeetupItem, ApifyRun
from .base import EventProvider, EventQuery
from .google_places import GooglePlacesClient

log = get_logger("providers.apify")

APIFY_URL = "https://api.apify.com/v2"
ACTOR_ID = "filip_cicvarek~meetup-scraper"
MAX_EVENTS = 50

SUCCEEDED = "SUCCEEDED"
FAILED_STATES = {"FAILED", "ABORTED", "TIMED-OUT"}


class ApifyMeetupProvider(EventProvider):
    """Runs the Meetup scraper actor for the city around the query coordinate.

    Run states go Submitted -> Running -> Succeeded | Failed | TimedOut.
    Polling is bounded both by an attempt ceiling and by a wall-clock
    deadline (interval x attempts); a run that is still going when either
    runs out is aborted on the Apify side and the provider reports nothing.
    """

    name = "apify_meetup"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_token: Optional[str] = None,
        google_api_key: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        super().__init__(client)
        self.api_token = api_token if api_token is not None else settings.APIFY_API_TOKEN
        self.google_api_key = google_api_key if google_api_key is not None else settings.GOOGLE_PLACES_API_KEY
        self.poll_interval = poll_interval if poll_interval is not None else settings.APIFY_POLL_INTERVAL_SECONDS
        self.max_attempts = max_attempts if max_attempts is not None else settings.APIFY_MAX_POLL_ATTEMPTS

    @property
    def enabled(self) -> bool:
        # The actor takes a city name, which needs Google reverse geocoding.
        return bool(self.api_token and self.google_api_key)

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        places = GooglePlacesClient(self.client, self.google_api_key or "")
        location = await places.city_query(query.coordinate)
        if not location:
            log.info(f"Could not resolve a city for {query.latlng}; skipping scraper")
            return []
        log.info(f"Reverse geocoded {query.latlng} to {location}")

        run = await self._start_run(location, query)
        log.info(f"Apify run started: {run.id}, waiting for completion...")

        deadline = self.poll_interval * self.max_attempts
        try:
            finished = await asyncio.wait_for(self._wait_for_run(run.id), timeout=deadline)
        except asyncio.TimeoutError:
            finished = None

        if finished is None:
            log.warning(f"Apify run {run.id} timed out after {deadline:.0f}s; aborting")
            await self._abort_run(run.id)
            return []
        if finished.status != SUCCEEDED:
            log.warning(f"Apify run {run.id} ended with status {finished.status}")
            return []
        if not finished.default_dataset_id:
            return []

        items = await self._fetch_dataset(finished.default_dataset_id)
        log.info(f"Apify returned {len(items)} raw events")
        return [self._to_event(item, query) for item in items if self._is_community_event(item)][:MAX_EVENTS]

    async def _start_run(self, location: str, query: EventQuery) -> ApifyRun:
        start_url = (
            "https://www.meetup.com/find/events/?allMeetups=false"
            f"&radius={query.radius_meters / 1000}"
            f"&userFreeform={quote(location)}&eventType=upcoming"
        )
        resp = await self.client.post(
            f"{APIFY_URL}/acts/{ACTOR_ID}/runs",
            headers=self._headers,
            json={"startUrls": [{"url": start_url}], "maxEvents": MAX_EVENTS},
        )
        resp.raise_for_status()
        return ApifyRun.model_validate(resp.json()["data"])

    async def _get_run(self, run_id: str) -> ApifyRun:
        resp = await self.client.get(f"{APIFY_URL}/actor-runs/{run_id}", headers=self._headers)
        resp.raise_for_status()
        return ApifyRun.model_validate(resp.json()["data"])

    async def _wait_for_run(self, run_id: str) -> Optional[ApifyRun]:
        for attempt in range(1, self.max_attempts + 1):
            await asyncio.sleep(self.poll_interval)
            run = await self._get_run(run_id)
            log.debug(f"Apify run {run_id} attempt={attempt} status={run.status}")
            if run.status == SUCCEEDED or run.status in FAILED_STATES:
                return run
        return None

    async def _abort_run(self, run_id: str) -> None:
        try:
            resp = await self.client.post(f"{APIFY_URL}/actor-runs/{run_id}/abort", headers=self._headers)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning(f"Could not abort Apify run {run_id}: {exc!r}")

    async def _fetch_dataset(self, dataset_id: str) -> List[ApifyMeetupItem]:
        resp = await self.client.get(f"{APIFY_URL}/datasets/{dataset_id}/items", headers=self._headers)
        resp.raise_for_status()
        data: Any = resp.json()
        if not isinstance(data, list):
            return []

        items: List[ApifyMeetupItem] = []
        for raw in data:
            try:
                items.append(ApifyMeetupItem.model_validate(raw))
            except ValidationError as exc:
                log.warning(f"Skipping malformed Apify item: {exc.error_count()} errors")
        return items

    @staticmethod
    def _is_community_event(item: ApifyMeetupItem) -> bool:
        return matches_keywords([item.name or item.title, item.description])

    @staticmethod
    def _to_event(item: ApifyMeetupItem, query: EventQuery) -> NormalizedEvent:
        name = item.name or item.title or ""
        start = item.date_time or item.start_time
        venue = None
        if item.venue:
            venue = Venue(
                name=item.venue.name or "",
                address=item.venue.address or item.location or "",
                latitude=item.venue.lat or item.latitude or query.coordinate.latitude,
                longitude=item.venue.lon or item.longitude or query.coordinate.longitude,
            )
        venue_name = venue.name if venue else None
        return NormalizedEvent(
            id=f"apify-{item.id}" if item.id else stable_event_id("apify", name, start, venue_name),
            name=name,
            description=item.description or "",
            start=start,
            end=item.end_time,
            url=item.url or item.event_url or search_url(name, venue_name, start),
            venue=venue,
            online_event=item.is_online,
            logo=item.image,
            attendees=item.going,
        )
