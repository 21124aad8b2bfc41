"""Event aggregation across all configured event providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import httpx

from leaseboost.core.config import Settings, settings as default_settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import dedup_events
from leaseboost.providers.apify import ApifyMeetupProvider
from leaseboost.providers.base import EventProvider, EventQuery, OutcomeStatus, ProviderOutcome
from leaseboost.providers.facebook import FacebookEventsProvider
from leaseboost.providers.meetup import MeetupProvider
from leaseboost.providers.places_events import GooglePlacesEventProvider
from leaseboost.providers.predicthq import PredictHQProvider
from leaseboost.providers.runner import ProviderRunner
from leaseboost.providers.ticketmaster import TicketmasterProvider
from leaseboost.schemas.normalized import Coordinate, NormalizedEvent

log = get_logger("event_service")

NO_PROVIDERS_MESSAGE = (
    "No event API configured. Add APIFY_API_TOKEN, MEETUP_API_KEY, FACEBOOK_ACCESS_TOKEN, "
    "PREDICTHQ_API_TOKEN, TICKETMASTER_API_KEY or GOOGLE_PLACES_API_KEY to .env"
)


@dataclass(frozen=True)
class EventSearchResult:
    events: List[NormalizedEvent]
    source: str
    message: Optional[str] = None


class EventAggregationService:
    """Accumulates events from every enabled provider.

    Primary providers run concurrently and their records are merged in
    priority order (apify_meetup, meetup, facebook, predicthq, ticketmaster),
    then deduplicated by id and capped. The Google Places venue heuristic is
    consulted only when the primaries found nothing.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings = default_settings,
        primary: Optional[Sequence[EventProvider]] = None,
        fallback: Optional[Sequence[EventProvider]] = None,
    ):
        self.settings = settings
        self.primary = list(primary) if primary is not None else [
            ApifyMeetupProvider(
                client,
                api_token=settings.APIFY_API_TOKEN or "",
                google_api_key=settings.GOOGLE_PLACES_API_KEY or "",
                poll_interval=settings.APIFY_POLL_INTERVAL_SECONDS,
                max_attempts=settings.APIFY_MAX_POLL_ATTEMPTS,
            ),
            MeetupProvider(client, api_key=settings.MEETUP_API_KEY or ""),
            FacebookEventsProvider(client, access_token=settings.FACEBOOK_ACCESS_TOKEN or ""),
            PredictHQProvider(client, api_token=settings.PREDICTHQ_API_TOKEN or ""),
            TicketmasterProvider(client, api_key=settings.TICKETMASTER_API_KEY or ""),
        ]
        self.fallback = list(fallback) if fallback is not None else [
            GooglePlacesEventProvider(client, api_key=settings.GOOGLE_PLACES_API_KEY or ""),
        ]

    async def find_events(self, coordinate: Coordinate, radius_miles: float = 10.0) -> EventSearchResult:
        query = EventQuery(coordinate=coordinate, radius_miles=radius_miles)
        primary = [p for p in self.primary if p.enabled]
        fallback = [p for p in self.fallback if p.enabled]

        if not primary and not fallback:
            log.warning("No event providers configured")
            return EventSearchResult(events=[], source="none", message=NO_PROVIDERS_MESSAGE)

        log.info(
            f"Searching events near {query.latlng} radius={radius_miles}mi ({query.radius_meters}m) "
            f"primary={[p.name for p in primary]} fallback={[p.name for p in fallback]}"
        )

        outcomes = await ProviderRunner(primary).run(query)
        events, contributors = self._accumulate(outcomes)

        if not events and fallback:
            log.info("Primary providers returned nothing; trying fallback providers")
            fallback_outcomes = await ProviderRunner(fallback).run(query)
            outcomes += fallback_outcomes
            events, contributors = self._accumulate(fallback_outcomes)

        if not events:
            if all(outcome.status == OutcomeStatus.FAILURE for outcome in outcomes):
                reasons = "; ".join(f"{o.provider}: {o.reason}" for o in outcomes)
                raise UpstreamUnavailable(f"All event providers failed ({reasons})")
            checked = ", ".join(outcome.provider for outcome in outcomes)
            return EventSearchResult(
                events=[],
                source="none",
                message=f"No events found near this location. Providers checked: {checked}",
            )

        limited = events[: self.settings.EVENTS_RESULT_LIMIT]
        log.info(f"Returning {len(limited)} unique events from {'+'.join(contributors)}")
        return EventSearchResult(events=limited, source="+".join(contributors))

    @staticmethod
    def _accumulate(outcomes: Sequence[ProviderOutcome]) -> Tuple[List[NormalizedEvent], List[str]]:
        merged: List[NormalizedEvent] = []
        contributors: List[str] = []
        for outcome in outcomes:
            if outcome.ok:
                merged.extend(outcome.records)
                contributors.append(outcome.provider)
        return dedup_events(merged), contributors
