"""Event aggregation tests"""

from typing import List

import httpx
import pytest

from leaseboost.core.config import Settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.providers.base import EventProvider, EventQuery, OutcomeStatus
from leaseboost.providers.runner import ProviderRunner
from leaseboost.schemas.normalized import Coordinate, NormalizedEvent
from leaseboost.services.event_service import NO_PROVIDERS_MESSAGE, EventAggregationService

SAN_DIEGO = Coordinate(latitude=32.7157, longitude=-117.1611)


class MockProvider(EventProvider):
    """Provider returning a fixed list of events"""

    def __init__(self, name, events=None, enabled=True):
        super().__init__(client=None)
        self.name = name
        self.events = events or []
        self._enabled = enabled
        self.calls = 0

    @property
    def enabled(self):
        return self._enabled

    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        self.calls += 1
        return self.events


class MockFailingProvider(MockProvider):
    """Provider that fails"""

    async def fetch(self, query):
        self.calls += 1
        raise httpx.ConnectError("Simulated fetch failure")


def _events(prefix, count):
    return [NormalizedEvent(id=f"{prefix}-{i}", name=f"{prefix} market {i}") for i in range(count)]


def _service(primary, fallback=None, **overrides):
    return EventAggregationService(
        client=None,
        settings=Settings(_env_file=None, **overrides),
        primary=primary,
        fallback=fallback or [],
    )


class TestProviderRunner:
    """Test provider outcomes"""

    @pytest.mark.asyncio
    async def test_failure_becomes_outcome(self):
        outcomes = await ProviderRunner(
            [MockFailingProvider("broken"), MockProvider("ok", _events("ok", 1))]
        ).run(EventQuery(SAN_DIEGO))
        assert [o.status for o in outcomes] == [OutcomeStatus.FAILURE, OutcomeStatus.SUCCESS]
        assert "Simulated fetch failure" in outcomes[0].reason

    @pytest.mark.asyncio
    async def test_disabled_provider_is_not_called(self):
        provider = MockProvider("off", _events("off", 2), enabled=False)
        outcome = await provider.run(EventQuery(SAN_DIEGO))
        assert outcome.status == OutcomeStatus.EMPTY
        assert provider.calls == 0


class TestEventAggregation:
    """Test the accumulate-until-something-found policy"""

    @pytest.mark.asyncio
    async def test_empty_first_provider_does_not_hide_second(self):
        service = _service([MockProvider("meetup"), MockProvider("facebook", _events("fb", 3))])
        result = await service.find_events(SAN_DIEGO)
        assert [e.id for e in result.events] == ["fb-0", "fb-1", "fb-2"]
        assert result.source == "facebook"

    @pytest.mark.asyncio
    async def test_primaries_accumulate_in_priority_order(self):
        shared = NormalizedEvent(id="dup", name="Community fair")
        service = _service(
            [
                MockProvider("meetup", _events("meetup", 2) + [shared]),
                MockFailingProvider("facebook"),
                MockProvider("ticketmaster", [shared] + _events("tm", 1)),
            ]
        )
        result = await service.find_events(SAN_DIEGO)
        assert [e.id for e in result.events] == ["meetup-0", "meetup-1", "dup", "tm-0"]
        assert result.source == "meetup+ticketmaster"

    @pytest.mark.asyncio
    async def test_results_are_capped(self):
        service = _service([MockProvider("predicthq", _events("phq", 30))], EVENTS_RESULT_LIMIT=20)
        result = await service.find_events(SAN_DIEGO)
        assert len(result.events) == 20

    @pytest.mark.asyncio
    async def test_fallback_only_when_primaries_find_nothing(self):
        fallback = MockProvider("google_places", _events("gplaces", 2))
        service = _service([MockProvider("meetup", _events("meetup", 1))], [fallback])
        result = await service.find_events(SAN_DIEGO)
        assert result.source == "meetup"
        assert fallback.calls == 0

        service = _service([MockProvider("meetup"), MockFailingProvider("facebook")], [fallback])
        result = await service.find_events(SAN_DIEGO)
        assert result.source == "google_places"
        assert len(result.events) == 2

    @pytest.mark.asyncio
    async def test_all_providers_failing_raises(self):
        service = _service([MockFailingProvider("meetup")], [MockFailingProvider("google_places")])
        with pytest.raises(UpstreamUnavailable):
            await service.find_events(SAN_DIEGO)

    @pytest.mark.asyncio
    async def test_nothing_found_lists_checked_providers(self):
        service = _service([MockProvider("meetup"), MockFailingProvider("facebook")])
        result = await service.find_events(SAN_DIEGO)
        assert result.events == []
        assert result.source == "none"
        assert "meetup, facebook" in result.message

    @pytest.mark.asyncio
    async def test_no_enabled_providers(self):
        service = _service([MockProvider("meetup", enabled=False)], [MockProvider("google_places", enabled=False)])
        result = await service.find_events(SAN_DIEGO)
        assert result.events == []
        assert result.source == "none"
        assert result.message == NO_PROVIDERS_MESSAGE

    def test_default_providers_follow_credentials(self):
        service = EventAggregationService(
            client=None,
            settings=Settings(
                _env_file=None,
                TICKETMASTER_API_KEY="tm",
                GOOGLE_PLACES_API_KEY=None,
                APIFY_API_TOKEN=None,
                MEETUP_API_KEY=None,
                FACEBOOK_ACCESS_TOKEN=None,
                PREDICTHQ_API_TOKEN=None,
            ),
        )
        enabled = [p.name for p in service.primary + service.fallback if p.enabled]
        assert enabled == ["ticketmaster"]
