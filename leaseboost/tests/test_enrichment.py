"""Contact enrichment tests"""

import httpx
import pytest

from leaseboost.core.config import Settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.schemas.normalized import EnrichedContact, Institution, NormalizedBusiness, NormalizedEvent, Venue
from leaseboost.services.enrichment_service import EnrichmentService, merge_contact, select_targets


def _settings(**overrides):
    values = {"GOOGLE_PLACES_API_KEY": "places", "HUNTER_IO_API_KEY": "hunter", "ENRICH_DEFAULT_LIMIT": 2}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def places_handler(calls):
    def handler(request):
        path = request.url.path
        calls.append(path)
        if path.endswith("/details/json"):
            place_id = request.url.params["place_id"]
            return httpx.Response(
                200,
                json={
                    "status": "OK",
                    "result": {
                        "name": f"Place {place_id}",
                        "formatted_phone_number": "(619) 555-0100",
                        "website": f"https://{place_id}.example.com",
                        "opening_hours": {"weekday_text": ["Monday: 9 AM - 5 PM"]},
                    },
                },
            )
        if path.endswith("/textsearch/json"):
            return httpx.Response(200, json={"status": "OK", "results": [{"place_id": "venue-1", "name": "Hall"}]})
        return httpx.Response(404)

    return handler


def _businesses(count):
    return [NormalizedBusiness(name=f"Biz {i}", place_id=f"p{i}") for i in range(count)]


class TestSelection:
    """Test which records a call touches"""

    def test_limit_applies_to_eligible_records(self):
        records = [{"id": "a", "done": True}, {"id": "b", "done": False}, {"id": "c", "done": False}, {"id": "d", "done": False}]
        picked = select_targets(records, key=lambda r: r["id"], eligible=lambda r: not r["done"], limit=2)
        assert picked == [1, 2]

    def test_explicit_ids_ignore_limit(self):
        records = [{"id": str(i)} for i in range(5)]
        picked = select_targets(records, key=lambda r: r["id"], eligible=lambda r: False, limit=1, ids=["0", "3", "4"])
        assert picked == [0, 3, 4]

    def test_merge_never_replaces_known_values_with_null(self):
        existing = EnrichedContact(phone="111", website="https://old.example.com")
        found = EnrichedContact(phone=None, website="https://new.example.com", email="info@example.com")
        merged = merge_contact(existing, found)
        assert merged.phone == "111"
        assert merged.website == "https://new.example.com"
        assert merged.email == "info@example.com"
        assert merge_contact(existing, None) == existing


class TestBusinessEnrichment:
    """Test Place Details enrichment"""

    @pytest.mark.asyncio
    async def test_default_limit(self):
        calls = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler(calls))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses(_businesses(5))

        assert batch.enriched == 2
        assert batch.total == 5
        assert [b.enriched_contact is not None for b in batch.records] == [True, True, False, False, False]
        assert batch.records[0].enriched_contact.phone == "(619) 555-0100"
        assert batch.records[0].enriched_contact.google_place_id == "p0"
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_already_enriched_records_are_skipped(self):
        businesses = _businesses(3)
        businesses[0] = businesses[0].model_copy(update={"enriched_contact": EnrichedContact(phone="000")})
        calls = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler(calls))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses(businesses, limit=5)

        assert batch.enriched == 2
        assert batch.records[0].enriched_contact.phone == "000"

    @pytest.mark.asyncio
    async def test_ids_select_records_and_merge_additively(self):
        businesses = _businesses(4)
        businesses[3] = businesses[3].model_copy(
            update={"enriched_contact": EnrichedContact(phone="000", email="owner@example.com")}
        )
        calls = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler(calls))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses(businesses, limit=0, ids=["p3"])

        contact = batch.records[3].enriched_contact
        assert batch.enriched == 1
        assert contact.phone == "(619) 555-0100"
        assert contact.email == "owner@example.com"
        assert contact.website == "https://p3.example.com"

    @pytest.mark.asyncio
    async def test_lookup_failure_leaves_record_untouched(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(500))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses(_businesses(2))

        assert batch.enriched == 0
        assert all(b.enriched_contact is None for b in batch.records)

    @pytest.mark.asyncio
    async def test_client_fields_are_passed_through(self):
        business = NormalizedBusiness.model_validate({"name": "Biz", "placeId": "p9", "distanceMiles": 0.4})
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler([]))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses([business])

        dumped = batch.records[0].model_dump(by_alias=True)
        assert dumped["distanceMiles"] == 0.4
        assert dumped["enrichedContact"]["website"] == "https://p9.example.com"

    @pytest.mark.asyncio
    async def test_missing_key(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler([]))) as client:
            with pytest.raises(UpstreamUnavailable):
                await EnrichmentService(client, _settings(GOOGLE_PLACES_API_KEY=None)).enrich_businesses(_businesses(1))


class TestEventEnrichment:
    """Test venue contact enrichment"""

    @pytest.mark.asyncio
    async def test_searches_venue_then_details(self):
        events = [
            NormalizedEvent(id="e1", name="Online talk", online_event=True),
            NormalizedEvent(id="e2", name="Market", venue=Venue(name="Hall", address="1 Main St")),
        ]
        calls = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(places_handler(calls))) as client:
            batch = await EnrichmentService(client, _settings()).enrich_events(events)

        assert batch.enriched == 1
        assert batch.records[0].enriched_contact is None
        contact = batch.records[1].enriched_contact
        assert contact.google_place_id == "venue-1"
        assert contact.phone == "(619) 555-0100"
        assert calls == ["/maps/api/place/textsearch/json", "/maps/api/place/details/json"]


def hunter_handler(calls, failing=()):
    def handler(request):
        endpoint = request.url.path.rsplit("/", 1)[-1]
        calls.append(endpoint)
        if endpoint in failing:
            return httpx.Response(500)
        if endpoint == "email-finder":
            return httpx.Response(200, json={"data": {"email": "jane.doe@ucsd.edu", "score": 91, "sources": [{}, {}]}})
        if endpoint == "domain-search":
            return httpx.Response(
                200,
                json={"data": {"domain": "ucsd.edu", "organization": "UC San Diego", "twitter": "ucsandiego", "emails": []}},
            )
        if endpoint == "email-verifier":
            return httpx.Response(200, json={"data": {"email": "jane.doe@ucsd.edu", "result": "deliverable", "score": 95}})
        return httpx.Response(404)

    return handler


def _institutions():
    return [
        Institution(id=1, name="UC San Diego", contact="Jane Doe"),
        Institution(id=2, name="Unknown Widgets LLC", contact="John Roe"),
        Institution(id=3, name="Qualcomm", contact="", enriched_contact=EnrichedContact(email="hr@qualcomm.com")),
    ]


class TestInstitutionEnrichment:
    """Test Hunter.io enrichment"""

    @pytest.mark.asyncio
    async def test_enriches_known_domains(self):
        calls = []
        async with httpx.AsyncClient(transport=httpx.MockTransport(hunter_handler(calls))) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions(_institutions())

        ucsd, unknown, qualcomm = result.institutions
        assert ucsd.enriched_contact.email == "jane.doe@ucsd.edu"
        assert ucsd.enriched_contact.twitter == "ucsandiego"
        assert ucsd.enriched_contact.confidence == 91
        assert ucsd.enriched_contact.sources == 2
        assert ucsd.model_extra["emailVerification"]["result"] == "deliverable"
        assert unknown.model_extra["error"] == "Could not determine domain"
        assert qualcomm.enriched_contact.email == "hr@qualcomm.com"
        assert result.processed == 2
        assert result.credits_used == 2
        assert result.enriched == 1
        assert result.remaining == 1
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_partial_failure_is_merged(self):
        calls = []
        handler = hunter_handler(calls, failing=("domain-search",))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions(
                _institutions(), ids=["1"]
            )

        ucsd = result.institutions[0]
        assert ucsd.enriched_contact.email == "jane.doe@ucsd.edu"
        assert ucsd.enriched_contact.twitter is None
        assert ucsd.model_extra["companyInfo"] is None
        assert result.processed == 1

    @pytest.mark.asyncio
    async def test_all_lookups_failing_gives_empty_contact(self):
        handler = hunter_handler([], failing=("email-finder", "domain-search"))
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions(_institutions(), ids=["1"])

        contact = result.institutions[0].enriched_contact
        assert contact is not None
        assert contact.is_empty
        assert result.enriched == 0

    @pytest.mark.asyncio
    async def test_nothing_to_enrich(self):
        done = [Institution(id="9", name="Qualcomm", enriched_contact=EnrichedContact(phone="858"))]
        async with httpx.AsyncClient(transport=httpx.MockTransport(hunter_handler([]))) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions(done)

        assert result.processed == 0
        assert result.message.startswith("No institutions to enrich")

    @pytest.mark.asyncio
    async def test_missing_key(self):
        async with httpx.AsyncClient(transport=httpx.MockTransport(hunter_handler([]))) as client:
            with pytest.raises(UpstreamUnavailable):
                await EnrichmentService(client, _settings(HUNTER_IO_API_KEY=None)).enrich_institutions(_institutions())


class TestMalformedUpstreamReplies:
    """Test that a non-object JSON reply only affects its own record"""

    @pytest.mark.asyncio
    async def test_non_object_place_details_body(self):
        def handler(request):
            if request.url.params["place_id"] == "p0":
                return httpx.Response(200, json=["unexpected"])
            return places_handler([])(request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            batch = await EnrichmentService(client, _settings()).enrich_businesses(_businesses(2))

        assert batch.enriched == 1
        assert batch.records[0].enriched_contact is None
        assert batch.records[1].enriched_contact.phone == "(619) 555-0100"

    @pytest.mark.asyncio
    async def test_non_object_hunter_body(self):
        ok = hunter_handler([])

        def handler(request):
            if request.url.path.endswith("domain-search"):
                return httpx.Response(200, json=[1, 2, 3])
            return ok(request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions(_institutions(), ids=["1"])

        ucsd = result.institutions[0]
        assert ucsd.enriched_contact.email == "jane.doe@ucsd.edu"
        assert ucsd.model_extra["companyInfo"] is None

    @pytest.mark.asyncio
    async def test_unresolvable_domain_keeps_existing_contact(self):
        known = Institution(id="5", name="Mystery Co", enriched_contact=EnrichedContact(website="https://mystery.example"))
        async with httpx.AsyncClient(transport=httpx.MockTransport(hunter_handler([]))) as client:
            result = await EnrichmentService(client, _settings()).enrich_institutions([known], ids=["5"])

        institution = result.institutions[0]
        assert institution.model_extra["error"] == "Could not determine domain"
        assert institution.enriched_contact.website == "https://mystery.example"
