"""Contact enrichment for businesses, event venues and institutions.

Enrichment providers bill per lookup, so each call only touches a bounded
batch: the records named in ``ids``, or else the first ``limit`` records that
have no phone/email yet. Everything else comes back untouched.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import httpx

from leaseboost.core.config import Settings, settings as default_settings
from leaseboost.core.errors import UpstreamUnavailable
from leaseboost.core.logging import get_logger
from leaseboost.providers.google_places import GooglePlacesClient, GooglePlacesError
from leaseboost.providers.hunter import HunterClient
from leaseboost.schemas.normalized import EnrichedContact, Institution, NormalizedBusiness, NormalizedEvent
from leaseboost.schemas.raw import GooglePlaceDetails, HunterDomainSearch, HunterEmailFinder, HunterVerification

log = get_logger("enrichment_service")

T = TypeVar("T")

LOOKUP_ERRORS = (httpx.HTTPError, GooglePlacesError, ValueError)

# Known institutions and the mail domain Hunter should search. Unmapped names are not guessed.
INSTITUTION_DOMAINS: Dict[str, str] = {
    "Naval Base San Diego": "navy.mil",
    "Qualcomm": "qualcomm.com",
    "UC San Diego Health": "health.ucsd.edu",
    "UC San Diego": "ucsd.edu",
    "San Diego State University": "sdsu.edu",
    "University of California San Diego": "ucsd.edu",
}


@dataclass(frozen=True)
class EnrichmentBatch:
    records: List[Any]
    enriched: int

    @property
    def total(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class InstitutionEnrichmentResult:
    institutions: List[Institution]
    enriched: int
    processed: int
    remaining: int
    message: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.institutions)

    @property
    def credits_used(self) -> int:
        # one Hunter credit per processed institution
        return self.processed


def has_contact(contact: Optional[EnrichedContact]) -> bool:
    return contact is not None and contact.has_contact


def select_targets(
    records: Sequence[T],
    key: Callable[[T], Optional[str]],
    eligible: Callable[[T], bool],
    limit: int,
    ids: Optional[Sequence[str]] = None,
) -> List[int]:
    """Indices of the records to enrich in this call.

    Explicit ids win and ignore ``limit``; otherwise the first ``limit``
    eligible records in their original order.
    """
    if ids is not None:
        wanted = set(ids)
        return [index for index, record in enumerate(records) if key(record) in wanted]
    eligible_indices = [index for index, record in enumerate(records) if eligible(record)]
    return eligible_indices[: max(limit, 0)]


def merge_contact(existing: Optional[EnrichedContact], found: Optional[EnrichedContact]) -> Optional[EnrichedContact]:
    """Overlay newly found fields; a known value is never replaced by null."""
    if found is None:
        return existing
    if existing is None:
        return found
    updates = {field: value for field, value in found.model_dump().items() if value is not None}
    return existing.model_copy(update=updates)


def domain_for(institution: Institution) -> Optional[str]:
    return institution.domain or INSTITUTION_DOMAINS.get(institution.name)


def split_name(full_name: str) -> Tuple[str, str]:
    parts = full_name.split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def contact_from_details(details: GooglePlaceDetails, place_id: str, fallback_name: Optional[str] = None,
                         fallback_address: Optional[str] = None) -> EnrichedContact:
    return EnrichedContact(
        name=details.name or fallback_name,
        phone=details.formatted_phone_number or details.international_phone_number,
        website=details.website,
        address=details.formatted_address or fallback_address,
        opening_hours=details.opening_hours.weekday_text if details.opening_hours else None,
        google_place_id=place_id,
    )


class EnrichmentService:
    def __init__(self, client: httpx.AsyncClient, settings: Settings = default_settings):
        self.client = client
        self.settings = settings

    # -------------------------------------------------------------------------
    # Places-backed enrichment (businesses, event venues)
    # -------------------------------------------------------------------------
    def _places(self) -> GooglePlacesClient:
        if not self.settings.GOOGLE_PLACES_API_KEY:
            raise UpstreamUnavailable("Google Places API key not configured")
        return GooglePlacesClient(self.client, self.settings.GOOGLE_PLACES_API_KEY)

    def _limit(self, limit: Optional[int]) -> int:
        return self.settings.ENRICH_DEFAULT_LIMIT if limit is None else limit

    async def enrich_businesses(
        self,
        businesses: List[NormalizedBusiness],
        limit: Optional[int] = None,
        ids: Optional[Sequence[str]] = None,
    ) -> EnrichmentBatch:
        places = self._places()
        targets = select_targets(
            businesses,
            key=lambda b: b.place_id,
            eligible=lambda b: bool(b.place_id) and not has_contact(b.enriched_contact),
            limit=self._limit(limit),
            ids=ids,
        )
        found = await asyncio.gather(*(self._business_contact(places, businesses[i]) for i in targets))
        return self._apply(businesses, targets, found)

    async def _business_contact(self, places: GooglePlacesClient, business: NormalizedBusiness) -> Optional[EnrichedContact]:
        if not business.place_id:
            return None
        try:
            details = await places.place_details(business.place_id)
        except LOOKUP_ERRORS as exc:
            log.error(f"Error enriching business {business.place_id}: {exc!r}")
            return None
        if details is None:
            return None
        return contact_from_details(details, business.place_id)

    async def enrich_events(
        self,
        events: List[NormalizedEvent],
        limit: Optional[int] = None,
        ids: Optional[Sequence[str]] = None,
    ) -> EnrichmentBatch:
        places = self._places()
        targets = select_targets(
            events,
            key=lambda e: e.id,
            eligible=lambda e: _has_searchable_venue(e) and not has_contact(e.enriched_contact),
            limit=self._limit(limit),
            ids=ids,
        )
        found = await asyncio.gather(*(self._venue_contact(places, events[i]) for i in targets))
        return self._apply(events, targets, found)

    async def _venue_contact(self, places: GooglePlacesClient, event: NormalizedEvent) -> Optional[EnrichedContact]:
        if not _has_searchable_venue(event):
            return None
        venue = event.venue
        try:
            matches = await places.text_search(f"{venue.name} {venue.address}")
            if not matches or not matches[0].place_id:
                return None
            place_id = matches[0].place_id
            details = await places.place_details(place_id)
        except LOOKUP_ERRORS as exc:
            log.error(f"Error enriching event {event.id} with venue contact: {exc!r}")
            return None
        if details is None:
            return None
        return contact_from_details(details, place_id, fallback_name=venue.name, fallback_address=venue.address)

    @staticmethod
    def _apply(records: List[Any], targets: List[int], found: Sequence[Optional[EnrichedContact]]) -> EnrichmentBatch:
        updated = list(records)
        enriched = 0
        for index, contact in zip(targets, found):
            if contact is None:
                continue
            enriched += 1
            record = updated[index]
            updated[index] = record.model_copy(
                update={"enriched_contact": merge_contact(record.enriched_contact, contact)}
            )
        return EnrichmentBatch(records=updated, enriched=enriched)

    # -------------------------------------------------------------------------
    # Hunter-backed enrichment (institutions)
    # -------------------------------------------------------------------------
    async def enrich_institutions(
        self,
        institutions: List[Institution],
        limit: Optional[int] = None,
        ids: Optional[Sequence[str]] = None,
    ) -> InstitutionEnrichmentResult:
        if not self.settings.HUNTER_IO_API_KEY:
            raise UpstreamUnavailable("Hunter.io API key not configured. Add HUNTER_IO_API_KEY to your .env file.")
        hunter = HunterClient(self.client, self.settings.HUNTER_IO_API_KEY)

        targets = select_targets(
            institutions,
            key=lambda i: i.id,
            eligible=lambda i: not has_contact(i.enriched_contact),
            limit=self._limit(limit),
            ids=ids,
        )
        if not targets:
            return InstitutionEnrichmentResult(
                institutions=list(institutions),
                enriched=0,
                processed=0,
                remaining=sum(1 for i in institutions if not has_contact(i.enriched_contact)),
                message=(
                    "No institutions to enrich. All institutions already have contact "
                    "information or no matching institutions found."
                ),
            )

        processed = await asyncio.gather(*(self._enrich_institution(hunter, institutions[i]) for i in targets))
        updated = list(institutions)
        for index, institution in zip(targets, processed):
            updated[index] = institution

        enriched = sum(1 for i in processed if i.enriched_contact is not None and i.enriched_contact.email)
        remaining = sum(1 for i in updated if not has_contact(i.enriched_contact))
        log.info(f"Institutions processed={len(processed)} enriched_with_email={enriched} remaining={remaining}")
        return InstitutionEnrichmentResult(
            institutions=updated,
            enriched=enriched,
            processed=len(processed),
            remaining=remaining,
        )

    async def _enrich_institution(self, hunter: HunterClient, institution: Institution) -> Institution:
        domain = domain_for(institution)
        if not domain:
            return _with_fields(institution, enrichedContact=institution.enriched_contact, error="Could not determine domain")

        first_name, last_name = split_name(institution.contact)

        # The three lookups are independent: any of them may fail without sinking the others.
        email_result, company = await asyncio.gather(
            self._find_email(hunter, domain, first_name, last_name),
            _best_effort(f"domain-search {domain}", hunter.domain_search(domain)),
        )
        verification: Optional[HunterVerification] = None
        if email_result and email_result.email:
            verification = await _best_effort(f"email-verifier {email_result.email}", hunter.verify_email(email_result.email))

        contact = EnrichedContact(
            email=(email_result.email if email_result else None) or (verification.email if verification else None),
            phone=(company.phone or company.phone_number) if company else None,
            linkedin=company.linkedin if company else None,
            twitter=company.twitter if company else None,
            confidence=(email_result.score or email_result.confidence) if email_result else None,
            sources=(len(email_result.sources) or None) if email_result else None,
        )
        log.debug(f"Institution {institution.name}: domain={domain} contact={contact.model_dump(exclude_none=True)}")

        return _with_fields(
            institution,
            enrichedContact=merge_contact(institution.enriched_contact, contact),
            companyInfo=_company_info(company),
            emailVerification=(
                {"email": verification.email, "result": verification.result or verification.status, "score": verification.score}
                if verification
                else None
            ),
        )

    @staticmethod
    async def _find_email(
        hunter: HunterClient, domain: str, first_name: str, last_name: str
    ) -> Optional[HunterEmailFinder]:
        if not first_name:
            return None
        return await _best_effort(f"email-finder {first_name} {last_name}@{domain}", hunter.find_email(domain, first_name, last_name))


async def _best_effort(label: str, lookup: Awaitable[Optional[T]]) -> Optional[T]:
    try:
        return await lookup
    except LOOKUP_ERRORS as exc:
        log.warning(f"Lookup {label} failed: {exc!r}")
        return None


def _has_searchable_venue(event: NormalizedEvent) -> bool:
    return bool(event.venue and event.venue.name and event.venue.address)


def _company_info(company: Optional[HunterDomainSearch]) -> Optional[Dict[str, Any]]:
    if company is None:
        return None
    return {
        "domain": company.domain,
        "company": company.organization or company.company,
        "phone": company.phone or company.phone_number,
        "linkedin": company.linkedin,
        "twitter": company.twitter,
        "facebook": company.facebook,
        "emails": [email.value for email in company.emails[:5]],
    }


def _with_fields(institution: Institution, **fields: Any) -> Institution:
    """Copy an institution, setting fields by their JSON names (extra keys are kept)."""
    payload = institution.model_dump(by_alias=True)
    for key, value in fields.items():
        payload[key] = value.model_dump() if isinstance(value, EnrichedContact) else value
    return Institution.model_validate(payload)
