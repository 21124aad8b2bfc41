"""Typed views of raw provider payloads.

Every provider parses its JSON into one of these models at the adapter
boundary; only the mapped ``Normalized*`` records travel further.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RawModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CamelRawModel(RawModel):
    model_config = ConfigDict(alias_generator=to_camel)


# -----------------------------------------------------------------------------
# Nominatim / Google
# -----------------------------------------------------------------------------


class NominatimPlace(RawModel):
    lat: float
    lon: float
    display_name: str = ""


class AddressComponent(RawModel):
    long_name: str = ""
    short_name: str = ""
    types: List[str] = Field(default_factory=list)


class GoogleGeocodeResult(RawModel):
    address_components: List[AddressComponent] = Field(default_factory=list)
    formatted_address: str = ""


class GoogleLatLng(RawModel):
    lat: float
    lng: float


class GoogleGeometry(RawModel):
    location: Optional[GoogleLatLng] = None


class GooglePhoto(RawModel):
    photo_reference: str


class GooglePlace(RawModel):
    place_id: Optional[str] = None
    name: str = ""
    types: List[str] = Field(default_factory=list)
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    vicinity: Optional[str] = None
    formatted_address: Optional[str] = None
    price_level: Optional[int] = None
    business_status: Optional[str] = None
    geometry: Optional[GoogleGeometry] = None
    photos: List[GooglePhoto] = Field(default_factory=list)
    url: Optional[str] = None


class OpeningHours(RawModel):
    weekday_text: Optional[List[str]] = None


class GooglePlaceDetails(RawModel):
    name: Optional[str] = None
    formatted_phone_number: Optional[str] = None
    international_phone_number: Optional[str] = None
    website: Optional[str] = None
    formatted_address: Optional[str] = None
    opening_hours: Optional[OpeningHours] = None


# -----------------------------------------------------------------------------
# Apify meetup scraper dataset item
# -----------------------------------------------------------------------------


class ApifyVenue(CamelRawModel):
    name: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class ApifyMeetupItem(CamelRawModel):
    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    url: Optional[str] = None
    event_url: Optional[str] = None
    venue: Optional[ApifyVenue] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_online: bool = False
    image: Optional[str] = None
    going: Optional[int] = None


class ApifyRun(RawModel):
    id: str
    status: str = "READY"
    default_dataset_id: Optional[str] = Field(default=None, alias="defaultDatasetId")


# -----------------------------------------------------------------------------
# Meetup GraphQL
# -----------------------------------------------------------------------------


class MeetupVenue(CamelRawModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


class MeetupGroup(CamelRawModel):
    name: Optional[str] = None


class MeetupEvent(CamelRawModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    date_time: Optional[str] = None
    end_time: Optional[str] = None
    event_url: Optional[str] = None
    venue: Optional[MeetupVenue] = None
    group: Optional[MeetupGroup] = None
    going: Optional[int] = None
    is_online: bool = False


# -----------------------------------------------------------------------------
# Facebook Graph
# -----------------------------------------------------------------------------


class FacebookLocation(RawModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FacebookPlace(RawModel):
    name: Optional[str] = None
    location: Optional[FacebookLocation] = None


class FacebookCover(RawModel):
    source: Optional[str] = None


class FacebookEvent(RawModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    place: Optional[FacebookPlace] = None
    cover: Optional[FacebookCover] = None
    attending_count: Optional[int] = None
    is_free: Optional[bool] = None


# -----------------------------------------------------------------------------
# PredictHQ
# -----------------------------------------------------------------------------


class PredictHQEntity(RawModel):
    entity_id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    formatted_address: Optional[str] = None
    website: Optional[str] = None
    url: Optional[str] = None


class PredictHQEvent(RawModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    labels: List[str] = Field(default_factory=list)
    start: Optional[str] = None
    end: Optional[str] = None
    rank: Optional[int] = None
    phq_attendance: Optional[int] = None
    entities: List[PredictHQEntity] = Field(default_factory=list)
    location: List[float] = Field(default_factory=list)  # [lon, lat]


# -----------------------------------------------------------------------------
# Ticketmaster Discovery
# -----------------------------------------------------------------------------


class TicketmasterName(RawModel):
    name: Optional[str] = None


class TicketmasterAddress(RawModel):
    line1: Optional[str] = None


class TicketmasterState(CamelRawModel):
    state_code: Optional[str] = None


class TicketmasterLocation(RawModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class TicketmasterVenue(RawModel):
    name: Optional[str] = None
    address: Optional[TicketmasterAddress] = None
    city: Optional[TicketmasterName] = None
    state: Optional[TicketmasterState] = None
    location: Optional[TicketmasterLocation] = None


class TicketmasterEmbedded(RawModel):
    venues: List[TicketmasterVenue] = Field(default_factory=list)


class TicketmasterStart(CamelRawModel):
    date_time: Optional[str] = None
    local_date: Optional[str] = None


class TicketmasterStatus(RawModel):
    code: Optional[str] = None


class TicketmasterDates(RawModel):
    start: Optional[TicketmasterStart] = None
    end: Optional[TicketmasterStart] = None
    status: Optional[TicketmasterStatus] = None


class TicketmasterImage(RawModel):
    url: str
    width: int = 0


class TicketmasterClassification(RawModel):
    segment: Optional[TicketmasterName] = None
    genre: Optional[TicketmasterName] = None


class TicketmasterPriceRange(RawModel):
    min: Optional[float] = None
    max: Optional[float] = None


class TicketmasterEvent(RawModel):
    id: str
    name: str = ""
    info: Optional[str] = None
    url: Optional[str] = None
    dates: Optional[TicketmasterDates] = None
    images: List[TicketmasterImage] = Field(default_factory=list)
    classifications: List[TicketmasterClassification] = Field(default_factory=list)
    price_ranges: List[TicketmasterPriceRange] = Field(default_factory=list, alias="priceRanges")
    embedded: Optional[TicketmasterEmbedded] = Field(default=None, alias="_embedded")


# -----------------------------------------------------------------------------
# Hunter.io
# -----------------------------------------------------------------------------


class HunterEmailFinder(RawModel):
    email: Optional[str] = None
    score: Optional[int] = None
    confidence: Optional[int] = None
    sources: List[Any] = Field(default_factory=list)


class HunterDomainEmail(RawModel):
    value: str


class HunterDomainSearch(RawModel):
    domain: Optional[str] = None
    organization: Optional[str] = None
    company: Optional[str] = None
    emails: List[HunterDomainEmail] = Field(default_factory=list)
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    phone: Optional[str] = None
    phone_number: Optional[str] = None


class HunterVerification(RawModel):
    email: Optional[str] = None
    result: Optional[str] = None
    status: Optional[str] = None
    score: Optional[int] = None

