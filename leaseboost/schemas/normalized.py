"""Provider-agnostic records returned by every endpoint.

All records serialize with camelCase keys. Optional fields a provider does
not supply stay ``None`` rather than being omitted, so the presentation layer
always sees the same shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(CamelModel):
    """A geocoded point. Produced once per request and never mutated."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Venue(CamelModel):
    name: str = ""
    address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class EnrichedContact(CamelModel):
    """Contact details attached by the enrichment stage.

    Venue lookups fill the Places fields (phone, website, hours), institution
    lookups fill the Hunter fields (email, socials, confidence).
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    opening_hours: Optional[List[str]] = None
    google_place_id: Optional[str] = None
    email: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    confidence: Optional[int] = None
    sources: Optional[int] = None

    @property
    def has_contact(self) -> bool:
        return bool(self.phone or self.email)

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class BusinessStatus(str, Enum):
    OPERATIONAL = "OPERATIONAL"
    CLOSED_TEMPORARILY = "CLOSED_TEMPORARILY"
    CLOSED_PERMANENTLY = "CLOSED_PERMANENTLY"


class LatLng(CamelModel):
    lat: float
    lng: float


class Geometry(CamelModel):
    location: Optional[LatLng] = None


class NormalizedBusiness(CamelModel):
    # Clients post these back for enrichment; keep whatever else they carry.
    model_config = ConfigDict(extra="allow")

    name: str = ""
    types: List[str] = Field(default_factory=list)
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    vicinity: str = ""
    place_id: Optional[str] = None
    price_level: Optional[int] = Field(default=None, ge=0, le=4)
    business_status: Optional[BusinessStatus] = None
    geometry: Optional[Geometry] = None
    enriched_contact: Optional[EnrichedContact] = None

    @field_validator("business_status", mode="before")
    @classmethod
    def _unknown_status_is_none(cls, value: Any) -> Any:
        if value is None or isinstance(value, BusinessStatus):
            return value
        try:
            return BusinessStatus(str(value).upper())
        except ValueError:
            return None


class NormalizedEvent(CamelModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    description: str = ""
    start: Optional[str] = None
    end: Optional[str] = None
    url: Optional[str] = None
    venue: Optional[Venue] = None
    online_event: bool = False
    is_free: Optional[bool] = None
    has_available_tickets: Optional[bool] = None
    logo: Optional[str] = None
    rating: Optional[float] = None
    types: List[str] = Field(default_factory=list)
    attendees: Optional[int] = None
    group: Optional[str] = None
    enriched_contact: Optional[EnrichedContact] = None


class Institution(CamelModel):
    """A large local employer or school whose contacts we look up by domain."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    contact: str = ""
    domain: Optional[str] = None
    enriched_contact: Optional[EnrichedContact] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value
