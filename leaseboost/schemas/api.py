from typing import List, Optional

from pydantic import BaseModel, Field

from leaseboost.schemas.normalized import (
    CamelModel,
    Institution,
    NormalizedBusiness,
    NormalizedEvent,
)


class GeocodeRequest(BaseModel):
    # left optional so a missing address gets the same 400 as a blank one
    address: Optional[str] = None


class GeocodeResponse(CamelModel):
    latitude: float
    longitude: float
    display_name: str


class NearbyPlacesResponse(BaseModel):
    results: List[NormalizedBusiness]
    status: str
    message: Optional[str] = None


class EventsResponse(BaseModel):
    events: List[NormalizedEvent]
    source: str
    message: Optional[str] = None


class EnrichBusinessesRequest(BaseModel):
    businesses: List[NormalizedBusiness]
    limit: Optional[int] = Field(None, ge=0)
    ids: Optional[List[str]] = None


class EnrichBusinessesResponse(BaseModel):
    businesses: List[NormalizedBusiness]
    enriched: int
    total: int


class EnrichEventsRequest(BaseModel):
    events: List[NormalizedEvent]
    limit: Optional[int] = Field(None, ge=0)
    ids: Optional[List[str]] = None


class EnrichEventsResponse(BaseModel):
    events: List[NormalizedEvent]
    enriched: int
    total: int


class EnrichInstitutionsRequest(CamelModel):
    institutions: List[Institution]
    limit: Optional[int] = Field(None, ge=0)
    institution_ids: Optional[List[str]] = None


class EnrichInstitutionsResponse(CamelModel):
    institutions: List[Institution]
    enriched: int
    processed: int
    total: int
    remaining: int
    credits_used: int
    message: Optional[str] = None


class MapsConfigResponse(CamelModel):
    api_key: str


class HealthResponse(BaseModel):
    status: str
    environment: str
    providers: List[str]


class ErrorResponse(BaseModel):
    error: str
