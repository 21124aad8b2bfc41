"""Abstract provider interface for event sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import httpx

from leaseboost.core.logging import get_logger
from leaseboost.core.normalization import miles_to_meters
from leaseboost.schemas.normalized import Coordinate, NormalizedEvent

log = get_logger("providers.base")


@dataclass(frozen=True)
class EventQuery:
    coordinate: Coordinate
    radius_miles: float = 10.0

    @property
    def radius_meters(self) -> int:
        return miles_to_meters(self.radius_miles)

    @property
    def latlng(self) -> str:
        return f"{self.coordinate.latitude},{self.coordinate.longitude}"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


@dataclass(frozen=True)
class ProviderOutcome:
    """Result of invoking one provider: records, nothing, or a failure reason."""

    provider: str
    status: OutcomeStatus
    records: List[NormalizedEvent] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def from_records(cls, provider: str, records: List[NormalizedEvent]) -> "ProviderOutcome":
        if not records:
            return cls(provider=provider, status=OutcomeStatus.EMPTY)
        return cls(provider=provider, status=OutcomeStatus.SUCCESS, records=list(records))

    @classmethod
    def failure(cls, provider: str, reason: str) -> "ProviderOutcome":
        return cls(provider=provider, status=OutcomeStatus.FAILURE, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS


class EventProvider(ABC):
    """Base class for event sources.

    Subclasses implement ``fetch`` and may raise freely; ``run`` converts
    any exception into a failure outcome so one provider never aborts the
    whole request.
    """

    name: str

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the credentials this provider needs are configured."""

    @abstractmethod
    async def fetch(self, query: EventQuery) -> List[NormalizedEvent]:
        """Fetch and normalize events near the query coordinate."""

    async def run(self, query: EventQuery) -> ProviderOutcome:
        if not self.enabled:
            return ProviderOutcome(provider=self.name, status=OutcomeStatus.EMPTY, reason="not enabled")
        try:
            events = await self.fetch(query)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Provider {self.name} failed: {exc!r}")
            return ProviderOutcome.failure(self.name, str(exc) or exc.__class__.__name__)
        return ProviderOutcome.from_records(self.name, events)
