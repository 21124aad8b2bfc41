"""Deduplication and normalization helpers shared by the aggregation services."""

from __future__ import annotations

import hashlib
import math
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, TypeVar
from urllib.parse import quote_plus, urlparse

from leaseboost.schemas.normalized import NormalizedBusiness, NormalizedEvent

T = TypeVar("T")

METERS_PER_MILE = 1609

# Heuristic providers only keep events whose name/description mentions one of these.
COMMUNITY_KEYWORDS = ("market", "farmers", "community", "festival", "fair", "local")

SEARCH_URL = "https://www.google.com/search?q={query}"


def miles_to_meters(miles: float) -> int:
    """Convert a search radius to whole meters, rounding half up."""
    return int(math.floor(miles * METERS_PER_MILE + 0.5))


def deduplicate(records: Iterable[T], key: Callable[[int, T], Hashable]) -> List[T]:
    """Collapse records sharing a key.

    Keys keep the position of their first occurrence while the stored value is
    the last record seen for that key. Running it twice is a no-op.
    """
    merged: Dict[Hashable, T] = {}
    for index, record in enumerate(records):
        merged[key(index, record)] = record
    return list(merged.values())


def dedup_events(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    return deduplicate(events, key=lambda _, event: event.id)


def dedup_businesses(businesses: Iterable[NormalizedBusiness]) -> List[NormalizedBusiness]:
    # Records without a placeId are never merged with anything.
    return deduplicate(
        businesses,
        key=lambda index, business: business.place_id or f"__index-{index}",
    )


def matches_keywords(texts: Sequence[Optional[str]], keywords: Sequence[str] = COMMUNITY_KEYWORDS) -> bool:
    haystack = " ".join(text.lower() for text in texts if text)
    return any(keyword in haystack for keyword in keywords)


def search_url(title: Optional[str], venue_name: Optional[str] = None, date: Optional[str] = None) -> Optional[str]:
    """Best-effort web search link for events whose provider gives none."""
    if not title:
        return None
    parts = [title]
    if venue_name and venue_name != title:
        parts.append(venue_name)
    if date:
        parts.append(date[:10])
    return SEARCH_URL.format(query=quote_plus(" ".join(parts)))


def first_external_url(candidates: Iterable[Optional[str]], internal_hosts: Sequence[str]) -> Optional[str]:
    """Return the first http(s) URL that does not point back at the provider itself."""
    for candidate in candidates:
        if not candidate:
            continue
        parsed = urlparse(candidate)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            continue
        host = parsed.netloc.lower()
        if any(host == internal or host.endswith(f".{internal}") for internal in internal_hosts):
            continue
        return candidate
    return None


def stable_event_id(prefix: str, name: Optional[str], start: Optional[str], venue: Optional[str]) -> str:
    """Deterministic id for records whose provider supplies none."""
    digest = hashlib.sha1(f"{name or ''}|{start or ''}|{venue or ''}".encode("utf-8")).hexdigest()
    return f"{prefix}-{digest[:16]}"


def join_address(*parts: Optional[str]) -> str:
    return ", ".join(part.strip() for part in parts if part and part.strip())
