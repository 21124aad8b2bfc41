"""Lookup entrypoint - Run the full address lookup without the web server.

Usage:
    python -m leaseboost.lookup "1 Market St, San Diego, CA"
    python -m leaseboost.lookup "1 Market St, San Diego, CA" --radius 5
    python -m leaseboost.lookup "1 Market St, San Diego, CA" --no-events
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

import httpx

from leaseboost.core.config import settings
from leaseboost.core.errors import LeaseBoostError
from leaseboost.core.logging import get_logger
from leaseboost.providers.nominatim import NominatimGeocoder
from leaseboost.services.business_service import NearbyBusinessService
from leaseboost.services.event_service import EventAggregationService

logger = get_logger("lookup")


async def run_lookup(address: str, radius: float = 10.0, include_events: bool = True,
                     client: Optional[httpx.AsyncClient] = None) -> Dict[str, Any]:
    """Geocode, then nearby businesses, then events. Geocoding errors propagate."""
    own_client = client is None
    client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    try:
        located = await NominatimGeocoder(client).geocode(address)
        report: Dict[str, Any] = {
            "address": address,
            "displayName": located.display_name,
            "latitude": located.coordinate.latitude,
            "longitude": located.coordinate.longitude,
        }

        nearby = await NearbyBusinessService(client, settings).find_nearby(located.coordinate)
        report["businesses"] = [b.model_dump(by_alias=True) for b in nearby.results]
        if nearby.message:
            report["businessesMessage"] = nearby.message

        if include_events:
            try:
                found = await EventAggregationService(client, settings).find_events(located.coordinate, radius)
            except LeaseBoostError as exc:
                logger.error(f"Event search failed: {exc.message}")
                report["events"] = []
                report["eventsError"] = exc.message
            else:
                report["events"] = [e.model_dump(by_alias=True) for e in found.events]
                report["eventsSource"] = found.source
                if found.message:
                    report["eventsMessage"] = found.message
        return report
    finally:
        if own_client:
            await client.aclose()


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="python -m leaseboost.lookup", description=__doc__.splitlines()[0])
    parser.add_argument("address", help="Free-text property address")
    parser.add_argument("--radius", type=float, default=10.0, help="Event search radius in miles (default 10)")
    parser.add_argument("--no-events", action="store_true", help="Skip the event search")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for a one-off lookup. Exits 1 only when the address cannot be resolved."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logger.info(f"Lookup starting for '{args.address}'")

    try:
        report = asyncio.run(run_lookup(args.address, args.radius, include_events=not args.no_events))
    except LeaseBoostError as exc:
        logger.error(f"Lookup failed: {exc.message}")
        print(json.dumps({"error": exc.message}))
        sys.exit(1)

    print(json.dumps(report, indent=2, default=str))
    logger.info(
        f"Lookup completed: {len(report['businesses'])} businesses, {len(report.get('events', []))} events"
    )


if __name__ == "__main__":
    main()
