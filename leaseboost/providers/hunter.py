"""Hunter.io client: email finder, domain search and email verifier."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from leaseboost.core.logging import get_logger
from leaseboost.schemas.raw import HunterDomainSearch, HunterEmailFinder, HunterVerification

log = get_logger("providers.hunter")

HUNTER_URL = "https://api.hunter.io/v2"


class HunterClient:
    """Each call costs one Hunter credit and returns None when Hunter has no data."""

    def __init__(self, client: httpx.AsyncClient, api_key: str):
        self.client = client
        self.api_key = api_key

    async def _get(self, path: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        resp = await self.client.get(f"{HUNTER_URL}/{path}", params={**params, "api_key": self.api_key})
        # 404 means "nothing known" on the finder endpoints
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        payload = resp.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Hunter {path} returned a non-object body")
        return payload.get("data") or None

    async def find_email(self, domain: str, first_name: str, last_name: str) -> Optional[HunterEmailFinder]:
        data = await self._get(
            "email-finder",
            {"domain": domain, "first_name": first_name, "last_name": last_name},
        )
        if not data or not data.get("email"):
            return None
        return HunterEmailFinder.model_validate(data)

    async def domain_search(self, domain: str) -> Optional[HunterDomainSearch]:
        data = await self._get("domain-search", {"domain": domain})
        if not data:
            return None
        return HunterDomainSearch.model_validate(data)

    async def verify_email(self, email: str) -> Optional[HunterVerification]:
        data = await self._get("email-verifier", {"email": email})
        if not data:
            return None
        return HunterVerification.model_validate(data)
