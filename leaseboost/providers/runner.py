"""Orchestration logic for event providers."""

from __future__ import annotations

import asyncio
from typing import List

from leaseboost.core.logging import get_logger
from .base import EventProvider, EventQuery, ProviderOutcome

log = get_logger("providers.runner")


class ProviderRunner:
    """Runs providers concurrently and returns their outcomes in priority order."""

    def __init__(self, providers: List[EventProvider]):
        self.providers = providers

    async def run(self, query: EventQuery) -> List[ProviderOutcome]:
        if not self.providers:
            return []
        # gather keeps argument order, so outcomes follow the priority list, not arrival time
        outcomes = await asyncio.gather(*(provider.run(query) for provider in self.providers))
        for outcome in outcomes:
            log.info(
                f"Provider={outcome.provider} status={outcome.status.value} "
                f"records={len(outcome.records)}" + (f" reason={outcome.reason}" if outcome.reason else "")
            )
        return list(outcomes)
