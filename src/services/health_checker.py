# src/services/health_checker.py

"""Retailer connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.models.retailer import Retailer
from src.scrapers.page_fetcher import PageFetcher
from src.services.retailer_registry import RetailerRegistry

logger = logging.getLogger("pricewatch.health")

_HEALTH_TIMEOUT = 10  # seconds per retailer
_SLOW_MS = 5000.0


@dataclass
class HealthResult:
    """Result of a single retailer health check."""

    retailer_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_retailer(retailer: Retailer) -> HealthResult:
    """GET the retailer's homepage once and classify the response."""
    start = time.monotonic()
    try:
        fetcher = PageFetcher(retailer.id, referer=retailer.base_url)
        try:
            resp = fetcher.session.get(
                retailer.base_url,
                headers=dict(fetcher.settings.DEFAULT_HEADERS),
                timeout=_HEALTH_TIMEOUT,
            )
        finally:
            fetcher.close()
    except Exception as exc:
        return HealthResult(
            retailer_id=retailer.id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    if resp.status_code != 200:
        status, message = "down", f"HTTP {resp.status_code}"
    elif elapsed_ms > _SLOW_MS:
        status, message = "slow", "High latency"
    else:
        status, message = "ok", ""
    return HealthResult(
        retailer_id=retailer.id,
        status=status,
        latency_ms=elapsed_ms,
        message=message,
    )


class HealthChecker:
    """Runs concurrent health probes against every retailer."""

    def __init__(self, registry: RetailerRegistry | None = None) -> None:
        if registry is None:
            registry = RetailerRegistry()
        self.retailers = registry.list_retailers()

    async def check_all(self) -> list[HealthResult]:
        """Probe every retailer; results follow registry order."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(probe_retailer, r)
                    for r in self.retailers
                )
            )
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.retailer_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
