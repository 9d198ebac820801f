# src/services/fetch_orchestrator.py

"""Fan-out of one product search to every registered retailer."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import quote

from src.config.settings import Settings
from src.models.price_record import PriceRecord, StockStatus
from src.models.retailer import Retailer
from src.scrapers.page_fetcher import PageFetcher, RetrievalError
from src.scrapers.source_extractor import SourceExtractor
from src.services.retailer_registry import RetailerRegistry

logger = logging.getLogger("pricewatch.orchestrator")


class OutcomeKind(str, Enum):
    """What happened when one retailer was queried."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class RetailerOutcome:
    """Result of querying a single retailer."""

    retailer_id: str
    kind: OutcomeKind
    record: PriceRecord | None = None
    status: StockStatus = StockStatus.UNKNOWN
    reason: str = ""
    url: str = ""

    @classmethod
    def failed(
        cls, retailer_id: str, reason: str, url: str = "",
    ) -> "RetailerOutcome":
        return cls(
            retailer_id=retailer_id,
            kind=OutcomeKind.FAILED,
            reason=reason,
            url=url,
        )


FetcherFactory = Callable[[Retailer], PageFetcher]


def _default_fetcher(retailer: Retailer) -> PageFetcher:
    return PageFetcher(retailer.id, referer=retailer.base_url + "/")


def normalize_query(product_name: str) -> str:
    """Collapse runs of whitespace and trim."""
    return " ".join(product_name.split())


def build_search_url(retailer: Retailer, product_name: str) -> str | None:
    """Return the retailer's search URL, or None if it has no template."""
    template = retailer.search_url_template
    if not template or "{query}" not in template:
        return None
    encoded = quote(normalize_query(product_name), safe="")
    try:
        path = template.format(query=encoded)
    except (KeyError, IndexError, ValueError):
        logger.warning(
            "[%s] Unusable search template %r",
            retailer.id,
            template,
        )
        return None
    return retailer.base_url.rstrip("/") + path


class FetchOrchestrator:
    """Query every retailer independently and collect outcomes.

    Retailers run concurrently in worker threads, each with its own
    fetcher.  Outcomes are returned in registry order regardless of
    which retailer answers first, and no retailer's failure affects
    another.
    """

    def __init__(
        self,
        registry: RetailerRegistry | None = None,
        extractor: SourceExtractor | None = None,
        fetcher_factory: FetcherFactory | None = None,
        retailer_timeout: float | None = None,
    ) -> None:
        self.settings = Settings()
        self.registry = (
            registry if registry is not None else RetailerRegistry()
        )
        self.extractor = extractor or SourceExtractor()
        self.fetcher_factory: FetcherFactory = (
            fetcher_factory or _default_fetcher
        )
        self.retailer_timeout: float = (
            retailer_timeout
            if retailer_timeout is not None
            else self.settings.RETAILER_TIMEOUT
        )

    def _fetch_one(self, retailer: Retailer, url: str) -> RetailerOutcome:
        """Retrieve and extract one retailer (runs in a worker thread)."""
        fetcher = self.fetcher_factory(retailer)
        try:
            document = fetcher.fetch(url)
        finally:
            fetcher.close()
        retrieved_at = datetime.now(timezone.utc)
        extraction = self.extractor.extract(retailer.id, document)

        if not extraction.found:
            logger.info(
                "[%s] No price found (status=%s)",
                retailer.id,
                extraction.status.value,
            )
            return RetailerOutcome(
                retailer_id=retailer.id,
                kind=OutcomeKind.NOT_FOUND,
                status=extraction.status,
                url=url,
            )

        record = PriceRecord(
            retailer_id=retailer.id,
            price=extraction.price,
            currency=retailer.currency,
            status=extraction.status,
            last_updated=retrieved_at,
            source_url=url,
        )
        return RetailerOutcome(
            retailer_id=retailer.id,
            kind=OutcomeKind.FOUND,
            record=record,
            status=extraction.status,
            url=url,
        )

    async def _run_one(self, retailer: Retailer, url: str) -> RetailerOutcome:
        """Run one retailer under the timeout, containing every failure."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._fetch_one, retailer, url),
                timeout=self.retailer_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "[%s] Timed out after %.1fs",
                retailer.id,
                self.retailer_timeout,
            )
            return RetailerOutcome.failed(retailer.id, "timeout", url)
        except RetrievalError as exc:
            logger.warning(
                "[%s] Retrieval failed: %s", retailer.id, exc.reason
            )
            return RetailerOutcome.failed(retailer.id, exc.reason, url)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error: %s",
                retailer.id,
                exc,
                exc_info=True,
            )
            return RetailerOutcome.failed(
                retailer.id, str(exc) or type(exc).__name__, url
            )

    async def fetch_all(self, product_name: str) -> list[RetailerOutcome]:
        """Query every retailer for *product_name*.

        Retailers without a usable search template are skipped and do
        not appear in the returned list.
        """
        jobs: list[tuple[Retailer, str]] = []
        for retailer in self.registry.list_retailers():
            url = build_search_url(retailer, product_name)
            if url is None:
                logger.debug(
                    "[%s] Skipped: no search template", retailer.id
                )
                continue
            jobs.append((retailer, url))

        # gather() preserves submission order, i.e. registry order
        outcomes: list[RetailerOutcome] = list(
            await asyncio.gather(
                *(self._run_one(r, url) for r, url in jobs)
            )
        )
        logger.info(
            "Fetched '%s' from %d retailers: %d found, %d not found, "
            "%d failed",
            product_name,
            len(outcomes),
            sum(o.kind is OutcomeKind.FOUND for o in outcomes),
            sum(o.kind is OutcomeKind.NOT_FOUND for o in outcomes),
            sum(o.kind is OutcomeKind.FAILED for o in outcomes),
        )
        return outcomes
