# src/services/aggregation_service.py

"""Public entry point: aggregate one product's prices across retailers."""

import logging

from src.models.aggregation_result import AggregationResult
from src.models.price_record import PriceRecord
from src.services.fetch_orchestrator import (
    FetchOrchestrator,
    OutcomeKind,
    RetailerOutcome,
)

logger = logging.getLogger("pricewatch.aggregation")


def _no_price_message(
    product_name: str,
    attempted: int,
    failed: int,
) -> str:
    """Explain why no retailer produced a price."""
    if attempted == 0:
        return f"No prices found for {product_name}: no retailers available"
    if failed == attempted:
        return (
            f"No prices found for {product_name}: "
            f"all {attempted} retailers were unreachable"
        )
    if failed == 0:
        return (
            f"No prices found for {product_name}: checked "
            f"{attempted} retailers but none listed a price"
        )
    return (
        f"No prices found for {product_name}: "
        f"{attempted - failed} retailers had no price, "
        f"{failed} were unreachable"
    )


class AggregationService:
    """Run a retrieval cycle and shape it into an AggregationResult.

    Every call is a fresh, independent cycle; nothing is cached.
    """

    def __init__(
        self,
        orchestrator: FetchOrchestrator | None = None,
    ) -> None:
        self._orchestrator = orchestrator

    @property
    def orchestrator(self) -> FetchOrchestrator:
        # Built lazily so setup errors surface inside aggregate()
        if self._orchestrator is None:
            self._orchestrator = FetchOrchestrator()
        return self._orchestrator

    @staticmethod
    def _summarise(
        product_id: str,
        product_name: str,
        outcomes: list[RetailerOutcome],
    ) -> AggregationResult:
        records: list[PriceRecord] = [
            o.record
            for o in outcomes
            if o.kind is OutcomeKind.FOUND and o.record is not None
        ]
        failed = [
            o.retailer_id for o in outcomes if o.kind is OutcomeKind.FAILED
        ]
        not_found = [
            o.retailer_id
            for o in outcomes
            if o.kind is OutcomeKind.NOT_FOUND
        ]

        result = AggregationResult(
            success=bool(records),
            records=records,
            product_id=product_id,
            product_name=product_name,
            retailers_checked=len(outcomes),
            failed_retailers=failed,
            not_found_retailers=not_found,
        )
        if records:
            result.message = (
                f"Found {len(records)} prices for {product_name}"
            )
        else:
            result.message = _no_price_message(
                product_name, len(outcomes), len(failed)
            )
        return result

    async def aggregate(
        self,
        product_id: str,
        product_name: str,
    ) -> AggregationResult:
        """Collect prices for one product from every retailer.

        Per-retailer failures never raise; only a failure of the
        whole cycle is reported through ``error``.
        """
        logger.info(
            "Aggregating prices for %s (ID: %s)", product_name, product_id
        )
        try:
            outcomes = await self.orchestrator.fetch_all(product_name)
        except Exception as exc:
            logger.error(
                "Aggregation failed for %s (ID: %s): %s",
                product_name,
                product_id,
                exc,
                exc_info=True,
            )
            return AggregationResult(
                success=False,
                message="Failed to retrieve prices",
                error=str(exc) or type(exc).__name__,
                product_id=product_id,
                product_name=product_name,
            )

        result = self._summarise(product_id, product_name, outcomes)
        if result.failed_retailers:
            logger.warning(
                "Retailers failed for %s: %s",
                product_name,
                ", ".join(result.failed_retailers),
            )
        logger.info("%s", result.message)
        return result


async def aggregate(product_id: str, product_name: str) -> AggregationResult:
    """Aggregate with a default-configured service."""
    return await AggregationService().aggregate(product_id, product_name)
