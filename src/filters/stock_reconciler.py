# src/filters/stock_reconciler.py

"""Reduce per-retailer price records to a single product view."""

from collections.abc import Sequence

from src.models.price_record import PriceRecord, StockStatus


class StockReconciler:
    """Pure reductions over a sequence of price records."""

    @staticmethod
    def overall_stock_status(records: Sequence[PriceRecord]) -> StockStatus:
        """Combine record statuses into one.

        IN_STOCK and LIMITED_STOCK win if *any* record has them;
        OUT_OF_STOCK requires *every* record to be out of stock.
        Anything else, including an empty sequence, is UNKNOWN.
        """
        if any(r.status is StockStatus.IN_STOCK for r in records):
            return StockStatus.IN_STOCK
        if any(r.status is StockStatus.LIMITED_STOCK for r in records):
            return StockStatus.LIMITED_STOCK
        if records and all(
            r.status is StockStatus.OUT_OF_STOCK for r in records
        ):
            return StockStatus.OUT_OF_STOCK
        return StockStatus.UNKNOWN

    @staticmethod
    def available(records: Sequence[PriceRecord]) -> list[PriceRecord]:
        """Records that can currently be bought, in input order."""
        return [r for r in records if r.status.is_available]

    @staticmethod
    def best_price(records: Sequence[PriceRecord]) -> PriceRecord | None:
        """Lowest-priced available record; first one wins on ties."""
        best: PriceRecord | None = None
        for record in StockReconciler.available(records):
            if best is None or record.price < best.price:
                best = record
        return best

    @staticmethod
    def price_spread(
        records: Sequence[PriceRecord],
    ) -> tuple[float, float] | None:
        """(lowest, highest) available price, or None."""
        prices = [r.price for r in StockReconciler.available(records)]
        if not prices:
            return None
        return min(prices), max(prices)
