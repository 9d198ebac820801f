# src/models/price_record.py

"""Stock status and per-retailer price record models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class StockStatus(str, Enum):
    """Availability reported by a retailer page."""

    IN_STOCK = "IN_STOCK"
    LIMITED_STOCK = "LIMITED_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    UNKNOWN = "UNKNOWN"

    @property
    def is_available(self) -> bool:
        """True when the item can be bought right now."""
        return self in (StockStatus.IN_STOCK, StockStatus.LIMITED_STOCK)


@dataclass(frozen=True)
class PriceRecord:
    """One retailer's price and availability for a product.

    ``price`` is 0.0 when nothing was found; it is only meaningful when
    ``status.is_available``.
    """

    retailer_id: str
    price: float
    currency: str
    status: StockStatus
    last_updated: datetime
    source_url: str

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-ready mapping."""
        return {
            "retailer_id": self.retailer_id,
            "price": self.price,
            "currency": self.currency,
            "status": self.status.value,
            "last_updated": self.last_updated.isoformat(),
            "source_url": self.source_url,
        }
