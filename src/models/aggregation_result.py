# src/models/aggregation_result.py

"""Result container for one aggregation cycle."""

from dataclasses import dataclass, field

from src.models.price_record import PriceRecord


@dataclass
class AggregationResult:
    """Outcome of querying every retailer for one product.

    ``records`` only holds retailers where a price was found, in
    registry order.  ``error`` is set only when the call as a whole
    could not run.
    """

    success: bool
    records: list[PriceRecord] = field(
        default_factory=lambda: list[PriceRecord]()
    )
    message: str | None = None
    error: str | None = None
    product_id: str = ""
    product_name: str = ""
    retailers_checked: int = 0
    failed_retailers: list[str] = field(
        default_factory=lambda: list[str]()
    )
    not_found_retailers: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def is_partial(self) -> bool:
        """True when some, but not all, checked retailers had a price."""
        return self.success and len(self.records) < self.retailers_checked

    def to_dict(self) -> dict[str, object]:
        """Serialise to a JSON-ready mapping."""
        return {
            "success": self.success,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "message": self.message,
            "error": self.error,
            "retailers_checked": self.retailers_checked,
            "failed_retailers": list(self.failed_retailers),
            "not_found_retailers": list(self.not_found_retailers),
            "records": [r.to_dict() for r in self.records],
        }
