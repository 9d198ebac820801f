# src/services/retailer_registry.py

"""Read-only registry of the retailers the aggregator queries."""

import logging
from collections.abc import Iterator

from src.config.settings import Settings
from src.models.retailer import Retailer

logger = logging.getLogger("pricewatch.registry")


class RetailerNotFoundError(KeyError):
    """Raised when a retailer id is not registered."""


class RetailerRegistry:
    """Immutable, ordered lookup of :class:`Retailer` entries.

    Built once from plain config dicts (``Settings.RETAILERS`` by
    default).  Iteration order is declaration order and is the order
    aggregation results are reported in.
    """

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
    ) -> None:
        entries = (
            Settings.RETAILERS if sources is None else sources
        )
        retailers: list[Retailer] = []
        seen: set[str] = set()
        for entry in entries:
            retailer = self._from_config(entry)
            if retailer.id in seen:
                msg = f"Duplicate retailer id '{retailer.id}'"
                raise ValueError(msg)
            seen.add(retailer.id)
            retailers.append(retailer)

        self._retailers: tuple[Retailer, ...] = tuple(retailers)
        self._by_id: dict[str, Retailer] = {
            r.id: r for r in self._retailers
        }
        logger.debug(
            "Registry loaded with %d retailers: %s",
            len(self._retailers),
            ", ".join(self._by_id),
        )

    @staticmethod
    def _from_config(entry: dict[str, str]) -> Retailer:
        """Build a Retailer from a settings dict."""
        retailer_id = entry.get("id", "").strip()
        base_url = entry.get("base_url", "").strip()
        if not retailer_id or not base_url:
            msg = f"Retailer entry needs 'id' and 'base_url': {entry!r}"
            raise ValueError(msg)
        return Retailer(
            id=retailer_id,
            display_name=entry.get("label") or retailer_id,
            base_url=base_url,
            search_url_template=entry.get("search_url_template", ""),
            currency=entry.get("currency") or Settings.DEFAULT_CURRENCY,
            logo_url=entry.get("logo", ""),
        )

    def list_retailers(self) -> tuple[Retailer, ...]:
        """Return every retailer in registry order."""
        return self._retailers

    def resolve(self, retailer_id: str) -> Retailer:
        """Return the retailer registered under *retailer_id*."""
        try:
            return self._by_id[retailer_id]
        except KeyError:
            raise RetailerNotFoundError(retailer_id) from None

    def __contains__(self, retailer_id: object) -> bool:
        return retailer_id in self._by_id

    def __iter__(self) -> Iterator[Retailer]:
        return iter(self._retailers)

    def __len__(self) -> int:
        return len(self._retailers)
