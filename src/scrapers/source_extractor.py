# src/scrapers/source_extractor.py

"""Table-driven price and stock extraction from retailer pages.

Each retailer has one row in ``selectors.json``::

    "scan": {
        "price": "li.product span.price",
        "stock": "li.product .stock",
        "price_attr": "content",          # optional, read attribute
        "price_pattern": "£([\\d,.]+)",    # optional, regex fallback
        "stock_attr": "href",             # optional
        "stock_pattern": "(in stock|...)",  # optional
        "status_keywords": {...}          # optional extra keywords
    }

Adding a retailer means adding a row here and an entry in
``Settings.RETAILERS``; no code changes.
"""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bs4 import BeautifulSoup, Tag

from src.config.settings import Settings
from src.models.price_record import StockStatus

logger = logging.getLogger("pricewatch.extractor")

# Fixed evaluation order for keyword matching
_STATUS_ORDER: tuple[StockStatus, ...] = (
    StockStatus.IN_STOCK,
    StockStatus.LIMITED_STOCK,
    StockStatus.OUT_OF_STOCK,
)

_NON_PRICE_CHARS = re.compile(r"[^\d.]")


@dataclass(frozen=True)
class ExtractionRule:
    """Locators for one retailer's price and stock information."""

    price: str = ""
    stock: str = ""
    price_attr: str = ""
    price_pattern: str = ""
    stock_attr: str = ""
    stock_pattern: str = ""
    status_keywords: dict[str, list[str]] = field(
        default_factory=lambda: dict[str, list[str]]()
    )

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> "ExtractionRule":
        """Build a rule from a ``selectors.json`` row."""
        return cls(
            price=str(row.get("price", "")),
            stock=str(row.get("stock", "")),
            price_attr=str(row.get("price_attr", "")),
            price_pattern=str(row.get("price_pattern", "")),
            stock_attr=str(row.get("stock_attr", "")),
            stock_pattern=str(row.get("stock_pattern", "")),
            status_keywords=dict(row.get("status_keywords") or {}),
        )


@dataclass(frozen=True)
class Extraction:
    """Price and status pulled from one document (0.0 = no price)."""

    price: float
    status: StockStatus

    @property
    def found(self) -> bool:
        return self.price > 0


MISS = Extraction(price=0.0, status=StockStatus.UNKNOWN)


def load_rules(path: Path | None = None) -> dict[str, ExtractionRule]:
    """Load the per-retailer rule table from JSON."""
    with open(path or Settings.SELECTORS_PATH, encoding="utf-8") as f:
        table: dict[str, Any] = json.load(f)
    return {
        retailer_id: ExtractionRule.from_dict(row)
        for retailer_id, row in table.items()
    }


class SourceExtractor:
    """Turn a retrieved document into an :class:`Extraction`."""

    def __init__(
        self,
        rules: dict[str, ExtractionRule] | None = None,
    ) -> None:
        self.rules: dict[str, ExtractionRule] = (
            load_rules() if rules is None else dict(rules)
        )

    def add_rule(self, retailer_id: str, rule: ExtractionRule) -> None:
        """Register or replace the rule for *retailer_id*."""
        self.rules[retailer_id] = rule

    # ── Pure helpers ─────────────────────────────────────

    @staticmethod
    def clean_price(text: str | None) -> float:
        """Parse a price like '£1,299.99'; 0.0 when unusable."""
        if not text:
            return 0.0
        cleaned = _NON_PRICE_CHARS.sub("", text)
        try:
            value = float(cleaned)
        except ValueError:
            return 0.0
        if not math.isfinite(value) or value <= 0:
            return 0.0
        return value

    @staticmethod
    def keyword_table(
        keywords: dict[str, list[str]] | None = None,
    ) -> dict[str, list[str]]:
        """Default keywords with per-retailer additions appended."""
        table = {
            status: list(words)
            for status, words in Settings.STOCK_KEYWORDS.items()
        }
        for status, words in (keywords or {}).items():
            table.setdefault(status, []).extend(words)
        return table

    @staticmethod
    def match_status(
        text: str | None,
        keywords: dict[str, list[str]] | None = None,
    ) -> StockStatus:
        """Map stock text to a status by case-insensitive substring.

        *keywords* extends the default list for each status it names.
        """
        if not text:
            return StockStatus.UNKNOWN
        table = SourceExtractor.keyword_table(keywords)
        lower = text.lower()
        for status in _STATUS_ORDER:
            for keyword in table.get(status.value, []):
                if keyword.lower() in lower:
                    return status
        return StockStatus.UNKNOWN

    # ── Locators ─────────────────────────────────────────

    @staticmethod
    def _locate(
        soup: BeautifulSoup,
        selector: str,
        attr: str,
        pattern: str,
    ) -> str:
        """Return the first text the selector (or pattern) finds."""
        if selector:
            el = soup.select_one(selector)
            if isinstance(el, Tag):
                value = el.get(attr) if attr else None
                if value:
                    return str(value)
                text = el.get_text(" ", strip=True)
                if text:
                    return text
        if pattern:
            match = re.search(
                pattern, soup.get_text(" "), re.IGNORECASE
            )
            if match:
                return match.group(1) if match.groups() else match.group(0)
        return ""

    def extract(self, retailer_id: str, document: str) -> Extraction:
        """Extract price and status; never raises on bad documents."""
        rule = self.rules.get(retailer_id)
        if rule is None:
            logger.warning(
                "[%s] No extraction rule registered", retailer_id
            )
            return MISS
        if not document:
            return MISS

        try:
            soup = BeautifulSoup(document, "lxml")
            price_text = self._locate(
                soup, rule.price, rule.price_attr, rule.price_pattern
            )
            stock_text = self._locate(
                soup, rule.stock, rule.stock_attr, rule.stock_pattern
            )
        except Exception as exc:
            logger.warning(
                "[%s] Extraction failed on malformed document: %s",
                retailer_id,
                exc,
                exc_info=True,
            )
            return MISS

        if not price_text and not stock_text:
            logger.info("[%s] No price or stock locator matched", retailer_id)
            return MISS

        extraction = Extraction(
            price=self.clean_price(price_text),
            status=self.match_status(
                stock_text, rule.status_keywords or None
            ),
        )
        logger.debug(
            "[%s] Extracted price=%.2f status=%s (price text=%r, stock text=%r)",
            retailer_id,
            extraction.price,
            extraction.status.value,
            price_text,
            stock_text,
        )
        return extraction
