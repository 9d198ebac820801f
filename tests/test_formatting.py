# tests/test_formatting.py

"""Tests for CLI formatting helpers."""

import unittest
from datetime import datetime, timedelta, timezone

from src.cli.formatting import (
    format_price,
    format_relative_time,
    stock_status_style,
    stock_status_text,
)
from src.models.price_record import StockStatus

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class TestStatusText(unittest.TestCase):

    def test_labels(self) -> None:
        self.assertEqual(stock_status_text(StockStatus.IN_STOCK), "In Stock")
        self.assertEqual(
            stock_status_text(StockStatus.LIMITED_STOCK), "Limited Stock"
        )
        self.assertEqual(
            stock_status_text(StockStatus.OUT_OF_STOCK), "Out of Stock"
        )
        self.assertEqual(stock_status_text(StockStatus.UNKNOWN), "Unknown")

    def test_styles(self) -> None:
        self.assertEqual(stock_status_style(StockStatus.IN_STOCK), "green")
        self.assertEqual(stock_status_style(StockStatus.UNKNOWN), "dim")


class TestFormatPrice(unittest.TestCase):

    def test_thousands_and_decimals(self) -> None:
        self.assertEqual(format_price(1299.0, "GBP"), "GBP 1,299.00")

    def test_zero_is_not_available(self) -> None:
        self.assertEqual(format_price(0.0, "GBP"), "N/A")


class TestRelativeTime(unittest.TestCase):

    def _ago(self, **delta: float) -> str:
        return format_relative_time(NOW - timedelta(**delta), now=NOW)

    def test_seconds(self) -> None:
        self.assertEqual(self._ago(seconds=42), "42 seconds ago")

    def test_minutes(self) -> None:
        self.assertEqual(self._ago(minutes=1), "1 minute ago")
        self.assertEqual(self._ago(minutes=5), "5 minutes ago")

    def test_hours(self) -> None:
        self.assertEqual(self._ago(hours=1), "1 hour ago")
        self.assertEqual(self._ago(hours=23, minutes=59), "23 hours ago")

    def test_days(self) -> None:
        self.assertEqual(self._ago(days=1), "1 day ago")
        self.assertEqual(self._ago(days=3, hours=4), "3 days ago")

    def test_future_clamped(self) -> None:
        self.assertEqual(self._ago(seconds=-30), "0 seconds ago")

    def test_naive_timestamp_treated_as_utc(self) -> None:
        naive = (NOW - timedelta(minutes=2)).replace(tzinfo=None)
        self.assertEqual(
            format_relative_time(naive, now=NOW), "2 minutes ago"
        )


if __name__ == "__main__":
    unittest.main()
