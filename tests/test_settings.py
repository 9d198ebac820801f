# tests/test_settings.py

"""Tests for the Settings configuration class."""

import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and the retailer list."""

    def test_timeouts_positive(self) -> None:
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)
        self.assertGreater(Settings.RETAILER_TIMEOUT, 0)

    def test_retailer_timeout_covers_a_request(self) -> None:
        self.assertGreaterEqual(
            Settings.RETAILER_TIMEOUT, Settings.REQUEST_TIMEOUT
        )

    def test_max_retries_is_positive(self) -> None:
        self.assertGreaterEqual(Settings.MAX_RETRIES, 1)

    def test_six_retailers(self) -> None:
        self.assertEqual(len(Settings.RETAILERS), 6)

    def test_each_retailer_has_required_keys(self) -> None:
        for entry in Settings.RETAILERS:
            with self.subTest(retailer=entry.get("id", "?")):
                for key in ("id", "label", "base_url", "search_url_template"):
                    self.assertIn(key, entry)
                self.assertIn("{query}", entry["search_url_template"])
                self.assertTrue(entry["base_url"].startswith("https://"))

    def test_retailer_ids_unique(self) -> None:
        ids = [r["id"] for r in Settings.RETAILERS]
        self.assertEqual(len(ids), len(set(ids)))

    def test_stock_keywords_cover_three_statuses(self) -> None:
        self.assertEqual(
            list(Settings.STOCK_KEYWORDS),
            ["IN_STOCK", "LIMITED_STOCK", "OUT_OF_STOCK"],
        )
        self.assertIn("pre-order", Settings.STOCK_KEYWORDS["OUT_OF_STOCK"])

    def test_path_constants_are_paths(self) -> None:
        self.assertIsInstance(Settings.BASE_DIR, Path)
        self.assertIsInstance(Settings.SELECTORS_PATH, Path)
        self.assertIsInstance(Settings.LOGS_DIR, Path)

    def test_selectors_path_exists(self) -> None:
        self.assertTrue(Settings.SELECTORS_PATH.exists())

    def test_default_currency(self) -> None:
        self.assertEqual(Settings.DEFAULT_CURRENCY, "GBP")

    def test_impersonate_browser_is_string(self) -> None:
        self.assertIsInstance(Settings.IMPERSONATE_BROWSER, str)
        self.assertTrue(Settings.IMPERSONATE_BROWSER)


if __name__ == "__main__":
    unittest.main()
