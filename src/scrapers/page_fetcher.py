# src/scrapers/page_fetcher.py

"""HTTP retrieval of retailer search pages."""

import logging
import time
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from src.config.settings import Settings


class RetrievalError(Exception):
    """A retailer page could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


def _describe(exc: BaseException) -> str:
    """Short failure reason for a transport exception."""
    text = str(exc)
    if isinstance(exc, TimeoutError) or "timed out" in text.lower():
        return "timeout"
    return text or type(exc).__name__


class PageFetcher:
    """Fetch one retailer's pages with a browser-impersonating session.

    Each instance owns its own session, so concurrent retailers never
    share connection state.
    """

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(self, retailer_id: str, referer: str = "") -> None:
        self.retailer_id = retailer_id
        self.referer = referer
        self.logger = logging.getLogger(f"pricewatch.{retailer_id}")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def close(self) -> None:
        """Release the underlying curl_cffi session."""
        self.session.close()

    def _headers(self) -> dict[str, str]:
        headers = dict(self.settings.DEFAULT_HEADERS)
        if self.referer:
            headers["Referer"] = self.referer
        return headers

    def _is_blocked(self, text: str) -> bool:
        """Detect Cloudflare challenges and CAPTCHA walls."""
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected (marker: '%s')",
                    self.retailer_id,
                    marker,
                )
                return True

        # Real result pages are large; only scan short pages for
        # CAPTCHA wording to avoid false positives on product text
        if "<body" in lower and len(text) > 5000:
            return False
        for keyword in self.settings.CAPTCHA_KEYWORDS:
            if keyword in lower:
                self.logger.warning(
                    "[%s] CAPTCHA keyword '%s' detected",
                    self.retailer_id,
                    keyword,
                )
                return True
        return False

    def _fetch_curl(self, url: str) -> str:
        """GET with retries through curl_cffi.

        Raises:
            RetrievalError: every attempt failed; ``reason`` describes
                the last failure.
        """
        reason = "no attempts made"
        for attempt in range(self.settings.MAX_RETRIES):
            if attempt:
                time.sleep(self.settings.REQUEST_DELAY * attempt)
            try:
                resp = self.session.get(
                    url,
                    headers=self._headers(),
                    timeout=self._request_timeout,
                )
            except Exception as exc:
                reason = _describe(exc)
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.retailer_id,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                continue

            if resp.status_code != 200:
                reason = f"HTTP {resp.status_code}"
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.retailer_id,
                    resp.status_code,
                    attempt + 1,
                )
                continue

            text = str(resp.text)
            if self._is_blocked(text):
                reason = "blocked"
                continue
            return text

        raise RetrievalError(url, reason)

    def _fetch_cloudscraper(self, url: str) -> str | None:
        """Single fallback attempt through cloudscraper's JS solver."""
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            try:
                resp: Any = scraper.get(
                    url,
                    headers=self._headers(),
                    timeout=self._request_timeout,
                )
            finally:
                scraper.close()
        except Exception as exc:
            self.logger.error(
                "[%s] cloudscraper fallback failed: %s",
                self.retailer_id,
                exc,
                exc_info=True,
            )
            return None
        if resp.status_code != 200:
            return None
        text = str(resp.text)
        return None if self._is_blocked(text) else text

    def fetch(self, url: str) -> str:
        """Return the body of *url*.

        Raises:
            RetrievalError: on transport errors, non-200 responses or
                block pages once every strategy is exhausted.
        """
        self.logger.debug("[%s] GET %s", self.retailer_id, url)
        try:
            return self._fetch_curl(url)
        except RetrievalError as exc:
            if not self.settings.CLOUDSCRAPER_FALLBACK:
                raise
            self.logger.info(
                "[%s] curl_cffi exhausted (%s), "
                "falling back to cloudscraper",
                self.retailer_id,
                exc.reason,
            )
            text = self._fetch_cloudscraper(url)
            if text is None:
                raise
            return text
