# tests/test_page_fetcher.py

"""Tests for PageFetcher retries, block detection and fallback."""

import unittest
from unittest.mock import MagicMock, patch

from src.scrapers.page_fetcher import PageFetcher, RetrievalError

URL = "https://www.scan.co.uk/search?q=rtx%204090"
OK_HTML = "<html><body><span class='price'>£1,799.98</span></body></html>"


def _resp(status: int, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


def _fetcher(session: MagicMock, fallback: bool = False) -> PageFetcher:
    fetcher = PageFetcher("scan", referer="https://www.scan.co.uk/")
    fetcher.session = session
    fetcher.settings.CLOUDSCRAPER_FALLBACK = fallback
    return fetcher


@patch("src.scrapers.page_fetcher.curl_requests.Session")
class TestFetch(unittest.TestCase):
    """curl_cffi path."""

    def test_returns_body_on_200(self, mock_session_cls: MagicMock) -> None:
        session = MagicMock()
        session.get.return_value = _resp(200, OK_HTML)
        fetcher = _fetcher(session)

        self.assertEqual(fetcher.fetch(URL), OK_HTML)
        session.get.assert_called_once()

    def test_sends_referer_and_timeout(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(200, OK_HTML)
        fetcher = _fetcher(session)

        fetcher.fetch(URL)
        kwargs = session.get.call_args.kwargs
        self.assertEqual(
            kwargs["headers"]["Referer"], "https://www.scan.co.uk/"
        )
        self.assertEqual(
            kwargs["timeout"], fetcher.settings.REQUEST_TIMEOUT
        )

    def test_http_error_exhausts_retries(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(503)
        fetcher = _fetcher(session)

        with self.assertRaises(RetrievalError) as ctx:
            fetcher.fetch(URL)
        self.assertEqual(ctx.exception.reason, "HTTP 503")
        self.assertEqual(ctx.exception.url, URL)
        self.assertEqual(
            session.get.call_count, fetcher.settings.MAX_RETRIES
        )

    def test_recovers_on_later_attempt(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.side_effect = [_resp(500), _resp(200, OK_HTML)]
        fetcher = _fetcher(session)
        fetcher.settings.MAX_RETRIES = 2

        self.assertEqual(fetcher.fetch(URL), OK_HTML)

    def test_transport_timeout_reason(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.side_effect = RuntimeError(
            "curl: (28) Operation timed out after 10001 milliseconds"
        )
        fetcher = _fetcher(session)

        with self.assertRaises(RetrievalError) as ctx:
            fetcher.fetch(URL)
        self.assertEqual(ctx.exception.reason, "timeout")

    def test_connection_error_reason(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.side_effect = ConnectionError("Connection refused")
        fetcher = _fetcher(session)

        with self.assertRaises(RetrievalError) as ctx:
            fetcher.fetch(URL)
        self.assertIn("Connection refused", ctx.exception.reason)

    def test_captcha_page_retried(self, mock_session_cls: MagicMock) -> None:
        session = MagicMock()
        session.get.side_effect = [
            _resp(200, "<html>Please solve the captcha</html>"),
            _resp(200, OK_HTML),
        ]
        fetcher = _fetcher(session)
        fetcher.settings.MAX_RETRIES = 2

        self.assertEqual(fetcher.fetch(URL), OK_HTML)
        self.assertEqual(session.get.call_count, 2)

    def test_cloudflare_challenge_is_blocked(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(
            200, "<html><title>Just a moment...</title></html>"
        )
        fetcher = _fetcher(session)

        with self.assertRaises(RetrievalError) as ctx:
            fetcher.fetch(URL)
        self.assertEqual(ctx.exception.reason, "blocked")

    def test_large_page_mentioning_captcha_passes(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Product pages that merely mention a keyword are not blocked."""
        body = "<html><body>" + "x" * 6000 + " captcha </body></html>"
        session = MagicMock()
        session.get.return_value = _resp(200, body)
        fetcher = _fetcher(session)

        self.assertEqual(fetcher.fetch(URL), body)

    def test_close_releases_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        session = MagicMock()
        fetcher = _fetcher(session)

        fetcher.close()
        session.close.assert_called_once()


@patch("src.scrapers.page_fetcher.cloudscraper")
@patch("src.scrapers.page_fetcher.curl_requests.Session")
class TestCloudscraperFallback(unittest.TestCase):
    """cloudscraper is tried once after curl_cffi gives up."""

    def test_fallback_used(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(403)
        scraper = MagicMock()
        scraper.get.return_value = _resp(200, OK_HTML)
        mock_cloudscraper.create_scraper.return_value = scraper

        fetcher = _fetcher(session, fallback=True)
        self.assertEqual(fetcher.fetch(URL), OK_HTML)
        scraper.get.assert_called_once()
        scraper.close.assert_called_once()

    def test_fallback_failure_keeps_original_reason(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(403)
        scraper = MagicMock()
        scraper.get.side_effect = ConnectionError("reset")
        mock_cloudscraper.create_scraper.return_value = scraper

        fetcher = _fetcher(session, fallback=True)
        with self.assertRaises(RetrievalError) as ctx:
            fetcher.fetch(URL)
        self.assertEqual(ctx.exception.reason, "HTTP 403")
        scraper.close.assert_called_once()

    def test_fallback_disabled(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        session = MagicMock()
        session.get.return_value = _resp(403)

        fetcher = _fetcher(session, fallback=False)
        with self.assertRaises(RetrievalError):
            fetcher.fetch(URL)
        mock_cloudscraper.create_scraper.assert_not_called()


if __name__ == "__main__":
    unittest.main()
