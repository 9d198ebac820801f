# src/config/settings.py

"""Central configuration for the pricewatch aggregator."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
    """Read a float override from the environment."""
    raw = os.getenv(name)
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    """Read an int override from the environment."""
    raw = os.getenv(name)
    return int(raw) if raw else default


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean override ("1", "true", "yes", "on")."""
    raw = os.getenv(name)
    if not raw:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Central configuration for the pricewatch aggregator."""

    # --- Retrieval ---
    # Back-off unit (seconds) between attempts
    REQUEST_DELAY: float = _env_float("PRICEWATCH_REQUEST_DELAY", 1.0)
    # Seconds per HTTP request
    REQUEST_TIMEOUT: int = _env_int("PRICEWATCH_REQUEST_TIMEOUT", 10)
    # Seconds per retailer, all attempts included
    RETAILER_TIMEOUT: float = _env_float(
        "PRICEWATCH_RETAILER_TIMEOUT", 45.0
    )
    MAX_RETRIES: int = _env_int("PRICEWATCH_MAX_RETRIES", 2)
    CLOUDSCRAPER_FALLBACK: bool = _env_bool(
        "PRICEWATCH_CLOUDSCRAPER_FALLBACK", True
    )
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Extraction ---
    DEFAULT_CURRENCY: str = "GBP"
    # Evaluated in this order; first matching keyword wins
    STOCK_KEYWORDS: dict[str, list[str]] = {
        "IN_STOCK": ["in stock"],
        "LIMITED_STOCK": ["limited", "low stock"],
        "OUT_OF_STOCK": ["out of stock", "unavailable", "pre-order"],
    }

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "en-GB,en;q=0.9",
        "sec-ch-ua": (
            '"Google Chrome";v="131", '
            '"Chromium";v="131", '
            '"Not_A Brand";v="24"'
        ),
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "sec-fetch-dest": "document",
        "sec-fetch-mode": "navigate",
        "sec-fetch-site": "none",
        "sec-fetch-user": "?1",
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    SELECTORS_PATH: Path = BASE_DIR / "src" / "config" / "selectors.json"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Retailers (registry order is output order) ---
    RETAILERS: list[dict[str, str]] = [
        {
            "id": "amazon",
            "label": "Amazon UK",
            "base_url": "https://www.amazon.co.uk",
            "search_url_template": "/s?k={query}",
            "logo": (
                "https://upload.wikimedia.org/wikipedia/commons/"
                "thumb/a/a9/Amazon_logo.svg/2560px-Amazon_logo.svg.png"
            ),
        },
        {
            "id": "currys",
            "label": "Currys",
            "base_url": "https://www.currys.co.uk",
            "search_url_template": "/search?q={query}",
            "logo": (
                "https://upload.wikimedia.org/wikipedia/en/thumb/8/8f/"
                "Currys_2021_logo.svg/1200px-Currys_2021_logo.svg.png"
            ),
        },
        {
            "id": "scan",
            "label": "Scan",
            "base_url": "https://www.scan.co.uk",
            "search_url_template": "/search?q={query}",
            "logo": (
                "https://www.scan.co.uk/images/infopages/"
                "scan_3xs_logo.png"
            ),
        },
        {
            "id": "overclockers",
            "label": "Overclockers UK",
            "base_url": "https://www.overclockers.co.uk",
            "search_url_template": "/search?sSearch={query}",
            "logo": (
                "https://www.overclockers.co.uk/media/image/"
                "ocuk_logo.png"
            ),
        },
        {
            "id": "awdit",
            "label": "AWD-IT",
            "base_url": "https://www.awd-it.co.uk",
            "search_url_template": "/catalogsearch/result/?q={query}",
            "logo": (
                "https://www.awd-it.co.uk/pub/media/logo/stores/1/"
                "awd_logo.png"
            ),
        },
        {
            "id": "novatech",
            "label": "Novatech",
            "base_url": "https://www.novatech.co.uk",
            "search_url_template": "/search.html?search={query}",
            "logo": (
                "https://www.novatech.co.uk/assets/templates/"
                "novatech/images/logo.svg"
            ),
        },
    ]
