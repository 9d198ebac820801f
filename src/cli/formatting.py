# src/cli/formatting.py

"""Human-readable rendering of statuses, prices and timestamps."""

from datetime import datetime, timezone

from src.models.price_record import StockStatus

_STATUS_TEXT: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "In Stock",
    StockStatus.LIMITED_STOCK: "Limited Stock",
    StockStatus.OUT_OF_STOCK: "Out of Stock",
    StockStatus.UNKNOWN: "Unknown",
}

_STATUS_STYLE: dict[StockStatus, str] = {
    StockStatus.IN_STOCK: "green",
    StockStatus.LIMITED_STOCK: "yellow",
    StockStatus.OUT_OF_STOCK: "red",
    StockStatus.UNKNOWN: "dim",
}


def stock_status_text(status: StockStatus) -> str:
    return _STATUS_TEXT.get(status, "Unknown")


def stock_status_style(status: StockStatus) -> str:
    """Rich style name for a status."""
    return _STATUS_STYLE.get(status, "dim")


def format_price(price: float, currency: str) -> str:
    """'GBP 1,299.00', or 'N/A' when no price was found."""
    if price <= 0:
        return "N/A"
    return f"{currency} {price:,.2f}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_relative_time(
    timestamp: datetime,
    now: datetime | None = None,
) -> str:
    """Describe how long ago *timestamp* was, e.g. '3 minutes ago'."""
    current = now or datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)

    seconds = max(0, int((current - timestamp).total_seconds()))
    if seconds < 60:
        return f"{seconds} seconds ago"
    minutes = seconds // 60
    if minutes < 60:
        return _plural(minutes, "minute")
    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(hours // 24, "day")
