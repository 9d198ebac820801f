# src/models/retailer.py

"""Retailer connection metadata."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Retailer:
    """A retailer the aggregator can query.

    ``search_url_template`` is appended to ``base_url`` and must contain a
    ``{query}`` placeholder for the encoded product name.
    """

    id: str
    display_name: str
    base_url: str
    search_url_template: str = ""
    currency: str = "GBP"
    logo_url: str = ""
