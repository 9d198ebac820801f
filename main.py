# main.py

"""Entry point for the pricewatch command line."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("pricewatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    retailer_ids = ", ".join(r["id"] for r in Settings.RETAILERS)

    parser = argparse.ArgumentParser(
        prog="pricewatch",
        description="UK PC component price and stock aggregator.",
        epilog=f"Retailers: {retailer_ids}",
    )
    parser.add_argument(
        "product",
        nargs="?",
        default=None,
        help="Product name to look up, e.g. 'RTX 4090'.",
    )
    parser.add_argument(
        "--id",
        default=None,
        dest="product_id",
        help="Product identifier (default: the product name).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check connectivity to every retailer.",
    )
    return parser


def _run_aggregate(args: argparse.Namespace) -> None:
    from src.cli.runner import cli_aggregate

    exit_code = asyncio.run(
        cli_aggregate(
            product_name=args.product,
            product_id=args.product_id,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to a health check or a single aggregation."""
    log_file = setup_logging()
    logger.info("pricewatch starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.product is None:
        parser.print_help(sys.stderr)
        sys.exit(2)
    else:
        _run_aggregate(args)


if __name__ == "__main__":
    main()
