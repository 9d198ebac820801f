# src/cli/runner.py

"""Headless CLI runner around the aggregation service."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.cli.formatting import (
    format_price,
    format_relative_time,
    stock_status_style,
    stock_status_text,
)
from src.filters.stock_reconciler import StockReconciler
from src.models.aggregation_result import AggregationResult
from src.services.aggregation_service import AggregationService
from src.services.retailer_registry import RetailerRegistry

logger = logging.getLogger("pricewatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _result_to_json(result: AggregationResult) -> dict[str, object]:
    """Result payload plus the reconciled summary."""
    payload = result.to_dict()
    best = StockReconciler.best_price(result.records)
    payload["overall_status"] = StockReconciler.overall_stock_status(
        result.records
    ).value
    payload["best_price"] = best.to_dict() if best else None
    return payload


def _load_registry() -> RetailerRegistry | None:
    """Registry for display names; None when the config is unusable."""
    try:
        return RetailerRegistry()
    except ValueError as exc:
        logger.warning("Retailer names unavailable: %s", exc)
        return None


def _display_name(
    registry: RetailerRegistry | None, retailer_id: str,
) -> str:
    if registry is not None and retailer_id in registry:
        return registry.resolve(retailer_id).display_name
    return retailer_id


def _print_table(result: AggregationResult) -> None:
    """Render a Rich table of per-retailer prices to stdout."""
    registry = _load_registry()
    table = Table(
        title=f"Prices for {result.product_name}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Retailer", style="magenta")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Status", justify="center")
    table.add_column("Updated", style="dim")
    table.add_column("URL", overflow="fold", style="dim")

    best = StockReconciler.best_price(result.records)
    for record in result.records:
        name = _display_name(registry, record.retailer_id)
        if record is best:
            name = f"★ {name}"
        style = stock_status_style(record.status)
        table.add_row(
            name,
            format_price(record.price, record.currency),
            f"[{style}]{stock_status_text(record.status)}[/{style}]",
            format_relative_time(record.last_updated),
            record.source_url,
        )

    console = Console()
    console.print(table)

    overall = StockReconciler.overall_stock_status(result.records)
    console.print(
        f"Overall: [{stock_status_style(overall)}]"
        f"{stock_status_text(overall)}[/{stock_status_style(overall)}]"
    )
    if best is not None:
        console.print(
            f"Best price: [bold green]"
            f"{format_price(best.price, best.currency)}[/bold green]"
            f" at {_display_name(registry, best.retailer_id)}"
        )


async def cli_aggregate(
    product_name: str,
    product_id: str | None,
    output_format: str,
    service: AggregationService | None = None,
) -> int:
    """Run one aggregation and return an exit code (0=ok, 1=fail).

    With ``json`` output the payload is written to stdout whether or
    not prices were found, so callers always see ``success`` and
    ``error``.
    """
    agg = service or AggregationService()
    pid = product_id or product_name

    _err.print(f"[bold]Checking prices:[/bold] {product_name}")
    result = await agg.aggregate(pid, product_name)
    logger.info(
        "CLI aggregation for '%s' finished: success=%s",
        product_name,
        result.success,
    )

    if result.error:
        _err.print(f"[red]Error: {result.error}[/red]")
    else:
        if result.failed_retailers:
            _err.print(
                "[yellow]Unreachable: "
                f"{', '.join(result.failed_retailers)}[/yellow]"
            )
        if result.success:
            _err.print(
                f"[green]✓ {result.message}[/green]  "
                f"[dim]retailers={result.retailers_checked}[/dim]"
            )
        else:
            _err.print(f"[yellow]{result.message}[/yellow]")

    if output_format == "json":
        json.dump(
            _result_to_json(result),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")
    elif result.success:
        _print_table(result)

    return 0 if result.success and not result.error else 1


async def run_health_check() -> int:
    """Run connectivity health check on all retailers."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running retailer health check...[/bold]")
    results = await HealthChecker().check_all()

    table = Table(
        title="Retailer Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Retailer", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]OK[/green]"
        elif r.status == "slow":
            status = "[yellow]SLOW[/yellow]"
        else:
            status = "[red]DOWN[/red]"
            any_down = True
        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.retailer_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
