# src/cli/runner.py

"""Headless CLI commands: fetch, cleanup and health check."""

import logging
import sys

import simplejson
from rich.console import Console
from rich.table import Table

from src.extraction.gemini_client import GeminiOfferExtractor
from src.models.offer import ResponseData
from src.services.deals_service import DealsService

logger = logging.getLogger("daily_deals.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(resp: ResponseData) -> None:
    """Render a Rich table of offers to stdout."""
    table = Table(
        title=f"{resp.business} specials ({resp.last_updated})",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Size", justify="center")

    for idx, offer in enumerate(resp.offers, 1):
        table.add_row(
            str(idx),
            offer.product_name,
            f"{offer.currency} {offer.price}".strip(),
            offer.size or "—",
        )

    Console().print(table)


async def cli_fetch(
    output_format: str,
    force_refresh: bool = False,
    service: DealsService | None = None,
) -> int:
    """Fetch today's offers and print them; 0 on success, 1 if none."""
    deals = service or DealsService()
    _err.print(
        "[bold]Fetching today's specials[/bold]"
        + (" [dim](refresh)[/dim]" if force_refresh else "")
    )

    resp = await deals.fetch_offers(force_refresh=force_refresh)

    if not resp.offers:
        _err.print("[yellow]No offers found.[/yellow]")
        return 1

    _err.print(
        f"[green]✓ {len(resp.offers)} offers "
        f"(updated {resp.last_updated})[/green]"
    )

    if output_format == "table":
        _print_table(resp)
    else:
        simplejson.dump(
            resp.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
            use_decimal=True,
        )
        sys.stdout.write("\n")

    return 0


def run_cleanup() -> int:
    """Delete leftover uploaded images from the Gemini Files API."""
    extractor = GeminiOfferExtractor()
    if extractor.client is None:
        _err.print("[red]Gemini client unavailable, check GEMINI_API_KEY[/red]")
        return 1
    try:
        removed = extractor.cleanup_remote_files()
    finally:
        extractor.close()
    _err.print(f"[green]✓ Removed {removed} remote files[/green]")
    return 0


async def run_health_check() -> int:
    """Probe the specials page and Gemini; 1 if anything is down."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(r.source_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
