# howmuch/cli/runner.py

"""Headless CLI commands built on the async query and pricing services."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import date
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

from howmuch.config.settings import Settings
from howmuch.filters.location_matcher import parse_location
from howmuch.models.price_observation import (
    PriceObservation,
    PriceSubmission,
)
from howmuch.models.price_summary import PriceSummary
from howmuch.models.service import Service
from howmuch.services.health_checker import HealthChecker
from howmuch.services.pricing_service import PricingService
from howmuch.services.query_service import PriceQueryService
from howmuch.services.scrape_orchestrator import ScrapeOrchestrator
from howmuch.storage.base_store import PriceStore

logger = logging.getLogger("howmuch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


# ── Output helpers ───────────────────────────────────────

def _to_jsonable(value: Any) -> Any:
    """Make dataclass dicts JSON-friendly (dates, enums)."""
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def _dump_json(payload: Any) -> None:
    json.dump(_to_jsonable(payload), sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _money(amount: float) -> str:
    return f"${amount:,.2f}"


def _no_data(service_id: str, location: str) -> int:
    _err.print(
        f"[yellow]No pricing data available for {service_id} "
        f"in '{location}'.[/yellow]"
    )
    _err.print(
        "[dim]Be the first to share what you paid: "
        f"main.py submit {service_id} PRICE \"{location}\" "
        "YYYY-MM-DD[/dim]"
    )
    return 1


def _services_table(services: list[Service]) -> Table:
    table = Table(
        title="Services",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Service", style="bold")
    table.add_column("ID", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("National avg", justify="right", style="green")
    table.add_column("Typical range", justify="right")
    for s in services:
        table.add_row(
            f"{s.icon} {s.name}",
            s.id,
            s.category,
            _money(s.national_average),
            f"{_money(s.price_range.min)} - {_money(s.price_range.max)}",
        )
    return table


def _observations_table(
    title: str, observations: list[PriceObservation],
) -> Table:
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Date")
    table.add_column("Price", justify="right", style="green")
    table.add_column("Location")
    table.add_column("Source", style="magenta")
    table.add_column("Notes", style="dim", max_width=50)
    for idx, o in enumerate(observations, 1):
        table.add_row(
            str(idx),
            o.date.isoformat(),
            _money(o.price),
            o.location.label() or o.location.region or "-",
            o.source or "-",
            o.description,
        )
    return table


def _summary_table(summary: PriceSummary, name: str) -> Table:
    table = Table(
        title=f"{name} pricing",
        show_header=False,
        title_style="bold cyan",
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Location", summary.location.label() or "-")
    table.add_row("Local average", _money(summary.local_average))
    table.add_row("National average", _money(summary.national_average))
    table.add_row(
        "Range",
        f"{_money(summary.price_range.min)} - "
        f"{_money(summary.price_range.max)}",
    )
    table.add_row("Data points", str(summary.data_points))
    table.add_row(
        "Trend",
        f"{summary.trend.value} ({summary.year_over_year_change:+.1f}%)",
    )
    return table


# ── Commands ─────────────────────────────────────────────

async def run_services(
    store: PriceStore | None,
    category: str | None,
    output_format: str,
) -> int:
    """List catalog services, optionally one category only."""
    queries = PriceQueryService(store)
    if category:
        services = await queries.list_services_by_category(category)
    else:
        services = await queries.list_services()
    if not services:
        _err.print(f"[yellow]No services in category '{category}'.[/yellow]")
        return 1

    if output_format == "table":
        Console().print(_services_table(services))
    else:
        _dump_json([asdict(s) for s in services])
    return 0


async def run_prices(
    store: PriceStore | None,
    service_id: str,
    location: str,
    output_format: str,
) -> int:
    """List individual prices for a service near a location."""
    queries = PriceQueryService(store)
    observations = await queries.get_price_observations(
        service_id, location
    )
    if not observations:
        return _no_data(service_id, location)

    if output_format == "table":
        Console().print(
            _observations_table(f"{service_id} in '{location}'", observations)
        )
    else:
        _dump_json([asdict(o) for o in observations])
    return 0


async def run_summary(
    store: PriceStore | None,
    service_id: str,
    location: str,
    comprehensive: bool,
    output_format: str,
) -> int:
    """Summarise prices, optionally pooling scraped marketplace data."""
    queries = PriceQueryService(store)
    service = await queries.get_service(service_id)
    name = service.name if service else service_id

    source_counts: dict[str, int] | None = None
    if comprehensive:
        _err.print(
            f"[bold]Pooling prices for[/bold] {name} "
            f"[dim]in '{location}'[/dim]"
        )
        pricing = PricingService(store, queries.sample)
        try:
            result = await pricing.get_comprehensive_pricing(
                service_id, location
            )
        finally:
            await pricing.close()
        summary = result.summary
        source_counts = {
            "scraped": len(result.scraped),
            "local": len(result.local),
            "database": len(result.database),
        }
    else:
        summary = await queries.get_price_summary(service_id, location)

    if summary is None:
        return _no_data(service_id, location)

    if output_format == "table":
        Console().print(_summary_table(summary, name))
        if source_counts is not None:
            _err.print(
                "[dim]"
                + ", ".join(f"{k}={v}" for k, v in source_counts.items())
                + "[/dim]"
            )
    else:
        payload: dict[str, Any] = asdict(summary)
        if source_counts is not None:
            payload["sources"] = source_counts
        _dump_json(payload)
    return 0


async def run_submit(
    store: PriceStore | None,
    service_id: str,
    price: float,
    location: str,
    service_date: date,
    description: str,
) -> int:
    """Record a price the user paid."""
    queries = PriceQueryService(store)
    submission = PriceSubmission(
        service_id=service_id,
        price=price,
        location=parse_location(location),
        service_date=service_date,
        description=description,
    )
    if not await queries.submit_price(submission):
        _err.print(
            "[red]Your price could not be saved. Please try again.[/red]"
        )
        return 1
    _err.print(
        f"[green]✓ Thanks! {_money(price)} for {service_id} "
        f"in {submission.location.label()} recorded.[/green]"
    )
    return 0


async def run_scrape(
    store: PriceStore | None,
    service_id: str,
    location: str,
    output_format: str,
    source_id: str | None = None,
) -> int:
    """Scrape the marketplaces (or just *source_id*) and save the prices."""
    orchestrator = None
    target = "marketplaces"
    if source_id is not None:
        sources = [
            s for s in Settings.AVAILABLE_SOURCES if s["id"] == source_id
        ]
        if not sources:
            _err.print(f"[red]Unknown marketplace: {source_id}[/red]")
            return 2
        orchestrator = ScrapeOrchestrator(sources)
        target = sources[0]["label"]
    _err.print(
        f"[bold]Scraping {target} for[/bold] {service_id} "
        f"[dim]in '{location}'[/dim]"
    )
    pricing = PricingService(store, orchestrator=orchestrator)
    try:
        outcome = await pricing.scrape_and_save(service_id, location)
    finally:
        await pricing.close()

    if output_format == "table":
        style = "green" if outcome.success else "yellow"
        _err.print(f"[{style}]{outcome.message}[/{style}]")
    else:
        _dump_json(asdict(outcome))
    return 0 if outcome.success else 1


async def run_stats(store: PriceStore | None, output_format: str) -> int:
    """Show how many stored prices came from users and from scraping."""
    pricing = PricingService(store)
    try:
        stats = await pricing.data_source_stats()
    finally:
        await pricing.close()

    if output_format == "table":
        table = Table(
            title="Data sources",
            show_header=False,
            title_style="bold cyan",
        )
        table.add_column("Field", style="bold")
        table.add_column("Value", justify="right")
        table.add_row("Total submissions", f"{stats.total_submissions:,}")
        table.add_row("Scraped", f"{stats.scraped_data:,}")
        table.add_row("From users", f"{stats.user_submissions:,}")
        table.add_row(
            "Last updated", stats.last_updated.isoformat(timespec="seconds")
        )
        Console().print(table)
    else:
        payload = asdict(stats)
        payload["last_updated"] = stats.last_updated.isoformat()
        _dump_json(payload)
    return 0


async def run_health_check(
    store: PriceStore | None, output_format: str,
) -> int:
    """Run a connectivity check on the marketplaces and the store."""
    _err.print("[bold]Running health check...[/bold]")
    results = await HealthChecker(store).check_all()
    any_down = any(r.status == "down" for r in results)

    if output_format != "table":
        _dump_json([asdict(r) for r in results])
        return 1 if any_down else 0

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-"
        table.add_row(r.source_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
