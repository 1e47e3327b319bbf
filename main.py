# main.py

"""Entry point for the howmuch home-service price CLI."""

import argparse
import asyncio
import logging
import sys
from collections.abc import Coroutine
from datetime import date
from typing import Any

from howmuch.config.logging_config import setup_logging
from howmuch.config.settings import Settings
from howmuch.storage.base_store import PriceStore
from howmuch.storage.store_factory import create_store

logger = logging.getLogger("howmuch.main")


def _positive_price(text: str) -> float:
    """argparse type for a price greater than zero."""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError("price must be greater than 0")
    return value


def _service_date(text: str) -> date:
    """argparse type for an ISO ``YYYY-MM-DD`` date."""
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected YYYY-MM-DD, got {text!r}"
        )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="howmuch",
        description="What people actually pay for home services.",
        epilog=(
            "Locations are free text: a zip code, a city, or "
            "'zip, city, state'."
        ),
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format (default: table).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    services = commands.add_parser(
        "services", help="List the service catalog."
    )
    services.add_argument(
        "-c", "--category", default=None,
        help="Only services in this category (e.g. cleaning).",
    )

    prices = commands.add_parser(
        "prices", help="List recorded prices near a location."
    )
    prices.add_argument("service", help="Service id, e.g. junk-removal.")
    prices.add_argument("location", help="Zip code or city.")

    summary = commands.add_parser(
        "summary", help="Average, range and trend near a location."
    )
    summary.add_argument("service", help="Service id, e.g. junk-removal.")
    summary.add_argument("location", help="Zip code or city.")
    summary.add_argument(
        "--comprehensive",
        action="store_true",
        default=False,
        help="Also pool live marketplace prices.",
    )

    submit = commands.add_parser(
        "submit", help="Share a price you paid."
    )
    submit.add_argument("service", help="Service id, e.g. lawn-mowing.")
    submit.add_argument("price", type=_positive_price, help="Price in USD.")
    submit.add_argument(
        "location", help="'zip, city, state', e.g. '90210, Beverly Hills, CA'."
    )
    submit.add_argument(
        "date", type=_service_date, help="Service date, YYYY-MM-DD."
    )
    submit.add_argument(
        "-d", "--description", default="",
        help="Optional notes about the job.",
    )

    scrape = commands.add_parser(
        "scrape", help="Scrape marketplaces now and save the prices."
    )
    scrape.add_argument("service", help="Service id, e.g. plumbing.")
    scrape.add_argument("location", help="Zip code or city.")
    scrape.add_argument(
        "-s", "--source",
        choices=[s["id"] for s in Settings.AVAILABLE_SOURCES],
        help="Scrape only this marketplace.",
    )

    commands.add_parser(
        "stats", help="Count stored prices by origin."
    )
    commands.add_parser(
        "health", help="Check marketplace and database connectivity."
    )
    return parser


def _dispatch(
    args: argparse.Namespace, store: PriceStore | None,
) -> Coroutine[Any, Any, int]:
    """Map parsed arguments to the matching CLI coroutine."""
    from howmuch.cli import runner

    fmt = args.output_format
    if args.command == "services":
        return runner.run_services(store, args.category, fmt)
    if args.command == "prices":
        return runner.run_prices(store, args.service, args.location, fmt)
    if args.command == "summary":
        return runner.run_summary(
            store, args.service, args.location, args.comprehensive, fmt,
        )
    if args.command == "submit":
        return runner.run_submit(
            store,
            args.service,
            args.price,
            args.location,
            args.date,
            args.description,
        )
    if args.command == "scrape":
        return runner.run_scrape(
            store, args.service, args.location, fmt, args.source,
        )
    if args.command == "stats":
        return runner.run_stats(store, fmt)
    return runner.run_health_check(store, fmt)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run one command and return its exit code."""
    log_file = setup_logging()
    logger.info("howmuch starting, log file: %s", log_file)

    args = _build_parser().parse_args(argv)
    store = create_store()
    try:
        return asyncio.run(_dispatch(args, store))
    except Exception:
        logger.critical("Fatal error running %s", args.command, exc_info=True)
        raise
    finally:
        if store is not None:
            store.close()
        logger.info("howmuch shutting down")


if __name__ == "__main__":
    sys.exit(main())
