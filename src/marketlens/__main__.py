"""
MarketLens - command line entry point.

Builds a watchlist digest from the configured providers and prints it as
JSON. Logs go to stderr.
"""

import argparse
import asyncio
import sys
from datetime import date
from typing import List, Optional

from pydantic import TypeAdapter

from .config.logging import get_logger, setup_logging
from .config.settings import get_settings
from .exceptions import MarketLensError
from .models import ServiceHealthReport
from .services import DataAggregator, DigestService
from .services.correlation import CorrelationAnalysis
from .services.digest import Digest, PriorityAlert


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marketlens",
        description="Aggregate market data and news into a watchlist digest.",
    )
    parser.add_argument(
        "symbols",
        nargs="*",
        help="Symbols to include (defaults to the configured watchlist)",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="UTC digest date as YYYY-MM-DD (defaults to today)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--alerts",
        action="store_true",
        help="Print priority alerts instead of the full digest",
    )
    mode.add_argument(
        "--analyze",
        metavar="SYMBOL",
        help="Explain the current price move of a single symbol",
    )
    mode.add_argument(
        "--health",
        action="store_true",
        help="Check every configured provider",
    )
    parser.add_argument(
        "--min-priority",
        type=int,
        default=None,
        help="Minimum priority score for --alerts",
    )
    return parser


async def run(args: argparse.Namespace) -> str:
    """Execute the selected mode and return its JSON output."""
    settings = get_settings()
    aggregator = DataAggregator(settings=settings)
    service = DigestService(aggregator=aggregator, settings=settings)

    if args.health:
        report = await aggregator.check_all_services_health()
        return TypeAdapter(ServiceHealthReport).dump_json(report, indent=2).decode()

    if args.analyze:
        analysis = await service.analyze_movement(args.analyze)
        return TypeAdapter(Optional[CorrelationAnalysis]).dump_json(analysis, indent=2).decode()

    if args.alerts:
        alerts = await service.get_priority_alerts(args.symbols or None, args.min_priority)
        return TypeAdapter(List[PriorityAlert]).dump_json(alerts, indent=2).decode()

    digest = await service.build_digest(args.symbols or None, args.date)
    return TypeAdapter(Digest).dump_json(digest, indent=2).decode()


def main(argv: Optional[List[str]] = None) -> None:
    """Main application entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting MarketLens",
        environment=settings.environment,
        providers=settings.configured_providers(),
    )

    try:
        print(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
        sys.exit(130)
    except MarketLensError as e:
        logger.error("MarketLens failed", error=str(e), exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
