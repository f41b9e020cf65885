"""Command-line entry point for the ticker news scraper."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence

from dotenv import load_dotenv

from .config import ScraperConfig
from .crawler import run_scraper
from .models import StockTarget
from .publisher import DryRunPublisher, WordPressPublisher
from .sheets import SheetConfigError, load_csv_targets, load_sheet_targets

logger = logging.getLogger("ticker_news.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Render per-symbol news listings with Playwright and publish the "
            "freely readable recent articles to WordPress."
        ),
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Read targets from a CSV file (Scrap_Link, Symbol, Stock name) instead of Google Sheets",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Process at most this many targets",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Listing page navigation timeout in seconds",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Extract articles but log payloads instead of posting them",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def load_targets(config: ScraperConfig, csv_path: Optional[Path]) -> List[StockTarget]:
    if csv_path is not None:
        return load_csv_targets(csv_path)
    return load_sheet_targets(config)


def build_publisher(config: ScraperConfig, dry_run: bool) -> WordPressPublisher:
    if dry_run:
        return DryRunPublisher(
            config.wp_api_url,
            timeout=config.publish_timeout,
            max_days=config.storage_max_days,
        )
    return WordPressPublisher.from_config(config)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    load_dotenv()

    config = ScraperConfig.from_env(
        listing_timeout=args.timeout,
        headless=not args.headful,
    )

    try:
        targets = load_targets(config, args.csv)
    except (SheetConfigError, OSError) as exc:
        logger.error("Cannot load stock targets: %s", exc)
        sys.exit(2)
    if args.limit is not None:
        targets = targets[: args.limit]

    publisher = build_publisher(config, args.dry_run)
    overall_start = time.perf_counter()
    try:
        summary = asyncio.run(run_scraper(targets, config, publisher))
    finally:
        publisher.close()
    total_elapsed = time.perf_counter() - overall_start

    logger.info(
        "Finished in %.2fs (%d targets, %d failed to load): %d stored, %d skipped, %d not stored, %d errors",
        total_elapsed,
        summary.targets,
        summary.failed_targets,
        summary.stored,
        summary.skipped,
        summary.not_stored,
        summary.failed,
    )


if __name__ == "__main__":
    main()
