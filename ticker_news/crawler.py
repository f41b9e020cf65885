"""High-level orchestration: listing pages, article pages and publishing."""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Route,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import BLOCKED_RESOURCE_TYPES, BROWSER_ARGS, ScraperConfig
from .content import extract_article_content
from .listing import extract_articles
from .models import ExtractedArticle, RunSummary, StockTarget, TargetStats
from .publisher import WordPressPublisher

logger = logging.getLogger("ticker_news")

AUTO_SCROLL_SCRIPT = """
async () => {
  await new Promise((resolve) => {
    let totalHeight = 0;
    const distance = 500;
    const timer = setInterval(() => {
      const scrollHeight = document.body.scrollHeight;
      window.scrollBy(0, distance);
      totalHeight += distance;
      if (totalHeight >= scrollHeight) {
        clearInterval(timer);
        resolve();
      }
    }, 200);
  });
}
"""


async def block_heavy_resources(route: Route) -> None:
    """Abort stylesheet and image loads; let every other request through."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


async def open_browser(
    playwright: Playwright,
    config: ScraperConfig,
) -> Tuple[Browser, BrowserContext]:
    """Launch Chromium and return a context that skips heavy sub-resources."""
    browser = await playwright.chromium.launch(
        headless=config.headless,
        args=list(BROWSER_ARGS),
    )
    context = await browser.new_context(
        user_agent=config.user_agent,
        viewport={"width": 1920, "height": 1080},
    )
    await context.route("**/*", block_heavy_resources)
    return browser, context


async def settle(page: Page, seconds: float) -> None:
    if seconds:
        await page.wait_for_timeout(int(seconds * 1000))


async def auto_scroll(page: Page) -> None:
    """Scroll to the bottom in steps so lazily rendered cards load."""
    await page.evaluate(AUTO_SCROLL_SCRIPT)


async def load_listing(
    page: Page,
    target: StockTarget,
    config: ScraperConfig,
) -> Optional[List[ExtractedArticle]]:
    """Navigate to a target's listing page and extract its recent articles."""
    try:
        await page.goto(
            target.listing_url,
            wait_until="domcontentloaded",
            timeout=config.listing_timeout * 1000,
        )
    except PlaywrightTimeoutError as exc:
        logger.error("Timeout while loading news page for %s: %s", target.symbol, exc)
        return None
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("Failed to load news page for %s: %s", target.symbol, exc)
        return None
    logger.info("Successfully loaded news page for %s.", target.symbol)

    try:
        await settle(page, config.listing_settle)
        await auto_scroll(page)
        await settle(page, config.scroll_settle)
        html = await page.content()
        return extract_articles(
            html,
            page.url,
            target.symbol,
            max_days_ago=config.listing_max_days,
            selectors=config.selectors,
        )
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unexpected error reading news page for %s", target.symbol)
        return None


async def process_article(
    context: BrowserContext,
    article: ExtractedArticle,
    position: str,
    config: ScraperConfig,
    publisher: WordPressPublisher,
    stats: TargetStats,
) -> None:
    """Fetch one article in its own page and publish its body if readable."""
    logger.info("Processing article %s for %s: %r", position, stats.symbol, article.headline)
    page = None
    try:
        page = await context.new_page()
        try:
            await page.goto(
                article.link,
                wait_until="domcontentloaded",
                timeout=config.article_timeout * 1000,
            )
        except PlaywrightTimeoutError as exc:
            logger.error("Timeout while loading article %s: %s", article.link, exc)
            stats.failed += 1
            return

        body = await extract_article_content(page, config)
        if not body:
            logger.info(
                "Skipping article %s for %s - no accessible content (likely requires login/subscription)",
                position,
                stats.symbol,
            )
            stats.skipped += 1
            return

        if publisher.publish(article, body):
            stats.stored += 1
            logger.info("Successfully stored article %s for %s", position, stats.symbol)
        else:
            stats.not_stored += 1
    except Exception:  # pylint: disable=broad-except
        logger.exception("Error processing article %s for %s", position, stats.symbol)
        stats.failed += 1
    finally:
        if page is not None and not page.is_closed():
            await page.close()


async def scrape_target(
    context: BrowserContext,
    listing_page: Page,
    target: StockTarget,
    config: ScraperConfig,
    publisher: WordPressPublisher,
) -> TargetStats:
    """Run the listing and article steps for a single stock target."""
    stats = TargetStats(symbol=target.symbol)
    logger.info(
        "Processing news for %s (%s) from %s",
        target.display_name,
        target.symbol,
        target.listing_url,
    )
    articles = await load_listing(listing_page, target, config)
    if articles is None:
        stats.loaded = False
        return stats

    stats.found = len(articles)
    logger.info("Found %d recent articles on %s's news page.", stats.found, target.symbol)

    for index, article in enumerate(articles, start=1):
        position = f"{index}/{stats.found}"
        if not article.link:
            logger.info("Skipping article %s with no link for %s", position, target.symbol)
            continue
        await process_article(context, article, position, config, publisher, stats)
        await asyncio.sleep(config.article_delay)

    logger.info(
        "Finished processing %s: %d articles stored, %d skipped (login required).",
        target.symbol,
        stats.stored,
        stats.skipped,
    )
    return stats


async def process_targets(
    context: BrowserContext,
    targets: Sequence[StockTarget],
    config: ScraperConfig,
    publisher: WordPressPublisher,
) -> RunSummary:
    """Visit every target sequentially; failures never stop the run."""
    summary = RunSummary()
    listing_page = await context.new_page()
    try:
        for target in targets:
            stats = await scrape_target(context, listing_page, target, config, publisher)
            summary.add(stats)
            if stats.loaded:
                await asyncio.sleep(config.target_delay)
    finally:
        if not listing_page.is_closed():
            await listing_page.close()
    return summary


async def run_scraper(
    targets: Sequence[StockTarget],
    config: ScraperConfig,
    publisher: WordPressPublisher,
) -> RunSummary:
    """Launch the browser and process all targets."""
    if not targets:
        logger.info("No stock URLs found to process. Exiting.")
        return RunSummary()

    async with async_playwright() as playwright:
        browser, context = await open_browser(playwright, config)
        try:
            summary = await process_targets(context, targets, config, publisher)
        finally:
            await browser.close()
            logger.info("Browser closed.")
    logger.info("Scraping complete: processed all %d stock URLs.", len(targets))
    return summary
