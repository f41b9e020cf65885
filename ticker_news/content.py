"""Article body extraction from rendered article pages."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError

from .access import requires_login
from .config import ScraperConfig
from .utils import find_phrase

logger = logging.getLogger("ticker_news")

MIN_SELECTOR_CHARS = 50
MIN_FALLBACK_CHARS = 100
RESTRICTED_CONTENT_PHRASES = (
    "sign in to read exclusive news",
    "login or create a forever free account",
    "subscribe to read this article",
    "this article is reserved for our members",
    "premium content",
    "requires subscription",
)

TEXT_OK = "ok"
TEXT_SHORT = "short"
TEXT_RESTRICTED = "restricted"


def screen_text(text: Optional[str], min_chars: int) -> str:
    """Classify candidate body text as usable, too short or restricted."""
    if not text or len(text) <= min_chars:
        return TEXT_SHORT
    if find_phrase(text, RESTRICTED_CONTENT_PHRASES):
        return TEXT_RESTRICTED
    return TEXT_OK


async def _selector_text(page, selector: str, timeout_ms: float) -> Optional[str]:
    await page.wait_for_selector(selector, state="attached", timeout=timeout_ms)
    text = await page.eval_on_selector(selector, "(el) => el.innerText")
    return text.strip() if text else None


async def _fallback_text(page, config: ScraperConfig) -> Optional[str]:
    for selector in config.selectors.fallback_containers:
        container = await page.query_selector(selector)
        if container is None:
            continue
        text = (await container.inner_text() or "").strip()
        if len(text) > MIN_FALLBACK_CHARS:
            return text
    return None


async def extract_article_content(page, config: ScraperConfig) -> Optional[str]:
    """Return the readable body of a loaded article page, or None.

    Specific content selectors are tried in priority order before generic
    containers. A restricted phrase in the first qualifying text ends the
    search: the page is considered gated.
    """
    if config.content_settle:
        await page.wait_for_timeout(int(config.content_settle * 1000))

    if await requires_login(page):
        logger.info("Article requires login/subscription - skipping")
        return None

    timeout_ms = config.selector_timeout * 1000
    for selector in config.selectors.content:
        try:
            text = await _selector_text(page, selector, timeout_ms)
        except PlaywrightError:
            continue
        verdict = screen_text(text, MIN_SELECTOR_CHARS)
        if verdict == TEXT_RESTRICTED:
            logger.info("Content contains restricted phrases - skipping")
            return None
        if verdict == TEXT_OK:
            logger.info("Successfully extracted content (%d characters)", len(text))
            return text

    try:
        text = await _fallback_text(page, config)
    except PlaywrightError as exc:
        logger.warning("Fallback content extraction failed: %s", exc)
        text = None

    if text:
        if screen_text(text, MIN_FALLBACK_CHARS) == TEXT_OK:
            logger.info("Fallback extraction successful (%d characters)", len(text))
            return text
        logger.info("Fallback content contains restricted phrases - skipping")
        return None

    logger.info("No publicly available content found")
    return None
