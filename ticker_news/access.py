"""Heuristics deciding whether an article page is publicly readable."""

from __future__ import annotations

import logging
from typing import Optional

from bs4 import BeautifulSoup

from .utils import find_phrase

logger = logging.getLogger("ticker_news")

# When the checks themselves fail the article is treated as readable.
FAIL_OPEN_ON_ERROR = True

PROVIDER_SELECTOR = '[class*="provider"]'
KNOWN_FREE_PROVIDERS = (
    "moneycontrol",
    "reuters",
    "business standard",
    "investing.com",
)
CONTAINER_SELECTOR = "div, section, article, header"
LOGIN_PHRASES = (
    "sign in to read",
    "login to continue",
    "subscribe to read",
    "premium content",
    "members only",
    "requires subscription",
    "sign up to continue reading",
    "paywall",
    "membership required",
)
PAYWALL_SELECTORS = (
    '[class*="paywall"]',
    '[class*="subscription"]',
    '[class*="premium"]',
    '[id*="login"]',
    '[class*="sign-in"]',
    'button[class*="subscribe"]',
    '[class*="member-only"]',
    "[data-login-required]",
)

# Runs in the page: only elements that take part in layout are scanned.
VISIBLE_PHRASE_SCRIPT = """
({ selector, phrases }) => {
  for (const el of document.querySelectorAll(selector)) {
    if (el.offsetParent === null) continue;
    const text = (el.innerText || "").toLowerCase();
    const hit = phrases.find((phrase) => text.includes(phrase));
    if (hit) return hit;
  }
  return null;
}
"""


def provider_text(soup: BeautifulSoup) -> str:
    element = soup.select_one(PROVIDER_SELECTOR)
    if element is None:
        return ""
    return " ".join(element.get_text(" ").split()).lower()


def free_provider(soup: BeautifulSoup) -> Optional[str]:
    """Return the allow-listed provider named on the page, if any."""
    return find_phrase(provider_text(soup), KNOWN_FREE_PROVIDERS)


def paywall_marker(soup: BeautifulSoup) -> Optional[str]:
    """Return the first paywall/login selector present anywhere in the page."""
    for selector in PAYWALL_SELECTORS:
        if soup.select_one(selector) is not None:
            return selector
    return None


async def visible_login_phrase(page) -> Optional[str]:
    return await page.evaluate(
        VISIBLE_PHRASE_SCRIPT,
        {"selector": CONTAINER_SELECTOR, "phrases": list(LOGIN_PHRASES)},
    )


async def requires_login(page) -> bool:
    """Decide whether the loaded article sits behind a login or subscription."""
    try:
        soup = BeautifulSoup(await page.content(), "html.parser")
        provider = free_provider(soup)
        if provider:
            logger.info("Skipping login check - public provider detected: %s", provider)
            return False

        phrase = await visible_login_phrase(page)
        marker = paywall_marker(soup)
        if phrase or marker:
            logger.debug("Login indicators on %s: phrase=%s marker=%s", page.url, phrase, marker)
            return True
        return False
    except Exception as exc:  # pylint: disable=broad-except
        logger.warning("Error during login check: %s", exc)
        return not FAIL_OPEN_ON_ERROR
