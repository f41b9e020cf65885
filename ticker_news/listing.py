"""Article card discovery on rendered news listing pages."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from .config import DEFAULT_SELECTORS, SelectorRegistry
from .models import ExtractedArticle
from .utils import clean_text, find_phrase, is_recent

logger = logging.getLogger("ticker_news")

# Structured attributes are preferred to rendered text, which may be truncated.
HEADLINE_ATTRIBUTES = ("data-overflow-tooltip-text", "title")
TIME_ATTRIBUTES = ("event-time", "datetime", "data-timestamp")

UNKNOWN_PROVIDER = "Unknown"
RESTRICTED_HEADLINE_PHRASES = (
    "sign in to read exclusive news",
    "login to read",
    "subscribe to read",
    "premium content",
    "members only",
    "exclusive news",
    "requires subscription",
)
ICON_PATTERN = re.compile(r"/([^/]+)\.svg$")


def _visible_text(element: Tag) -> Optional[str]:
    text = " ".join(element.get_text(" ").split())
    return text or None


def _element_value(element: Tag, attributes: Sequence[str]) -> Optional[str]:
    for attribute in attributes:
        raw = element.get(attribute)
        if isinstance(raw, list):
            raw = " ".join(raw)
        value = clean_text(raw)
        if value:
            return value
    return _visible_text(element)


def resolve_field(
    element: Tag,
    chain: Iterable[str],
    attributes: Sequence[str] = HEADLINE_ATTRIBUTES,
    fallback_to_self: bool = True,
) -> Optional[str]:
    """Return the first non-empty value produced by an ordered selector chain.

    Each selector is tried against the element's descendants; the first match
    contributes its attributes (in ``attributes`` order) or its text. When no
    candidate yields a value the element itself is read, unless
    ``fallback_to_self`` is False. Never returns an empty string.
    """
    for selector in chain:
        match = element.select_one(selector)
        if match is None:
            continue
        value = _element_value(match, attributes)
        if value:
            return value
    if fallback_to_self:
        return _element_value(element, attributes)
    return None


def _absolute_http_url(href: Optional[str], base_url: str) -> Optional[str]:
    if not href or not href.strip():
        return None
    absolute = urljoin(base_url, href.strip())
    parsed = urlparse(absolute)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return absolute


def resolve_link(element: Tag, base_url: str) -> Optional[str]:
    """Own href, then first descendant anchor, then nearest ancestor anchor."""
    candidates = []
    if element.name == "a":
        candidates.append(element.get("href"))
    descendant = element.select_one("a[href]")
    if descendant is not None:
        candidates.append(descendant.get("href"))
    ancestor = element.find_parent("a", href=True)
    if ancestor is not None:
        candidates.append(ancestor.get("href"))
    for href in candidates:
        link = _absolute_http_url(href, base_url)
        if link:
            return link
    return None


def resolve_symbol(element: Tag, icon_selector: str, base_url: str) -> Optional[str]:
    """Build a composite ticker from the symbol icons rendered on a card."""
    codes = []
    for img in element.select(icon_selector):
        src = img.get("src")
        if not src:
            continue
        match = ICON_PATTERN.search(urljoin(base_url, src))
        if match:
            codes.append(match.group(1).replace("-", ""))
    return "".join(codes) or None


def _build_article(
    card: Tag,
    base_url: str,
    fallback_symbol: str,
    max_days_ago: int,
    selectors: SelectorRegistry,
    now: Optional[datetime],
) -> Optional[ExtractedArticle]:
    headline = resolve_field(card, selectors.headline)
    if not headline:
        return None
    if find_phrase(headline, RESTRICTED_HEADLINE_PHRASES):
        logger.debug("Skipping restricted headline: %s", headline)
        return None

    provider = resolve_field(card, selectors.provider, attributes=(), fallback_to_self=False)

    link = resolve_link(card, base_url)
    if not link:
        return None

    timestamp = resolve_field(
        card, selectors.time, attributes=TIME_ATTRIBUTES, fallback_to_self=False
    )
    if not timestamp or not is_recent(timestamp, max_days_ago, now=now):
        return None

    symbol = resolve_symbol(card, selectors.symbol_icons, base_url) or fallback_symbol
    return ExtractedArticle(
        headline=headline,
        provider=provider or UNKNOWN_PROVIDER,
        timestamp=timestamp,
        link=link,
        symbol=symbol,
    )


def dedupe_articles(articles: Iterable[ExtractedArticle]) -> List[ExtractedArticle]:
    """Drop repeats of (headline, timestamp, symbol), keeping first-seen order."""
    seen = set()
    unique: List[ExtractedArticle] = []
    for article in articles:
        key = article.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def extract_articles(
    html: str,
    base_url: str,
    fallback_symbol: str,
    max_days_ago: int = 3,
    selectors: SelectorRegistry = DEFAULT_SELECTORS,
    now: Optional[datetime] = None,
) -> List[ExtractedArticle]:
    """Extract recent, unrestricted article cards from a listing page snapshot."""
    soup = BeautifulSoup(html, "html.parser")
    # A single grouped query visits cards matched by several selectors once.
    cards = soup.select(", ".join(selectors.articles))
    articles = []
    for card in cards:
        article = _build_article(
            card, base_url, fallback_symbol, max_days_ago, selectors, now
        )
        if article:
            articles.append(article)
    unique = dedupe_articles(articles)
    logger.debug(
        "Listing %s: %d cards, %d accepted, %d after dedup",
        base_url,
        len(cards),
        len(articles),
        len(unique),
    )
    return unique
