"""Configuration objects and constants for the scraper."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = (
    "--start-maximized",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-features=VizDisplayCompositor",
)
BLOCKED_RESOURCE_TYPES = frozenset({"stylesheet", "image"})

SelectorChain = Tuple[str, ...]


@dataclass(frozen=True)
class SelectorRegistry:
    """Ordered candidate selectors for every logical field on a news page.

    Markup on the target site changes without notice, so each chain keeps
    both the current and the older selector shapes, most specific first.
    """

    articles: SelectorChain = (
        'article[class*="article-"]',
        'a[href*="/news/"]',
        '[data-qa-id="news-headline-card"]',
        'div[class*="card-"][class*="news"]',
        'tr[class*="row-"]',
    )
    headline: SelectorChain = (
        "[data-overflow-tooltip-text]",
        '[data-qa-id="news-headline-title"]',
        'div[class*="title-"]',
        "h3",
        "h4",
    )
    provider: SelectorChain = (
        '[class*="provider-"]',
        'span[class*="provider"]',
        'div[class*="source"]',
    )
    content: SelectorChain = (
        ".body-KX2tCBZq",
        'div[class*="body-"]',
        'div[class*="content-"]',
        'article[data-role="article"] div[class*="content"]',
        'div[class*="article-body"]',
        '[itemprop="articleBody"]',
    )
    time: SelectorChain = (
        "relative-time",
        "time",
        "[datetime]",
        '[class*="date-"]',
        '[class*="time-"]',
    )
    fallback_containers: SelectorChain = (
        "article",
        "main",
        '[role="main"]',
        ".article-content",
        ".content",
        ".post-content",
    )
    symbol_icons: str = 'img[src*=".svg"]'


DEFAULT_SELECTORS = SelectorRegistry()


@dataclass
class ScraperConfig:
    """Top-level settings that control scraping, pacing and publishing."""

    wp_api_url: Optional[str] = None
    wp_user: Optional[str] = None
    wp_pass: Optional[str] = None
    sheet_id: Optional[str] = None
    sheet_name: Optional[str] = None
    service_account_email: Optional[str] = None
    service_account_key: Optional[str] = None
    listing_max_days: int = 3
    storage_max_days: int = 1
    listing_timeout: float = 30.0
    article_timeout: float = 15.0
    listing_settle: float = 3.0
    scroll_settle: float = 2.0
    content_settle: float = 3.0
    selector_timeout: float = 3.0
    article_delay: float = 1.0
    target_delay: float = 2.0
    publish_timeout: float = 10.0
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    selectors: SelectorRegistry = field(default_factory=SelectorRegistry)

    @classmethod
    def from_env(cls, **overrides) -> "ScraperConfig":
        """Build a config from process environment variables."""
        private_key = os.getenv("GOOGLE_PRIVATE_KEY")
        if private_key:
            private_key = private_key.replace("\\n", "\n")
        values = dict(
            wp_api_url=os.getenv("WP_API_URL") or None,
            wp_user=os.getenv("WP_USER"),
            wp_pass=os.getenv("WP_PASS"),
            sheet_id=os.getenv("SHEET_ID"),
            sheet_name=os.getenv("SHEET_NAME"),
            service_account_email=os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL"),
            service_account_key=private_key,
            listing_max_days=_env_int("LISTING_MAX_DAYS", 3),
            storage_max_days=_env_int("STORAGE_MAX_DAYS", 1),
        )
        values.update(overrides)
        return cls(**values)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default
