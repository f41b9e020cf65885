"""Pytest-wide fixtures for the scraper tests."""

from __future__ import annotations

import pytest

from ticker_news.config import ScraperConfig


@pytest.fixture()
def fast_config() -> ScraperConfig:
    return ScraperConfig(
        wp_api_url="https://example.com/wp-json/scraper/v1/tradingview",
        wp_user="bot",
        wp_pass="secret",
        listing_settle=0,
        scroll_settle=0,
        content_settle=0,
        selector_timeout=0.01,
        article_delay=0,
        target_delay=0,
    )
