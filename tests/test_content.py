import asyncio

import pytest

from ticker_news.content import (
    TEXT_OK,
    TEXT_RESTRICTED,
    TEXT_SHORT,
    extract_article_content,
    screen_text,
)
from tests.fakes import FakePage

URL = "https://www.tradingview.com/news/reuters:1/"
CLEAN_60 = "Reliance Industries shares rose 3% after strong results today"[:60].ljust(60, ".")
RESTRICTED_60 = "Sorry, this article is reserved for our members. Join today".ljust(60, ".")


def _extract(body: str, config) -> str | None:
    page = FakePage({URL: f"<html><body>{body}</body></html>"})

    async def run():
        await page.goto(URL)
        return await extract_article_content(page, config)

    return asyncio.run(run())


def test_screen_text_thresholds():
    assert screen_text("x" * 50, 50) == TEXT_SHORT
    assert screen_text("x" * 51, 50) == TEXT_OK
    assert screen_text(None, 50) == TEXT_SHORT
    assert screen_text("Premium Content " + "x" * 60, 50) == TEXT_RESTRICTED


def test_clean_body_is_returned_trimmed(fast_config):
    assert len(CLEAN_60) == 60
    body = _extract(f'<div class="body-KX2tCBZq">   {CLEAN_60}   </div>', fast_config)
    assert body == CLEAN_60


def test_short_body_is_rejected(fast_config):
    text = "x" * 40
    assert _extract(f'<div class="body-KX2tCBZq">{text}</div>', fast_config) is None


def test_restricted_body_is_rejected(fast_config):
    assert len(RESTRICTED_60) == 60
    assert _extract(f'<div class="body-KX2tCBZq">{RESTRICTED_60}</div>', fast_config) is None


def test_restricted_match_stops_the_search(fast_config):
    body = (
        f'<div class="body-KX2tCBZq">{RESTRICTED_60}</div>'
        f'<div itemprop="articleBody">{CLEAN_60} and more clean words follow here.</div>'
    )
    assert _extract(body, fast_config) is None


@pytest.mark.parametrize("style", ["visibility:hidden", "display:none"])
def test_present_but_hidden_body_is_still_read(fast_config, style):
    body = _extract(f'<div class="body-KX2tCBZq" style="{style}">{CLEAN_60}</div>', fast_config)
    assert body == CLEAN_60


def test_later_selector_used_when_earlier_ones_are_short(fast_config):
    body = (
        '<div class="body-KX2tCBZq">too short</div>'
        f'<section><div itemprop="articleBody">{CLEAN_60}</div></section>'
    )
    assert _extract(body, fast_config) == CLEAN_60


def test_generic_container_fallback_needs_more_than_100_chars(fast_config):
    long_text = "Oil prices climbed for a third session. " * 4
    assert _extract(f"<main>{long_text}</main>", fast_config) == long_text.strip()
    assert _extract(f"<main>{CLEAN_60}</main>", fast_config) is None


def test_generic_container_fallback_rejects_restricted_text(fast_config):
    text = "Login or create a forever free account to keep going. " * 3
    assert _extract(f"<article>{text}</article>", fast_config) is None


def test_gated_page_returns_none_without_reading_body(fast_config):
    body = (
        '<div class="paywall">Please log in</div>'
        f'<div class="body-KX2tCBZq">{CLEAN_60}</div>'
    )
    assert _extract(body, fast_config) is None


@pytest.mark.parametrize("settle", [0, 1.5])
def test_settle_delay_is_applied(fast_config, settle):
    fast_config.content_settle = settle
    page = FakePage({URL: f'<html><body><div class="body-KX2tCBZq">{CLEAN_60}</div></body></html>'})

    async def run():
        await page.goto(URL)
        return await extract_article_content(page, fast_config)

    assert asyncio.run(run()) == CLEAN_60
    assert page.waits == ([1500] if settle else [])
