"""In-memory stand-ins for Playwright pages and the requests session."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

import requests
from bs4 import BeautifulSoup, Tag
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ticker_news.access import VISIBLE_PHRASE_SCRIPT
from ticker_news.crawler import AUTO_SCROLL_SCRIPT


def _is_hidden(element: Tag) -> bool:
    for node in [element, *element.parents]:
        if not isinstance(node, Tag):
            continue
        style = (node.get("style") or "").replace(" ", "").lower()
        if "display:none" in style or node.has_attr("hidden"):
            return True
    return False


def _is_invisible(element: Tag) -> bool:
    if _is_hidden(element):
        return True
    for node in [element, *element.parents]:
        if not isinstance(node, Tag):
            continue
        style = (node.get("style") or "").replace(" ", "").lower()
        if "visibility:hidden" in style:
            return True
    return False


class FakeElement:
    def __init__(self, tag: Tag) -> None:
        self.tag = tag

    async def inner_text(self) -> str:
        return self.tag.get_text()


class FakePage:
    """Serves canned HTML keyed by URL and mimics the Page calls we use."""

    def __init__(
        self,
        pages: Dict[str, str],
        fail_urls: Iterable[str] = (),
        visited: Optional[List[str]] = None,
    ) -> None:
        self.pages = pages
        self.fail_urls = set(fail_urls)
        self.visited = visited if visited is not None else []
        self.url = "about:blank"
        self.html = "<html></html>"
        self.closed = False
        self.scrolled = False
        self.waits: List[int] = []

    @property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "html.parser")

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None):
        self.visited.append(url)
        if url in self.fail_urls or url not in self.pages:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")
        self.url = url
        self.html = self.pages[url]
        return None

    async def wait_for_timeout(self, timeout: float) -> None:
        self.waits.append(timeout)

    async def content(self) -> str:
        return self.html

    async def evaluate(self, expression: str, arg=None):
        if expression == AUTO_SCROLL_SCRIPT:
            self.scrolled = True
            return None
        if expression == VISIBLE_PHRASE_SCRIPT:
            for element in self.soup.select(arg["selector"]):
                if _is_hidden(element):
                    continue
                text = element.get_text().lower()
                for phrase in arg["phrases"]:
                    if phrase in text:
                        return phrase
            return None
        raise AssertionError(f"unexpected script: {expression[:40]}")

    async def wait_for_selector(
        self, selector: str, state: str = "visible", timeout: float | None = None
    ):
        element = self.soup.select_one(selector)
        if element is None or (state == "visible" and _is_invisible(element)):
            raise PlaywrightTimeoutError(f"waiting for {selector} timed out")
        return FakeElement(element)

    async def eval_on_selector(self, selector: str, expression: str):
        element = self.soup.select_one(selector)
        return element.get_text() if element is not None else None

    async def query_selector(self, selector: str):
        element = self.soup.select_one(selector)
        return FakeElement(element) if element is not None else None

    def is_closed(self) -> bool:
        return self.closed

    async def close(self) -> None:
        self.closed = True


class FakeContext:
    """Hands out FakePages sharing one URL table and navigation log."""

    def __init__(self, pages: Dict[str, str], fail_urls: Iterable[str] = ()) -> None:
        self.pages = pages
        self.fail_urls = set(fail_urls)
        self.visited: List[str] = []
        self.opened: List[FakePage] = []

    async def new_page(self) -> FakePage:
        page = FakePage(self.pages, self.fail_urls, self.visited)
        self.opened.append(page)
        return page


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = '{"ok": true}') -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    """Records posts; each queued outcome is a response or an exception."""

    def __init__(self, outcomes: Iterable = ()) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, json=None, auth=None, timeout=None):
        self.calls.append({"url": url, "json": json, "auth": auth, "timeout": timeout})
        outcome = self.outcomes.pop(0) if self.outcomes else FakeResponse()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


def iso_hours_ago(hours: float) -> str:
    moment = datetime.now(timezone.utc) - timedelta(hours=hours)
    return moment.replace(microsecond=0).isoformat()
