"""Publishing accepted articles to the WordPress scraper endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .config import ScraperConfig
from .models import ExtractedArticle, PublishPayload
from .utils import is_recent, publish_date

logger = logging.getLogger("ticker_news")

DEFAULT_PROVIDER = "General"
PREVIEW_CHARS = 100


def build_payload(article: ExtractedArticle, body: str) -> Optional[PublishPayload]:
    """Combine listing metadata and the extracted body into a payload."""
    published = publish_date(article.timestamp)
    if published is None or not body:
        return None
    return PublishPayload(
        headline=article.headline,
        body=body,
        provider=article.provider or DEFAULT_PROVIDER,
        symbol=article.symbol,
        publish_date=published,
    )


class WordPressPublisher:
    """Posts payloads to the content-storage endpoint with basic auth."""

    def __init__(
        self,
        api_url: Optional[str],
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        max_days: int = 1,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url
        self.auth = (user, password) if user else None
        self.timeout = timeout
        self.max_days = max_days
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    @property
    def enabled(self) -> bool:
        return bool(self.api_url)

    @classmethod
    def from_config(cls, config: ScraperConfig) -> "WordPressPublisher":
        return cls(
            config.wp_api_url,
            config.wp_user,
            config.wp_pass,
            timeout=config.publish_timeout,
            max_days=config.storage_max_days,
        )

    def publish(self, article: ExtractedArticle, body: str) -> bool:
        """Send one article; returns True when it was stored."""
        if not self.enabled:
            logger.info("WordPress API URL not configured. Skipping storage.")
            return True
        if not is_recent(article.timestamp, self.max_days):
            logger.info("Skipping storage - article is not recent: %s", article.timestamp)
            return False
        payload = build_payload(article, body)
        if payload is None:
            logger.warning("Skipping storage - could not build payload for %s", article.link)
            return False

        preview = dict(payload.to_json())
        preview["Fullarticle"] = payload.body[:PREVIEW_CHARS] + "..."
        logger.info("Data to be sent to WordPress: %s", preview)
        return self._send(payload)

    def _send(self, payload: PublishPayload) -> bool:
        try:
            response = self.session.post(
                self.api_url,
                json=payload.to_json(),
                auth=self.auth,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            detail = exc.response.text if exc.response is not None else exc
            logger.error("WP API Error: %s", detail)
            return False
        logger.info("Stored in WordPress: %s", response.text[:200])
        return True


class DryRunPublisher(WordPressPublisher):
    """Runs every publishing check but only logs the payload."""

    @property
    def enabled(self) -> bool:
        return True

    def _send(self, payload: PublishPayload) -> bool:
        logger.info(
            "Dry run - not posting %r for %s (%d characters)",
            payload.headline,
            payload.symbol,
            len(payload.body),
        )
        return True
