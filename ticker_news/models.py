"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict


@dataclass(frozen=True)
class StockTarget:
    """One input row: the symbol and the news listing page to visit."""

    symbol: str
    display_name: str
    listing_url: str


@dataclass(frozen=True)
class ExtractedArticle:
    """Article card that passed headline, link and recency checks."""

    headline: str
    provider: str
    timestamp: str
    link: str
    symbol: str

    @property
    def dedup_key(self) -> tuple:
        return (self.headline, self.timestamp, self.symbol)


@dataclass(frozen=True)
class PublishPayload:
    """Article body ready to be posted to the content-storage endpoint."""

    headline: str
    body: str
    provider: str
    symbol: str
    publish_date: date

    def to_json(self) -> Dict[str, Any]:
        return {
            "Headline": self.headline,
            "Fullarticle": self.body,
            "Provider": self.provider,
            "Symbol": self.symbol,
            "date": self.publish_date.isoformat(),
        }


@dataclass
class TargetStats:
    """Per-target counters reported once the target is finished."""

    symbol: str
    found: int = 0
    stored: int = 0
    skipped: int = 0
    not_stored: int = 0
    failed: int = 0
    loaded: bool = True


@dataclass
class RunSummary:
    """Totals for a whole run across all targets."""

    targets: int = 0
    failed_targets: int = 0
    articles_found: int = 0
    stored: int = 0
    skipped: int = 0
    not_stored: int = 0
    failed: int = 0

    def add(self, stats: TargetStats) -> None:
        self.targets += 1
        if not stats.loaded:
            self.failed_targets += 1
        self.articles_found += stats.found
        self.stored += stats.stored
        self.skipped += stats.skipped
        self.not_stored += stats.not_stored
        self.failed += stats.failed
