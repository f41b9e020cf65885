"""Utility helpers for timestamps and text matching."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from dateutil import parser as date_parser

EPOCH_PATTERN = re.compile(r"^\d{10}(\d{3})?$")
SECONDS_PER_DAY = 24 * 60 * 60


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse a source timestamp into an aware UTC datetime, or None."""
    if value is None:
        return None
    try:
        if isinstance(value, datetime):
            parsed = value
        else:
            text = str(value).strip()
            if not text:
                return None
            if EPOCH_PATTERN.match(text):
                seconds = int(text) / (1000 if len(text) == 13 else 1)
                return datetime.fromtimestamp(seconds, tz=timezone.utc)
            parsed = date_parser.parse(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Offsets near datetime.min/max can push the UTC value out of range.
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError, TypeError):
        return None


def is_recent(
    timestamp: object,
    max_days_ago: int,
    now: Optional[datetime] = None,
) -> bool:
    """Return True when the timestamp is at most ``max_days_ago`` whole days old.

    Future timestamps count as recent. Anything that cannot be parsed is
    treated as stale.
    """
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return False
    reference = now or datetime.now(timezone.utc)
    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    elapsed = (reference - parsed).total_seconds()
    return math.floor(elapsed / SECONDS_PER_DAY) <= max_days_ago


def publish_date(timestamp: object) -> Optional[date]:
    """Calendar date (UTC) of a source timestamp."""
    parsed = parse_timestamp(timestamp)
    return parsed.date() if parsed else None


def find_phrase(text: Optional[str], phrases: Iterable[str]) -> Optional[str]:
    """Return the first phrase contained in ``text``, case-insensitively."""
    if not text:
        return None
    lowered = text.lower()
    for phrase in phrases:
        if phrase in lowered:
            return phrase
    return None


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim a value and collapse empty strings to None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
