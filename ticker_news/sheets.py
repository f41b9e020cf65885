"""Loading stock targets from Google Sheets or a local CSV export."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import List, Sequence

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from .config import ScraperConfig
from .models import StockTarget

logger = logging.getLogger("ticker_news")

LINK_COLUMN = "Scrap_Link"
SYMBOL_COLUMN = "Symbol"
NAME_COLUMN = "Stock name"
REQUIRED_COLUMNS = (LINK_COLUMN, SYMBOL_COLUMN, NAME_COLUMN)
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class SheetConfigError(ValueError):
    """The target sheet cannot be used as input for a run."""


def _cell(row: Sequence[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] else ""


def parse_target_rows(rows: Sequence[Sequence[str]]) -> List[StockTarget]:
    """Turn a header row plus data rows into stock targets.

    Missing required columns abort the run; rows without a link are dropped.
    """
    if not rows or not rows[0]:
        raise SheetConfigError(
            "Could not read headers from the sheet. Make sure the sheet is not empty."
        )
    header = [str(h).strip() for h in rows[0]]
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise SheetConfigError(
            f"Required columns ({', '.join(REQUIRED_COLUMNS)}) not found in the sheet; "
            f"missing: {', '.join(missing)}"
        )
    link_idx = header.index(LINK_COLUMN)
    symbol_idx = header.index(SYMBOL_COLUMN)
    name_idx = header.index(NAME_COLUMN)

    targets = []
    for row in rows[1:]:
        link = _cell(row, link_idx)
        if not link:
            continue
        targets.append(
            StockTarget(
                symbol=_cell(row, symbol_idx),
                display_name=_cell(row, name_idx),
                listing_url=link,
            )
        )
    return targets


def get_gspread_client(config: ScraperConfig) -> gspread.Client:
    if not (config.service_account_email and config.service_account_key):
        raise SheetConfigError(
            "GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY must be set"
        )
    info = {
        "type": "service_account",
        "client_email": config.service_account_email,
        "private_key": config.service_account_key,
        "token_uri": TOKEN_URI,
    }
    try:
        creds = Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
    except ValueError as exc:
        raise SheetConfigError(f"Invalid service account credentials: {exc}") from None
    return gspread.authorize(creds)


def load_sheet_targets(config: ScraperConfig) -> List[StockTarget]:
    """Read stock targets from the configured Google Sheet tab."""
    if not (config.sheet_id and config.sheet_name):
        raise SheetConfigError("SHEET_ID and SHEET_NAME must be set")
    client = get_gspread_client(config)
    try:
        worksheet = client.open_by_key(config.sheet_id).worksheet(config.sheet_name)
        rows = worksheet.get_all_values()
    except gspread.exceptions.APIError as exc:
        logger.error("Error accessing Google Sheet: %s", exc)
        if getattr(exc, "code", None) == 403:
            logger.error(
                "Permission denied. Make sure the service account has read access to the Google Sheet."
            )
        return []
    except GoogleAuthError as exc:
        logger.error("Google authentication failed: %s", exc)
        logger.error(
            "Check GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_PRIVATE_KEY for the service account."
        )
        return []
    except gspread.exceptions.SpreadsheetNotFound:
        raise SheetConfigError(f"Spreadsheet {config.sheet_id!r} not found") from None
    except gspread.exceptions.WorksheetNotFound:
        raise SheetConfigError(f"Worksheet {config.sheet_name!r} not found") from None

    logger.info("Google Sheet authentication successful.")
    if not rows:
        logger.info("No data found in the Google Sheet.")
        return []
    targets = parse_target_rows(rows)
    logger.info("Loaded %d stock URLs from Google Sheet.", len(targets))
    return targets


def load_csv_targets(path: Path) -> List[StockTarget]:
    """Read stock targets from a CSV file with the same header layout."""
    with Path(path).open(newline="", encoding="utf-8-sig") as handle:
        rows = [row for row in csv.reader(handle)]
    targets = parse_target_rows(rows)
    logger.info("Loaded %d stock URLs from %s.", len(targets), path)
    return targets
