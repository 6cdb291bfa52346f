"""Google Sheets read and write logic via gspread.

Handles service-account authentication, reading the member table, and the
single batched write of scrape results. The write uses
``valueInputOption="USER_ENTERED"`` so handicaps such as ``"12.4"`` are
stored as numbers rather than text.
"""

import logging
from pathlib import Path
from typing import Sequence

import gspread
from google.oauth2.service_account import Credentials

from config import SHEETS_SCOPES, VALUE_INPUT_OPTION, RunConfig
from rows import ScrapeOutcome, build_value_ranges

logger = logging.getLogger(__name__)


def get_sheets_client(key_path: Path) -> gspread.Client:
    """Authenticate with Google Sheets using a service account key.

    Args:
        key_path: Path to the service account JSON key file.

    Returns:
        An authorized ``gspread.Client``.

    Raises:
        FileNotFoundError: If the key file does not exist.
        google.auth.exceptions.GoogleAuthError: If the key is invalid.
    """
    if not key_path.exists():
        raise FileNotFoundError(f"Service account key not found: {key_path}")
    creds = Credentials.from_service_account_file(str(key_path), scopes=SHEETS_SCOPES)
    logger.debug("Loaded service account %s", creds.service_account_email)
    return gspread.authorize(creds)


def open_spreadsheet(client: gspread.Client, spreadsheet_id: str) -> gspread.Spreadsheet:
    """Open the member spreadsheet by key.

    Raises:
        gspread.exceptions.SpreadsheetNotFound: If the ID is wrong or the
            service account has no access.
    """
    spreadsheet = client.open_by_key(spreadsheet_id)
    logger.info("Opened spreadsheet '%s'", spreadsheet.title)
    return spreadsheet


def fetch_table(spreadsheet: gspread.Spreadsheet, range_name: str) -> list[list[str]]:
    """Read the raw cell table for *range_name*.

    Args:
        spreadsheet: The gspread Spreadsheet object.
        range_name: A1 range including the tab name, e.g. ``Sheet1!A2:D``.

    Returns:
        Rows of cell text. Empty when the range holds no data; rows may be
        shorter than the range when trailing cells are blank.

    Raises:
        gspread.exceptions.APIError: If the range is invalid or access is
            denied.
    """
    response = spreadsheet.values_get(range_name)
    rows = response.get("values", [])
    logger.debug("Fetched %d rows from %s", len(rows), range_name)
    return rows


def write_outcomes(
    spreadsheet: gspread.Spreadsheet,
    outcomes: Sequence[ScrapeOutcome],
    config: RunConfig,
) -> int:
    """Write all scrape outcomes back to the sheet in one request.

    Nothing is sent when *outcomes* is empty or ``config.dry_run`` is set.
    There is no per-row write path: the request either succeeds for every
    range or fails as a whole.

    Args:
        spreadsheet: The gspread Spreadsheet object.
        outcomes: Results from the scrape loop.
        config: Supplies the tab name, output columns and dry-run flag.

    Returns:
        The number of rows included in the request (0 if none was sent).

    Raises:
        gspread.exceptions.APIError: If the batch update is rejected.
    """
    data = build_value_ranges(outcomes, config.sheet_name, config.output_columns)
    if not data:
        logger.info("No results to write")
        return 0

    if config.dry_run:
        for entry in data:
            logger.info("[dry run] %s <- %s", entry["range"], entry["values"][0])
        logger.info("[dry run] Skipped writing %d rows", len(data))
        return 0

    spreadsheet.values_batch_update(
        body={"valueInputOption": VALUE_INPUT_OPTION, "data": data}
    )
    logger.info("Wrote %d rows to '%s'", len(data), config.sheet_name)
    return len(data)
