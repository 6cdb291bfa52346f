"""Entry point and pipeline orchestration for the GolfLink handicap sync.

Executes the full run sequence:
1. Startup: build the run config, authenticate with Sheets.
2. Read: fetch the member table and turn it into records.
3. Scrape: open the browser, wait for the operator to log in, then look up
   every record in order (per-record failures are recorded, not raised).
4. Write: send all results back to the sheet in a single batch update.

Everything except a single profile lookup is fatal. On failure the full
traceback is logged and the process exits with a non-zero code.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import browser
import export
from config import RunConfig, load_config
from rows import InputRecord, ScrapeOutcome, read_records
from scrape import scrape_records

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Scrape handicaps from golf.org.au for every GolfLink number in a "
            "Google Sheet and write them back."
        )
    )
    parser.add_argument("--spreadsheet-id", help="Google Spreadsheet ID (from the URL)")
    parser.add_argument("--sheet-name", help="Tab holding the member list")
    parser.add_argument(
        "--service-account",
        type=Path,
        help="Path to the service account JSON key file",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=None,
        help="Run the browser headless (only useful with a pre-authenticated site)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Scrape as usual but log the sheet updates instead of writing them",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def _log_outcome(record: InputRecord, outcome: ScrapeOutcome) -> None:
    if not outcome.failed:
        logger.info(
            "Row %d %s (%s): %s",
            record.position, record.display_name or "?", record.identifier,
            outcome.value,
        )


def run(config: RunConfig, prompt=input) -> int:
    """Run one read-scrape-write cycle.

    The browser is only launched when at least one row has a GolfLink
    number. The browser session is closed before the sheet is written.

    Args:
        config: The validated run configuration.
        prompt: Reads the operator's login confirmation.

    Returns:
        The number of rows written to the sheet.

    Raises:
        SessionError: If the browser session cannot be established.
        gspread.exceptions.GSpreadException: On any Sheets failure.
    """
    client = export.get_sheets_client(config.service_account_key_path)
    spreadsheet = export.open_spreadsheet(client, config.spreadsheet_id)

    logger.info("Fetching GolfLink numbers from %s", config.read_range)
    table = export.fetch_table(spreadsheet, config.read_range)
    records = read_records(table, config.first_data_row)
    if not records:
        logger.info("No GolfLink numbers found; nothing to do")
        return 0

    logger.info("Starting browser to scrape %d profiles", len(records))
    with browser.browser_session(config) as context:
        browser.open_login_page(context, config)
        browser.wait_for_operator_login(prompt)
        outcomes = scrape_records(
            records,
            browser.make_lookup(context, config),
            base_url=config.base_url,
            on_outcome=_log_outcome,
        )

    logger.info("Updating Google Sheets with the scraped data")
    written = export.write_outcomes(spreadsheet, outcomes, config)
    if config.dry_run:
        logger.info("Dry run finished; Google Sheets left unchanged (%d rows scraped)", len(outcomes))
    else:
        logger.info("Google Sheets updated successfully (%d rows)", written)
    return written


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse arguments, configure logging and run the sync.

    Raises:
        SystemExit: With status 1 on any fatal error, after logging the
            full traceback; with status 130 when interrupted.
    """
    args = parse_args(argv)
    configure_logging(args.verbose)
    try:
        config = load_config(
            spreadsheet_id=args.spreadsheet_id,
            sheet_name=args.sheet_name,
            service_account_key_path=args.service_account,
            headless=args.headless,
            dry_run=args.dry_run,
        )
        run(config)
    except KeyboardInterrupt:
        logger.warning("Interrupted by operator")
        sys.exit(130)
    except Exception:
        logger.exception("Sync aborted")
        sys.exit(1)


if __name__ == "__main__":
    main()
