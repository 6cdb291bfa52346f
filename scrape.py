"""Serial scrape loop over member records.

The loop knows nothing about browsers: it receives a ``lookup`` callable that
maps a profile URL to the extracted handicap text. A ``ProfileLookupError`` from
the lookup is a per-record failure and becomes the ``"Error"`` outcome; any other
exception is a session-level failure and propagates.
"""

import logging
from collections.abc import Callable
from typing import Optional, Sequence
from urllib.parse import quote

from config import BASE_URL, PROFILE_PATH, PROFILE_QUERY_PARAM
from exceptions import ProfileLookupError
from rows import InputRecord, ScrapeOutcome

logger = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[str]]
OutcomeCallback = Callable[[InputRecord, ScrapeOutcome], None]


def profile_url(identifier: str, base_url: str = BASE_URL) -> str:
    """Return the dashboard URL for a GolfLink number.

    >>> profile_url("1234567890")
    'https://www.golf.org.au/member/dashboard?golfLinkNo=1234567890'
    """
    return (
        f"{base_url.rstrip('/')}{PROFILE_PATH}"
        f"?{PROFILE_QUERY_PARAM}={quote(identifier, safe='')}"
    )


def scrape_record(
    record: InputRecord,
    lookup: Lookup,
    base_url: str = BASE_URL,
) -> ScrapeOutcome:
    """Look up one record and wrap the result in an outcome.

    Raises:
        Exception: Anything the lookup raises other than ``ProfileLookupError``.
    """
    url = profile_url(record.identifier, base_url)
    try:
        value = lookup(url)
    except ProfileLookupError as exc:
        logger.error(
            "Failed to fetch data for GolfLink number %s (row %d): %s",
            record.identifier, record.position, exc,
        )
        return ScrapeOutcome.failure(record.position)
    if value is None:
        logger.warning(
            "No handicap shown for GolfLink number %s (row %d)",
            record.identifier, record.position,
        )
    return ScrapeOutcome(position=record.position, value=value, reference=url)


def scrape_records(
    records: Sequence[InputRecord],
    lookup: Lookup,
    base_url: str = BASE_URL,
    on_outcome: Optional[OutcomeCallback] = None,
) -> list[ScrapeOutcome]:
    """Scrape every record strictly in order, one lookup at a time.

    Exactly one outcome is produced per record, with the same position and
    in the same order. There is no retry: a failed lookup is recorded as the
    ``"Error"`` outcome and the loop moves on.

    Args:
        records: Records from ``rows.read_records()``.
        lookup: Maps a profile URL to handicap text (or ``None``), raising
            ``ProfileLookupError`` when that one profile cannot be read.
        base_url: Site root used to build profile URLs.
        on_outcome: Optional callback invoked after each record.

    Returns:
        The outcomes, parallel to *records*.

    Raises:
        Exception: Any non-``ProfileLookupError`` from *lookup*, which aborts
            the whole batch.
    """
    outcomes: list[ScrapeOutcome] = []
    for index, record in enumerate(records, start=1):
        logger.debug(
            "[%d/%d] Looking up %s (row %d)",
            index, len(records), record.identifier, record.position,
        )
        outcome = scrape_record(record, lookup, base_url)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(record, outcome)

    errors = sum(1 for o in outcomes if o.failed)
    missing = sum(1 for o in outcomes if o.value is None)
    logger.info(
        "Scraped %d records: %d ok, %d errors, %d without a handicap",
        len(outcomes), len(outcomes) - errors - missing, errors, missing,
    )
    return outcomes
