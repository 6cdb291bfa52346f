"""Row reconciliation between the member sheet and scrape results.

Turns the raw cell table read from Sheets into ``InputRecord`` objects and
turns ``ScrapeOutcome`` objects back into value ranges for a single batched
write. Pure transforms only; no I/O belongs here.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from config import ERROR_SENTINEL, FIRST_DATA_ROW, OUTPUT_COLUMNS

logger = logging.getLogger(__name__)

# Column indices within the read range (A..D).
COL_NAME = 0
COL_IDENTIFIER = 1
COL_PRIOR_VALUE = 2
COL_PRIOR_REFERENCE = 3


@dataclass(frozen=True)
class InputRecord:
    """One member row that has a GolfLink number."""

    position: int
    identifier: str
    display_name: str = ""
    prior_value: Optional[str] = None
    prior_reference: Optional[str] = None


@dataclass(frozen=True)
class ScrapeOutcome:
    """The scrape result for one member row.

    ``value`` is the handicap text, ``ERROR_SENTINEL`` when the lookup
    failed, or ``None`` when the profile loaded but showed no handicap.
    """

    position: int
    value: Optional[str]
    reference: str

    @classmethod
    def failure(cls, position: int) -> "ScrapeOutcome":
        return cls(position=position, value=ERROR_SENTINEL, reference="")

    @property
    def failed(self) -> bool:
        return self.value == ERROR_SENTINEL and self.reference == ""


def _cell(row: Sequence[str], index: int) -> str:
    if index < len(row) and row[index] is not None:
        return str(row[index])
    return ""


def read_records(
    table: Sequence[Sequence[str]],
    offset: int = FIRST_DATA_ROW,
) -> list[InputRecord]:
    """Convert the raw cell table into records, skipping rows with no ID.

    Rows from the Sheets API are ragged: trailing empty cells are omitted.
    Missing name and identifier cells default to ``""``; missing or empty
    prior value and URL cells default to ``None``. No error is raised for
    malformed rows.

    Args:
        table: Rows of cell text, first row being sheet row *offset*.
        offset: Sheet row number of ``table[0]``.

    Returns:
        Records in sheet order, each with ``position = index + offset``.
    """
    records: list[InputRecord] = []
    for index, row in enumerate(table):
        position = index + offset
        identifier = _cell(row, COL_IDENTIFIER)
        if not identifier:
            logger.debug("Row %d has no GolfLink number, skipping", position)
            continue
        records.append(
            InputRecord(
                position=position,
                identifier=identifier,
                display_name=_cell(row, COL_NAME),
                prior_value=_cell(row, COL_PRIOR_VALUE) or None,
                prior_reference=_cell(row, COL_PRIOR_REFERENCE) or None,
            )
        )
    logger.info(
        "Read %d member rows (%d with a GolfLink number)",
        len(table), len(records),
    )
    return records


def output_range(
    sheet_name: str,
    position: int,
    columns: tuple[str, str] = OUTPUT_COLUMNS,
) -> str:
    """Return the A1 range for the value/URL cells of one row.

    >>> output_range("Sheet1", 5)
    'Sheet1!C5:D5'
    """
    first, last = columns
    return f"{sheet_name}!{first}{position}:{last}{position}"


def build_value_ranges(
    outcomes: Sequence[ScrapeOutcome],
    sheet_name: str,
    columns: tuple[str, str] = OUTPUT_COLUMNS,
) -> list[dict]:
    """Build the ``data`` entries of a values batch update.

    One entry per outcome, in outcome order, each touching exactly the two
    output cells of that outcome's row. A ``None`` value is kept as-is and
    serialised as JSON ``null``, which Sheets treats as "leave the cell
    unchanged".

    Args:
        outcomes: Scrape results to write.
        sheet_name: Tab the results belong to.
        columns: The (value, URL) column letters.

    Returns:
        A list of ``{"range": ..., "values": [[value, url]]}`` dicts; empty
        when *outcomes* is empty.
    """
    return [
        {
            "range": output_range(sheet_name, outcome.position, columns),
            "values": [[outcome.value, outcome.reference]],
        }
        for outcome in outcomes
    ]
