"""Shared test configuration and fixtures.

No test talks to Google Sheets or launches a browser: spreadsheets, browser
contexts and pages are ``MagicMock`` objects.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from config import RunConfig


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    """A valid config that writes debug screenshots under *tmp_path*."""
    return RunConfig(
        spreadsheet_id="sheet-id-123",
        service_account_key_path=tmp_path / "service_account.json",
        debug_dir=tmp_path / "debug",
    )


@pytest.fixture
def member_table() -> list[list[str]]:
    """A ragged member table as returned by the Sheets values API."""
    return [
        ["Alice", "GA1", "10.2", "https://old/1"],
        ["Nobody"],
        ["Bob", "GA3"],
        [],
        ["", "GA5", ""],
    ]


@pytest.fixture
def mock_spreadsheet() -> MagicMock:
    spreadsheet = MagicMock()
    spreadsheet.title = "Members"
    return spreadsheet
