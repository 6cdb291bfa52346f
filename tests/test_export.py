"""Tests for export.py: Google Sheets reads and the batched write."""

from dataclasses import replace
from unittest.mock import MagicMock, patch

import gspread
import pytest

from export import fetch_table, get_sheets_client, open_spreadsheet, write_outcomes
from rows import ScrapeOutcome


# ---------------------------------------------------------------------------
# get_sheets_client / open_spreadsheet
# ---------------------------------------------------------------------------

class TestGetSheetsClient:
    """Tests for service-account authentication."""

    def test_missing_key_file(self, tmp_path):
        """A missing key file is fatal before any network access."""
        with pytest.raises(FileNotFoundError, match="Service account key not found"):
            get_sheets_client(tmp_path / "nope.json")

    @patch("export.gspread.authorize")
    @patch("export.Credentials.from_service_account_file")
    def test_authorizes_with_spreadsheets_scope(
        self, mock_from_file: MagicMock, mock_authorize: MagicMock, tmp_path,
    ) -> None:
        key = tmp_path / "sa.json"
        key.write_text("{}")

        client = get_sheets_client(key)

        mock_from_file.assert_called_once_with(
            str(key), scopes=["https://www.googleapis.com/auth/spreadsheets"]
        )
        mock_authorize.assert_called_once_with(mock_from_file.return_value)
        assert client is mock_authorize.return_value

    def test_open_spreadsheet_by_key(self, mock_spreadsheet):
        client = MagicMock()
        client.open_by_key.return_value = mock_spreadsheet

        assert open_spreadsheet(client, "abc") is mock_spreadsheet
        client.open_by_key.assert_called_once_with("abc")


# ---------------------------------------------------------------------------
# fetch_table
# ---------------------------------------------------------------------------

class TestFetchTable:
    """Tests for reading the member table."""

    def test_returns_values(self, mock_spreadsheet):
        mock_spreadsheet.values_get.return_value = {
            "range": "Sheet1!A2:D3",
            "values": [["Alice", "GA1"], ["Bob", "GA3", "4.1"]],
        }

        rows = fetch_table(mock_spreadsheet, "Sheet1!A2:D")

        mock_spreadsheet.values_get.assert_called_once_with("Sheet1!A2:D")
        assert rows == [["Alice", "GA1"], ["Bob", "GA3", "4.1"]]

    def test_empty_range(self, mock_spreadsheet):
        """The API omits 'values' entirely for an empty range."""
        mock_spreadsheet.values_get.return_value = {"range": "Sheet1!A2:D1000"}

        assert fetch_table(mock_spreadsheet, "Sheet1!A2:D") == []

    def test_api_error_propagates(self, mock_spreadsheet):
        mock_spreadsheet.values_get.side_effect = gspread.exceptions.GSpreadException("denied")

        with pytest.raises(gspread.exceptions.GSpreadException):
            fetch_table(mock_spreadsheet, "Sheet1!A2:D")


# ---------------------------------------------------------------------------
# write_outcomes
# ---------------------------------------------------------------------------

class TestWriteOutcomes:
    """Tests for the single batched write."""

    def test_single_user_entered_request(self, mock_spreadsheet, run_config):
        """All outcomes go out in one USER_ENTERED batch update."""
        outcomes = [
            ScrapeOutcome(position=2, value="12.4", reference="https://a"),
            ScrapeOutcome.failure(5),
        ]

        written = write_outcomes(mock_spreadsheet, outcomes, run_config)

        assert written == 2
        mock_spreadsheet.values_batch_update.assert_called_once_with(
            body={
                "valueInputOption": "USER_ENTERED",
                "data": [
                    {"range": "Sheet1!C2:D2", "values": [["12.4", "https://a"]]},
                    {"range": "Sheet1!C5:D5", "values": [["Error", ""]]},
                ],
            }
        )

    def test_empty_outcomes_send_nothing(self, mock_spreadsheet, run_config):
        assert write_outcomes(mock_spreadsheet, [], run_config) == 0
        mock_spreadsheet.values_batch_update.assert_not_called()

    def test_dry_run_sends_nothing(self, mock_spreadsheet, run_config):
        config = replace(run_config, dry_run=True)
        outcomes = [ScrapeOutcome(position=2, value="1.0", reference="https://a")]

        assert write_outcomes(mock_spreadsheet, outcomes, config) == 0
        mock_spreadsheet.values_batch_update.assert_not_called()

    def test_uses_configured_sheet_and_columns(self, mock_spreadsheet, run_config):
        config = replace(run_config, sheet_name="Members", output_columns=("E", "F"))

        write_outcomes(mock_spreadsheet, [ScrapeOutcome.failure(3)], config)

        body = mock_spreadsheet.values_batch_update.call_args.kwargs["body"]
        assert body["data"][0]["range"] == "Members!E3:F3"

    def test_write_failure_propagates(self, mock_spreadsheet, run_config):
        """A rejected batch is fatal; nothing is retried."""
        mock_spreadsheet.values_batch_update.side_effect = (
            gspread.exceptions.GSpreadException("quota")
        )

        with pytest.raises(gspread.exceptions.GSpreadException, match="quota"):
            write_outcomes(mock_spreadsheet, [ScrapeOutcome.failure(2)], run_config)
        assert mock_spreadsheet.values_batch_update.call_count == 1
