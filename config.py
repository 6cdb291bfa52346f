"""Central configuration for the GolfLink handicap sync.

The module-level constants are the single source of truth for default values:
sheet layout, URLs, selectors, and timeouts. Never hardcode these values
elsewhere. A run never reads the constants directly; it receives a
``RunConfig`` built by ``load_config()``, which layers environment variables
(optionally from a ``.env`` file) and explicit overrides on top of them.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final, Optional

from dotenv import load_dotenv

from exceptions import ConfigError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent
DEBUG_DIR: Final[Path] = PROJECT_ROOT / "debug"
ENV_FILE: Final[Path] = PROJECT_ROOT / ".env"

# ---------------------------------------------------------------------------
# Google Sheets: service account & spreadsheet
# ---------------------------------------------------------------------------

# Path to the service account JSON key file. Never commit this file.
SERVICE_ACCOUNT_KEY_PATH: Final[Path] = PROJECT_ROOT / "service_account.json"

SHEETS_SCOPES: Final[list[str]] = ["https://www.googleapis.com/auth/spreadsheets"]

# The Google Spreadsheet ID (from the URL). Set GOLFLINK_SPREADSHEET_ID.
SPREADSHEET_ID: Final[str] = ""

# ---------------------------------------------------------------------------
# Google Sheets: member tab layout
# ---------------------------------------------------------------------------
# A: Name, B: GolfLink number, C: Handicap, D: Profile URL. Row 1 is a header.

SHEET_NAME: Final[str] = "Sheet1"
FIRST_DATA_ROW: Final[int] = 2
READ_FIRST_COL: Final[str] = "A"
READ_LAST_COL: Final[str] = "D"
OUTPUT_COLUMNS: Final[tuple[str, str]] = ("C", "D")

# Sheets applies its own type coercion, so "12.4" lands as a number.
VALUE_INPUT_OPTION: Final[str] = "USER_ENTERED"

# ---------------------------------------------------------------------------
# Scrape results
# ---------------------------------------------------------------------------

ERROR_SENTINEL: Final[str] = "Error"

# ---------------------------------------------------------------------------
# Golf Australia website
# ---------------------------------------------------------------------------

BASE_URL: Final[str] = "https://www.golf.org.au"
LOGIN_URL: Final[str] = f"{BASE_URL}/login"
PROFILE_PATH: Final[str] = "/member/dashboard"
PROFILE_QUERY_PARAM: Final[str] = "golfLinkNo"

HANDICAP_CONTAINER_SELECTOR: Final[str] = ".Dashboardstyles__Handicap-l2htr4-5"
HANDICAP_VALUE_SELECTOR: Final[str] = (
    f"{HANDICAP_CONTAINER_SELECTOR} .Dashboardstyles__Detail-l2htr4-11"
)

# ---------------------------------------------------------------------------
# Browser
# ---------------------------------------------------------------------------

# The operator logs in by hand, so the browser is visible unless overridden.
HEADLESS: Final[bool] = False
BROWSER_ARGS: Final[list[str]] = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

# Navigation and selector waits, in milliseconds (Playwright's own default).
LOOKUP_TIMEOUT_MS: Final[float] = 30_000

LOGIN_PROMPT: Final[str] = (
    "Please log in manually and press ENTER in the terminal once logged in. "
)

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_SPREADSHEET_ID: Final[str] = "GOLFLINK_SPREADSHEET_ID"
ENV_SHEET_NAME: Final[str] = "GOLFLINK_SHEET_NAME"
ENV_SERVICE_ACCOUNT_KEY: Final[str] = "GOLFLINK_SERVICE_ACCOUNT_KEY"
ENV_HEADLESS: Final[str] = "GOLFLINK_HEADLESS"


@dataclass(frozen=True)
class RunConfig:
    """All values a single sync run depends on.

    Built once by ``load_config()`` and passed down explicitly, so the
    reconciliation logic never touches module globals or the environment.
    """

    spreadsheet_id: str = SPREADSHEET_ID
    sheet_name: str = SHEET_NAME
    service_account_key_path: Path = SERVICE_ACCOUNT_KEY_PATH
    first_data_row: int = FIRST_DATA_ROW
    output_columns: tuple[str, str] = OUTPUT_COLUMNS
    base_url: str = BASE_URL
    login_url: str = LOGIN_URL
    container_selector: str = HANDICAP_CONTAINER_SELECTOR
    value_selector: str = HANDICAP_VALUE_SELECTOR
    headless: bool = HEADLESS
    lookup_timeout_ms: float = LOOKUP_TIMEOUT_MS
    debug_dir: Path = DEBUG_DIR
    dry_run: bool = False

    @property
    def read_range(self) -> str:
        """A1 range covering every data row, e.g. ``Sheet1!A2:D``."""
        return (
            f"{self.sheet_name}!{READ_FIRST_COL}{self.first_data_row}"
            f":{READ_LAST_COL}"
        )

    def validate(self) -> None:
        """Reject configurations that cannot possibly run.

        Raises:
            ConfigError: If the spreadsheet ID or sheet name is empty, or the
                first data row is not a positive row number.
        """
        if not self.spreadsheet_id.strip():
            raise ConfigError(
                "spreadsheet_id",
                f"no spreadsheet ID configured; set {ENV_SPREADSHEET_ID} "
                f"or pass --spreadsheet-id",
            )
        if not self.sheet_name.strip():
            raise ConfigError("sheet_name", "sheet name must not be empty")
        if self.first_data_row < 1:
            raise ConfigError(
                "first_data_row",
                f"expected a row number >= 1, got {self.first_data_row}",
            )


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(env_file: Optional[Path] = ENV_FILE, **overrides) -> RunConfig:
    """Build the run configuration.

    Precedence, lowest to highest: module constants, environment variables
    (a ``.env`` file is loaded first without clobbering variables already
    set), then keyword *overrides*. Overrides whose value is ``None`` are
    ignored so CLI flags that were not given fall through.

    Args:
        env_file: Path to an optional ``.env`` file. ``None`` skips loading.
        **overrides: ``RunConfig`` field values.

    Returns:
        A validated ``RunConfig``.

    Raises:
        ConfigError: If the resulting configuration is invalid.
        TypeError: If an override names an unknown field.
    """
    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)

    config = RunConfig()

    from_env: dict[str, object] = {}
    if os.getenv(ENV_SPREADSHEET_ID):
        from_env["spreadsheet_id"] = os.environ[ENV_SPREADSHEET_ID]
    if os.getenv(ENV_SHEET_NAME):
        from_env["sheet_name"] = os.environ[ENV_SHEET_NAME]
    if os.getenv(ENV_SERVICE_ACCOUNT_KEY):
        from_env["service_account_key_path"] = Path(
            os.environ[ENV_SERVICE_ACCOUNT_KEY]
        ).expanduser()
    if os.getenv(ENV_HEADLESS):
        from_env["headless"] = _env_flag(os.environ[ENV_HEADLESS])

    config = replace(config, **from_env)
    config = replace(
        config, **{k: v for k, v in overrides.items() if v is not None}
    )
    config.validate()
    return config
