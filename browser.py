"""Browser session and profile lookups on golf.org.au via Playwright.

One Chromium browser and context are opened per run by
``browser_session()``; each profile lookup opens and closes its own page in
that context. All Playwright usage goes through this module.

Session failures raise ``SessionError`` (fatal). Lookup failures raise
``ProfileLookupError`` (per-record) so the scrape loop can record them and
carry on.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from playwright.sync_api import BrowserContext, Error as PlaywrightError, Page
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from config import BROWSER_ARGS, LOGIN_PROMPT, RunConfig
from exceptions import ProfileLookupError, SessionError

logger = logging.getLogger(__name__)


@contextmanager
def browser_session(config: RunConfig) -> Iterator[BrowserContext]:
    """Launch Chromium and yield a fresh browser context.

    The browser is closed on exit whether the body succeeds, raises, or is
    interrupted.

    Args:
        config: Supplies the headless flag and default timeout.

    Yields:
        A ``BrowserContext`` shared by the login page and every lookup.

    Raises:
        SessionError: If Playwright or the browser cannot be started.
    """
    with sync_playwright() as pw:
        try:
            browser = pw.chromium.launch(headless=config.headless, args=BROWSER_ARGS)
        except PlaywrightError as exc:
            raise SessionError(f"Failed to launch browser: {exc}") from exc
        logger.info("Launched Chromium (headless=%s)", config.headless)
        try:
            context = browser.new_context()
            context.set_default_timeout(config.lookup_timeout_ms)
            yield context
        finally:
            browser.close()
            logger.info("Browser closed")


def open_login_page(context: BrowserContext, config: RunConfig) -> Page:
    """Open the login page in a new tab and leave it for the operator.

    Raises:
        SessionError: If the login page cannot be loaded.
    """
    logger.info("Navigating to login page %s", config.login_url)
    page = context.new_page()
    try:
        page.goto(config.login_url, wait_until="domcontentloaded")
    except PlaywrightError as exc:
        raise SessionError(f"Failed to open login page {config.login_url}: {exc}") from exc
    return page


def wait_for_operator_login(prompt: Callable[[str], str] = input) -> None:
    """Block until the operator confirms they have logged in.

    There is no timeout; the run can only be cancelled by terminating the
    process.

    Args:
        prompt: Reads one line from the operator. Defaults to ``input``.

    Raises:
        SessionError: If the console is closed before confirmation.
    """
    try:
        prompt(LOGIN_PROMPT)
    except EOFError as exc:
        raise SessionError("Console closed before login was confirmed") from exc
    logger.info("Operator confirmed login")


def save_debug_screenshot(page: Page, debug_dir: Path, label: str) -> Optional[Path]:
    """Save a timestamped full-page screenshot, best effort.

    Args:
        page: The page to capture.
        debug_dir: Directory to write into; created if missing.
        label: Short label included in the filename.

    Returns:
        The path written, or ``None`` if the directory could not be created
        or the page could not be captured.
    """
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    safe_label = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in label)
    filepath = debug_dir / f"{timestamp}_{safe_label}.png"
    try:
        debug_dir.mkdir(parents=True, exist_ok=True)
        page.screenshot(path=str(filepath), full_page=True)
    except (PlaywrightError, OSError) as exc:
        logger.warning("Could not save debug screenshot %s: %s", filepath, exc)
        return None
    logger.info("Debug screenshot saved: %s", filepath)
    return filepath


def _close_page(page: Page) -> None:
    try:
        page.close()
    except PlaywrightError as exc:
        logger.warning("Could not close page %s: %s", page.url, exc)


def lookup_handicap(context: BrowserContext, url: str, config: RunConfig) -> Optional[str]:
    """Open a profile page and read the handicap text from it.

    Waits for the handicap container to appear, then reads the detail
    element inside it. The page is always closed before returning.

    Args:
        context: The logged-in browser context.
        url: The member's dashboard URL.
        config: Supplies selectors, timeout and debug directory.

    Returns:
        The stripped handicap text, or ``None`` if the element is empty.

    Raises:
        ProfileLookupError: If the tab cannot be opened, navigation fails,
            or the handicap container does not appear within
            ``config.lookup_timeout_ms``.
    """
    page: Optional[Page] = None
    try:
        page = context.new_page()
        page.goto(url, wait_until="domcontentloaded", timeout=config.lookup_timeout_ms)
        page.wait_for_selector(config.container_selector, timeout=config.lookup_timeout_ms)
        text = page.locator(config.value_selector).first.text_content(
            timeout=config.lookup_timeout_ms
        )
    except PlaywrightTimeoutError as exc:
        if page is not None:
            save_debug_screenshot(page, config.debug_dir, "lookup_timeout")
        raise ProfileLookupError(url, f"timed out: {exc}") from exc
    except PlaywrightError as exc:
        if page is not None:
            save_debug_screenshot(page, config.debug_dir, "lookup_error")
        raise ProfileLookupError(url, str(exc)) from exc
    finally:
        if page is not None:
            _close_page(page)

    value = (text or "").strip()
    logger.debug("Handicap at %s: %r", url, value)
    return value or None


def make_lookup(context: BrowserContext, config: RunConfig) -> Callable[[str], Optional[str]]:
    """Bind a context and config into the ``(url) -> value`` lookup callable."""

    def lookup(url: str) -> Optional[str]:
        return lookup_handicap(context, url, config)

    return lookup
