"""
Document fetcher: one browser session per attempt, retried with backoff.
"""

import json
import random
import time
from typing import Any, Callable, Optional

from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC

from Exceptions.scraper_errors import FetchExhausted, NavigationError
from Utils.logging_config import get_logger
from Utils.retry import retry_request
from roster_scraping.config import PageProfile, Settings, get_settings
from roster_scraping.driver_factory import create_driver, close_driver

logger = get_logger("fetcher")


def document_status(driver) -> Optional[int]:
    """
    Read the HTTP status of the last document response from the
    browser's performance log. None when the log has no such entry.
    """
    try:
        entries = driver.get_log("performance")
    except WebDriverException as e:
        logger.debug(f"Performance log unavailable: {e}")
        return None

    status = None
    for entry in entries:
        try:
            message = json.loads(entry["message"])["message"]
        except (KeyError, TypeError, ValueError):
            continue

        if message.get("method") != "Network.responseReceived":
            continue

        params = message.get("params", {})
        if params.get("type") == "Document":
            status = params.get("response", {}).get("status", status)

    return int(status) if status is not None else None


def _fetch_once(
    url: str,
    profile: PageProfile,
    extract: Optional[Callable[[str], Any]],
    settings: Settings,
    headless: bool,
    driver_factory: Callable,
    sleep: Callable[[float], None],
):
    driver = None
    try:
        driver = driver_factory(headless=headless, profile=profile)

        sleep(random.uniform(
            settings.PRE_NAVIGATION_DELAY_MIN,
            settings.PRE_NAVIGATION_DELAY_MAX
        ))

        logger.info(f"Navigating to {url}...")
        try:
            driver.get(url)
        except TimeoutException as e:
            raise NavigationError(
                f"Timed out after {profile.navigation_timeout}s navigating to {url}"
            ) from e
        except WebDriverException as e:
            raise NavigationError(f"Navigation to {url} failed: {e.msg}") from e

        status = document_status(driver)
        if status is not None and not 200 <= status < 300:
            raise NavigationError(f"HTTP {status} for {url}")

        try:
            WebDriverWait(driver, profile.navigation_timeout).until(
                EC.presence_of_element_located((By.CSS_SELECTOR, profile.ready_selector))
            )
        except TimeoutException as e:
            raise NavigationError(
                f"'{profile.ready_selector}' did not appear on {url} "
                f"within {profile.navigation_timeout}s"
            ) from e

        document = driver.page_source

        if extract is not None:
            return extract(document)
        return document

    finally:
        close_driver(driver)


def fetch_document(
    url: str,
    profile: PageProfile,
    extract: Optional[Callable[[str], Any]] = None,
    settings: Settings = None,
    headless: bool = None,
    driver_factory: Callable = create_driver,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Fetch the rendered document at `url`.

    Args:
        url: Page to load
        profile: Page profile (timeout, readiness selector, retry policy)
        extract: Optional parser run inside each attempt; anything it
            raises counts as a failed attempt
        settings: Scraper settings (defaults to environment settings)
        headless: Override settings.HEADLESS
        driver_factory: Callable building a WebDriver
        sleep: Sleep function (pre-navigation delay and backoff)

    Returns:
        The page source, or `extract(page_source)` when given

    Raises:
        FetchExhausted: every attempt failed
    """
    settings = settings or get_settings()
    if headless is None:
        headless = settings.HEADLESS

    def op():
        return _fetch_once(url, profile, extract, settings, headless, driver_factory, sleep)

    try:
        return retry_request(
            op,
            profile.retry,
            description=url,
            sleep=sleep,
        )
    except Exception as e:
        raise FetchExhausted(url, profile.retry.max_attempts) from e
