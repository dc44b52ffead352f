"""
Selenium WebDriver factory for creating configured driver instances.
"""

import threading
from typing import Optional

from selenium import webdriver
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.options import Options
from webdriver_manager.chrome import ChromeDriverManager

from Utils.logging_config import get_logger
from roster_scraping.config import PageProfile, ROSTER_PAGE

logger = get_logger("driver_factory")

HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', {get: () => undefined});"
)

_driver_path_lock = threading.Lock()
_driver_path: Optional[str] = None


def chromedriver_path() -> str:
    """
    Path to the chromedriver binary, downloaded at most once per process.
    
    Roster pages open several browsers at once; the lock keeps them from
    downloading into the webdriver-manager cache at the same time.
    """
    global _driver_path
    
    with _driver_path_lock:
        if _driver_path is None:
            _driver_path = ChromeDriverManager().install()
            logger.info(f"Using chromedriver at {_driver_path}")
        return _driver_path


def create_driver(headless: bool = True, profile: PageProfile = ROSTER_PAGE) -> webdriver.Chrome:
    """
    Create a Chrome WebDriver configured for one page role.
    
    Args:
        headless: Whether to run browser in headless mode
        profile: Page profile supplying user agent, headers and timeouts
        
    Returns:
        Configured Chrome WebDriver
    """
    logger.info(f"Creating Chrome WebDriver (headless={headless}, profile={profile.name})")
    
    options = Options()
    
    if headless:
        options.add_argument("--headless=new")
    
    # Performance and stability options
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-setuid-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")
    options.add_argument("--disable-extensions")
    options.add_argument("--disable-default-apps")
    options.add_argument("--no-default-browser-check")
    options.add_argument("--disable-blink-features=AutomationControlled")
    options.add_argument("--window-size=1920,1080")
    
    # User agent to avoid detection
    options.add_argument(f"user-agent={profile.user_agent}")
    
    # Suppress logging, hide the automation banner
    options.add_experimental_option("excludeSwitches", ["enable-logging", "enable-automation"])
    options.add_experimental_option("useAutomationExtension", False)
    
    # Network events are read back to find the document's HTTP status
    options.set_capability("goog:loggingPrefs", {"performance": "ALL"})
    
    try:
        service = Service(chromedriver_path())
        driver = webdriver.Chrome(service=service, options=options)
        
        driver.set_page_load_timeout(profile.navigation_timeout)
        
        driver.execute_cdp_cmd(
            "Page.addScriptToEvaluateOnNewDocument",
            {"source": HIDE_WEBDRIVER_SCRIPT}
        )
        if profile.extra_headers:
            driver.execute_cdp_cmd("Network.enable", {})
            driver.execute_cdp_cmd(
                "Network.setExtraHTTPHeaders",
                {"headers": dict(profile.extra_headers)}
            )
        
        logger.info("WebDriver created successfully")
        return driver
        
    except Exception as e:
        logger.error(f"Failed to create WebDriver: {e}")
        raise


def close_driver(driver: Optional[webdriver.Chrome]) -> None:
    """
    Safely close WebDriver instance.
    
    Args:
        driver: WebDriver instance to close
    """
    if driver:
        try:
            driver.quit()
            logger.debug("WebDriver closed successfully")
        except Exception as e:
            logger.warning(f"Error closing WebDriver: {e}")
