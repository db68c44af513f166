"""
Purpose: Create Selenium WebDriver instances per browser type.
Constraints: Driver launch only; element interaction lives in WebBrowser.
"""

# Imports
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService
from selenium.webdriver.ie.options import Options as IeOptions
from selenium.webdriver.ie.service import Service as IeService
from selenium.webdriver.remote.webdriver import WebDriver

from selenium_shim.browser.driver_files import extract_driver_from_resource
from selenium_shim.core.config import get_browser_settings
from selenium_shim.core.config_models import BrowserSettings

logger = logging.getLogger(__name__)


class WebBrowserType(str, Enum):
    IE = "ie"
    CHROME = "chrome"
    FIREFOX = "firefox"

    @classmethod
    def parse(cls, value) -> "WebBrowserType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            names = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown browser type {value!r}; expected one of {names}") from None


DEFAULT_BROWSER_TYPE = WebBrowserType.FIREFOX


def _resolve_with_driver_manager(browser_type: WebBrowserType) -> str:
    """Download (or reuse a cached) driver binary through webdriver-manager."""
    if browser_type is WebBrowserType.CHROME:
        from webdriver_manager.chrome import ChromeDriverManager
        return ChromeDriverManager().install()
    if browser_type is WebBrowserType.FIREFOX:
        from webdriver_manager.firefox import GeckoDriverManager
        return GeckoDriverManager().install()
    from webdriver_manager.microsoft import IEDriverManager
    return IEDriverManager().install()


def _create_chrome_driver(executable_path: Optional[str], settings: BrowserSettings) -> WebDriver:
    options = ChromeOptions()
    if settings.headless:
        options.add_argument("--headless=new")
    options.add_argument("--disable-dev-shm-usage")
    if executable_path:
        return webdriver.Chrome(service=ChromeService(executable_path=executable_path), options=options)
    return webdriver.Chrome(options=options)


def _create_firefox_driver(executable_path: Optional[str], settings: BrowserSettings) -> WebDriver:
    options = FirefoxOptions()
    if settings.headless:
        options.add_argument("-headless")
    if executable_path:
        return webdriver.Firefox(service=FirefoxService(executable_path=executable_path), options=options)
    return webdriver.Firefox(options=options)


def _create_ie_driver(executable_path: Optional[str], settings: BrowserSettings) -> WebDriver:
    options = IeOptions()
    if executable_path:
        return webdriver.Ie(service=IeService(executable_path=executable_path), options=options)
    return webdriver.Ie(options=options)


_DRIVER_CREATORS: Dict[WebBrowserType, Callable[[Optional[str], BrowserSettings], WebDriver]] = {
    WebBrowserType.CHROME: _create_chrome_driver,
    WebBrowserType.FIREFOX: _create_firefox_driver,
    WebBrowserType.IE: _create_ie_driver,
}


# Public API
def create_web_driver(
    browser_type=DEFAULT_BROWSER_TYPE,
    resource_package: Optional[str] = None,
    resource_name: str = "",
    settings: Optional[BrowserSettings] = None,
) -> WebDriver:
    """
    Start a browser session for ``browser_type``.

    Driver binary resolution order:
      1. non-Firefox with ``resource_name``: extract it from ``resource_package``
      2. ``settings.use_driver_manager``: webdriver-manager download/cache
      3. Selenium's own driver lookup
    """
    browser_type = WebBrowserType.parse(browser_type)
    settings = settings or get_browser_settings()

    executable_path: Optional[str] = None
    if browser_type is not WebBrowserType.FIREFOX and resource_name:
        if not resource_package:
            raise ValueError("resource_package is required when resource_name is given")
        destination = Path(settings.driver_dir) if settings.driver_dir else None
        executable_path = str(extract_driver_from_resource(resource_package, resource_name, destination))
    elif settings.use_driver_manager:
        executable_path = _resolve_with_driver_manager(browser_type)

    logger.info(
        "Starting %s driver (executable=%s, headless=%s)",
        browser_type.value,
        executable_path or "auto",
        settings.headless,
    )
    return _DRIVER_CREATORS[browser_type](executable_path, settings)
