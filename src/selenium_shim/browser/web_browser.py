"""
Purpose: WebBrowser wrapper adding implicit retry-until-timeout to element actions.
Constraints: All DOM and browser work is delegated to the Selenium driver.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Union

from selenium.webdriver.common.keys import Keys
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from selenium_shim.browser.driver_factory import DEFAULT_BROWSER_TYPE, WebBrowserType, create_web_driver
from selenium_shim.core.config import get_browser_settings
from selenium_shim.core.config_models import BrowserSettings
from selenium_shim.core.logging import UnifiedLogger
from selenium_shim.core.utils.retry import wait_until_timeout

Locator = Tuple[str, str]


class UserAction(Enum):
    CLICK = "click"
    CLEAR = "clear"
    TYPE_TEXT = "type_text"


class WebBrowser:
    """
    Selenium session wrapper whose element operations poll until they succeed
    or ``element_search_timeout`` seconds have passed.

    ``element_search_timeout`` bounds find_element and every element action.
    ``retry_delay`` is the pause between failed attempts, so a page that is
    still rendering does not spin the CPU.
    """

    def __init__(
        self,
        browser_type: Union[WebBrowserType, str] = DEFAULT_BROWSER_TYPE,
        web_driver: Optional[WebDriver] = None,
        resource_package: Optional[str] = None,
        resource_name: str = "",
        settings: Optional[BrowserSettings] = None,
    ):
        self._activity = UnifiedLogger(__name__)
        self.logger = self._activity.get_logger()
        self.settings = settings or get_browser_settings()
        self.browser_type = WebBrowserType.parse(browser_type)
        self.element_search_timeout: float = self.settings.element_search_timeout
        self.retry_delay: float = self.settings.retry_delay

        if web_driver is None:
            with self._activity.time_operation(f"start_{self.browser_type.value}_driver"):
                web_driver = create_web_driver(
                    self.browser_type,
                    resource_package=resource_package,
                    resource_name=resource_name,
                    settings=self.settings,
                )
        self.web_driver = web_driver

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.quit()
        return False

    def start(self, url: str = "") -> None:
        """Navigate to ``url``; a blank url leaves the browser where it is."""
        if url and url.strip():
            self._activity.log_activity("navigate", {"url": url}, level="DEBUG")
            with self._activity.time_operation("navigate"):
                self.web_driver.get(url)

    def execute_action(
        self,
        locator: Locator,
        action: Union[UserAction, str],
        include_return_key_press: bool = False,
    ) -> WebElement:
        """Click or clear for a UserAction; type the text when given a string."""
        if isinstance(action, str):
            return self.send_keys(locator, action, include_return_key_press)
        if action is UserAction.CLICK:
            return self.click_element(locator)
        if action is UserAction.CLEAR:
            return self.clear_element(locator)
        if action is UserAction.TYPE_TEXT:
            raise ValueError("UserAction.TYPE_TEXT needs text; pass the text to type instead")
        raise TypeError(f"Unsupported action: {action!r}")

    def send_keys(self, locator: Locator, text: str, include_return_key_press: bool = False) -> WebElement:
        element = self.find_element(locator)
        keys = text + (Keys.RETURN if include_return_key_press else "")

        def _send(target: WebElement) -> WebElement:
            target.send_keys(keys)
            return target

        self._activity.log_activity("send_keys", {"locator": locator}, level="DEBUG")
        return self._wait(_send, element, f"send_keys {locator}")

    def click_element(self, locator: Locator) -> WebElement:
        element = self.find_element(locator)

        def _click(target: WebElement) -> WebElement:
            target.click()
            return target

        self._activity.log_activity("click", {"locator": locator}, level="DEBUG")
        return self._wait(_click, element, f"click {locator}")

    def clear_element(self, locator: Locator) -> WebElement:
        element = self.find_element(locator)

        def _clear(target: WebElement) -> WebElement:
            target.clear()
            return target

        self._activity.log_activity("clear", {"locator": locator}, level="DEBUG")
        return self._wait(_clear, element, f"clear {locator}")

    def find_element(self, locator: Locator) -> WebElement:
        """Selenium find_element, retried while the page is still rendering."""
        return self._wait(lambda loc: self.web_driver.find_element(*loc), locator, f"find {locator}")

    def element_is_visible(self, locator: Locator, override_timeout: Optional[float] = None) -> bool:
        """
        True when the element is found and displayed.

        For negative checks pass a short ``override_timeout`` so a missing
        element does not cost the full search timeout.
        """
        previous_timeout = self.element_search_timeout
        if override_timeout is not None:
            self.element_search_timeout = override_timeout
        try:
            element = self.find_element(locator)
            return element is not None and element.is_displayed()
        except Exception as exc:
            self.logger.debug("Element %s not visible: %s", locator, exc)
            return False
        finally:
            self.element_search_timeout = previous_timeout

    def text_is_visible(
        self,
        locator: Locator,
        expected_text: str,
        override_timeout: Optional[float] = None,
    ) -> bool:
        """True when the element's text equals ``expected_text``, ignoring case."""
        timeout = self.element_search_timeout if override_timeout is None else override_timeout
        if not self.element_is_visible(locator, timeout):
            return False

        previous_timeout = self.element_search_timeout
        self.element_search_timeout = timeout
        expected = (expected_text or "").casefold()
        deadline = time.monotonic() + timeout
        try:
            while True:
                element = self.find_element(locator)
                try:
                    if (element.text or "").casefold() == expected:
                        return True
                except Exception as exc:
                    self.logger.debug("Reading text of %s failed: %s", locator, exc)
                if time.monotonic() >= deadline:
                    return False
                time.sleep(self.retry_delay)
        except Exception as exc:
            self.logger.debug("Text check on %s failed: %s", locator, exc)
            return False
        finally:
            self.element_search_timeout = previous_timeout

    def get_user_input(
        self,
        prompt: str = "SeleniumShim: Get User input",
        title: str = "SeleniumShim",
        default_response: str = "",
    ) -> str:
        """Ask the operator for a value on the console (e.g. a one-time code)."""
        suffix = f" [{default_response}]" if default_response else ""
        response = input(f"{title} - {prompt}{suffix}: ")
        return response or default_response

    def close(self) -> None:
        self.web_driver.close()

    def quit(self) -> None:
        try:
            self.web_driver.quit()
        except Exception as exc:
            self.logger.warning("Failed to quit driver: %s", exc)
        try:
            self._activity.log_metrics_snapshot()
        except OSError as exc:
            self.logger.warning("Failed to write metrics snapshot: %s", exc)

    def _wait(self, func: Callable[[Any], Any], arg: Any, description: str) -> Any:
        return wait_until_timeout(
            func,
            arg,
            timeout=self.element_search_timeout,
            retry_delay=self.retry_delay,
            on_retry=self._log_retry,
            description=description,
        )

    def _log_retry(self, attempt: int, exc: Optional[Exception]) -> None:
        self.logger.debug("Attempt %s failed: %s", attempt, exc if exc else "no result")
