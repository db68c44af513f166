"""
Purpose: Base class for page objects with implicit title validation.
Constraints: Navigation and title checks only; page-specific locators live in subclasses.
"""

from __future__ import annotations

import logging
from typing import Optional

from selenium_shim.browser.web_browser import WebBrowser
from selenium_shim.core.exceptions import PageTitleMismatchError, ShimError

logger = logging.getLogger(__name__)


class WebPage:
    """
    A page reachable at ``page_url`` whose browser title should equal ``title``.

    Subclasses set ``title`` for the implicit validation in load() and add
    their own locators and actions on top of ``browser``.
    """

    title: Optional[str] = None

    def __init__(self, browser: Optional[WebBrowser], page_url: str = "", title: Optional[str] = None):
        self.browser = browser
        self.page_url = page_url
        if title is not None:
            self.title = title

    def load(self, validate_title: bool = True) -> None:
        """Navigate to page_url; optionally verify the title before recording it."""
        if self.browser is None:
            raise ShimError("WebBrowser object is null.")

        self.browser.start(self.page_url)
        if validate_title:
            self.verify_page_title()

        self.title = self.browser.web_driver.title

    def close(self) -> None:
        self.browser.close()

    def validate_page(self) -> None:
        self.verify_page_title()

    def verify_page_title(self) -> None:
        actual_title = self.browser.web_driver.title
        if not _titles_match(self.title, actual_title):
            logger.warning("Title mismatch on %s: expected %r, got %r", self.page_url, self.title, actual_title)
            raise PageTitleMismatchError(actual_title, self.title)


def _titles_match(expected: Optional[str], actual: Optional[str]) -> bool:
    if expected is None or actual is None:
        return expected is None and actual is None
    return expected.casefold() == actual.casefold()
