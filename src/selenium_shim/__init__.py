"""Retrying convenience layer over Selenium WebDriver."""

from selenium_shim.browser import Locator, UserAction, WebBrowser, WebBrowserType, create_web_driver
from selenium_shim.pages import WebPage, WebTest

__version__ = "0.1.0"

__all__ = [
    "Locator",
    "UserAction",
    "WebBrowser",
    "WebBrowserType",
    "WebPage",
    "WebTest",
    "create_web_driver",
]
