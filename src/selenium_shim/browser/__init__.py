"""
Purpose: Public wrapper for the browser layer.
Constraints: Re-export only; no logic here.
"""

# Imports
from .driver_factory import WebBrowserType, create_web_driver
from .web_browser import Locator, UserAction, WebBrowser

__all__ = ["Locator", "UserAction", "WebBrowser", "WebBrowserType", "create_web_driver"]
