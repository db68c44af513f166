"""
Purpose: Page-object and test-suite base classes.
Constraints: Re-export only; no logic here.
"""

# Imports
from .web_page import WebPage
from .web_test import WebTest

__all__ = ["WebPage", "WebTest"]
