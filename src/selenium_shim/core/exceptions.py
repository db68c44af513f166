"""
Purpose: Exception types raised by the shim itself.
Constraints: Selenium exceptions are never wrapped; they propagate verbatim.
"""

from __future__ import annotations

from typing import Optional


class ShimError(Exception):
    """Base class for errors raised by selenium_shim."""


class ConfigError(ShimError):
    """Configuration values could not be loaded or validated."""


class DriverResourceError(ShimError):
    """A packaged driver resource name is invalid or cannot be read."""


class DriverCopyError(ShimError):
    """A driver binary could not be copied into the driver directory."""

    def __init__(self, source_path: str):
        self.source_path = source_path
        super().__init__(f"Attempt to copy web driver file {source_path} failed.")


class PageTitleMismatchError(ShimError):
    """The browser title does not match the page object's expected title."""

    def __init__(self, actual_title: Optional[str], expected_title: Optional[str]):
        self.actual_title = actual_title
        self.expected_title = expected_title
        super().__init__(
            f"Actual page title '{actual_title}' did not match expected page title '{expected_title}'"
        )


class ElementSearchTimeoutError(ShimError):
    """Polling ran out of time without a result and without an underlying error."""

    def __init__(self, timeout: float, description: str = ""):
        self.timeout = timeout
        self.description = description
        target = f" for {description}" if description else ""
        super().__init__(f"Timed out after {timeout:.1f}s waiting{target}")
