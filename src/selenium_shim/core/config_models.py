"""
Purpose: Typed configuration models with validation.
Constraints: Pure models; no file I/O or side effects.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_BROWSERS = ("ie", "chrome", "firefox")


class BrowserSettings(BaseModel):
    model_config = ConfigDict(extra="allow")
    browser: str = "firefox"
    headless: bool = False
    # Seconds; applies to find_element and every element action.
    element_search_timeout: float = Field(default=10.0, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    driver_dir: str = ""
    use_driver_manager: bool = True
    kill_delay: float = Field(default=1.0, ge=0)

    @field_validator("browser")
    @classmethod
    def _known_browser(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in SUPPORTED_BROWSERS:
            raise ValueError(f"browser must be one of {', '.join(SUPPORTED_BROWSERS)}")
        return normalized


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="allow")
    log_level: str = "INFO"
    console_log_level: str = "INFO"
    log_dir: str = "logs"
    enable_json_logging: bool = True
    metrics_enabled: bool = True
