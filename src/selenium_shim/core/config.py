"""
Purpose: Load environment and JSON configuration for browser sessions.
Constraints: Pure config I/O only; no browser or process side effects.
"""

# Imports
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
from pydantic import ValidationError

from selenium_shim.core.config_models import BrowserSettings, LoggingSettings
from selenium_shim.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

_TRUTHY = ("true", "1", "yes", "y", "on")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


# Public API
class ConfigManager:
    """Browser and logging configuration from env files, env vars and settings.json"""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.cwd() / "config"
        self.browser_settings: Dict[str, Any] = {}
        self.logging_settings: Dict[str, Any] = {}
        self.loaded_env_file: Optional[Path] = None

    def load_all(self):
        """Load all configurations"""
        self.load_env()
        self.load_settings()
        return self

    def load_env(self):
        """Load env files, then map environment variables onto the settings models"""
        env_files = [
            self.config_dir / "shim.env",
            Path.cwd() / ".env",
            Path.home() / ".selenium_shim.env",
        ]

        for env_file in env_files:
            if env_file.exists():
                load_dotenv(env_file)
                self.loaded_env_file = env_file
                break

        if self.loaded_env_file:
            logger.debug("Loaded environment from: %s", self.loaded_env_file)
        else:
            logger.debug("No .env file found")

        defaults = BrowserSettings()
        try:
            self.browser_settings = BrowserSettings(
                browser=os.getenv("BROWSER_TYPE", defaults.browser),
                headless=_env_flag("SELENIUM_HEADLESS", "false"),
                element_search_timeout=float(
                    os.getenv("SHIM_ELEMENT_SEARCH_TIMEOUT", str(defaults.element_search_timeout))
                ),
                retry_delay=float(os.getenv("SHIM_RETRY_DELAY", str(defaults.retry_delay))),
                driver_dir=os.getenv("SHIM_DRIVER_DIR", defaults.driver_dir),
                use_driver_manager=_env_flag("SHIM_USE_DRIVER_MANAGER", "1"),
                kill_delay=float(os.getenv("SHIM_KILL_DELAY", str(defaults.kill_delay))),
            ).model_dump()
        except (ValidationError, ValueError) as exc:
            raise ConfigError(f"Invalid browser settings in environment: {exc}") from exc

        self.load_logging_env()
        return self

    def load_logging_env(self):
        """Map logging env vars only; no env files, no browser settings"""
        self.logging_settings = LoggingSettings(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            console_log_level=os.getenv("CONSOLE_LOG_LEVEL", "INFO").upper(),
            log_dir=os.getenv("SHIM_LOG_DIR", "logs"),
            enable_json_logging=_env_flag("ENABLE_JSON_LOGGING", "1"),
            metrics_enabled=_env_flag("METRICS_ENABLED", "1"),
        ).model_dump()
        return self

    def load_settings(self):
        """Overlay the "browser" and "logging" sections of settings.json"""
        settings_file = self.config_dir / "settings.json"
        if not settings_file.exists():
            logger.debug("No settings.json found in %s, using environment/defaults", self.config_dir)
            return self

        try:
            with open(settings_file, "r", encoding="utf-8") as f:
                raw = json.load(f) or {}
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Error reading {settings_file}: {exc}") from exc

        try:
            merged = {**self.browser_settings, **(raw.get("browser", {}) or {})}
            self.browser_settings = BrowserSettings(**merged).model_dump()
            merged = {**self.logging_settings, **(raw.get("logging", {}) or {})}
            self.logging_settings = LoggingSettings(**merged).model_dump()
        except ValidationError as exc:
            raise ConfigError(f"Invalid {settings_file}: {exc}") from exc

        return self

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with dot notation ("browser.headless")"""
        if "." in key:
            section, name = key.split(".", 1)
            if section == "browser":
                return self.browser_settings.get(name, default)
            if section == "logging":
                return self.logging_settings.get(name, default)
            return default
        if key in self.browser_settings:
            return self.browser_settings[key]
        return self.logging_settings.get(key, default)

    def print_summary(self):
        """Print configuration summary"""
        print("\n" + "=" * 50)
        print("Configuration Summary")
        print("=" * 50)
        print(f"Env file: {self.loaded_env_file or '(none)'}")
        print("\nBrowser Settings:")
        for key, value in self.browser_settings.items():
            print(f"  {key}: {value}")
        print("\nLogging Settings:")
        for key, value in self.logging_settings.items():
            print(f"  {key}: {value}")
        print("=" * 50 + "\n")


def get_browser_settings(config_dir: Optional[Union[str, Path]] = None) -> BrowserSettings:
    """Load configuration and return validated browser settings."""
    return BrowserSettings(**ConfigManager(config_dir).load_all().browser_settings)
