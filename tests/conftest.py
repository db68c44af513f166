import os

import pytest

# Keep unit runs from installing root handlers or writing metrics files.
os.environ.setdefault("ENABLE_ROOT_LOGGER", "0")
os.environ.setdefault("METRICS_ENABLED", "0")

from selenium_shim.core.config_models import BrowserSettings
from selenium_shim.core.metrics import get_metrics


@pytest.fixture
def fast_settings():
    return BrowserSettings(
        browser="chrome",
        element_search_timeout=0.3,
        retry_delay=0.01,
        use_driver_manager=False,
        kill_delay=0,
    )


@pytest.fixture(autouse=True)
def _reset_metrics():
    get_metrics().reset()
    yield
