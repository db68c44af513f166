import json
import logging

import pytest
from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.common.by import By
from selenium.webdriver.common.keys import Keys

from selenium_shim.browser.web_browser import UserAction, WebBrowser
from selenium_shim.core.metrics import get_metrics

from fakes import FakeDriver, FakeElement

BUTTON = (By.ID, "submit")
SEARCH = (By.NAME, "q")
BANNER = (By.CSS_SELECTOR, ".banner")


def make_browser(settings, **driver_kwargs):
    driver = FakeDriver(**driver_kwargs)
    return WebBrowser("chrome", web_driver=driver, settings=settings), driver


def test_defaults_come_from_settings(fast_settings):
    browser, _ = make_browser(fast_settings)
    assert browser.element_search_timeout == 0.3
    assert browser.retry_delay == 0.01
    assert browser.browser_type.value == "chrome"


def test_find_element_waits_for_late_element(fast_settings):
    element = FakeElement()
    browser, driver = make_browser(fast_settings, elements={BUTTON: element}, pending={BUTTON: 3})

    assert browser.find_element(BUTTON) is element
    assert driver.lookups == 4


def test_find_element_raises_selenium_error_after_timeout(fast_settings):
    browser, _ = make_browser(fast_settings)
    browser.element_search_timeout = 0.05

    with pytest.raises(NoSuchElementException):
        browser.find_element(BUTTON)


def test_click_retries_until_element_is_interactable(fast_settings):
    element = FakeElement(click_failures=2)
    browser, _ = make_browser(fast_settings, elements={BUTTON: element})

    assert browser.click_element(BUTTON) is element
    assert element.clicks == 1
    assert get_metrics().total("action.click") == 1


def test_clear_element(fast_settings):
    element = FakeElement()
    browser, _ = make_browser(fast_settings, elements={SEARCH: element})

    browser.clear_element(SEARCH)
    assert element.clears == 1


def test_send_keys_with_and_without_return(fast_settings):
    element = FakeElement()
    browser, _ = make_browser(fast_settings, elements={SEARCH: element})

    browser.send_keys(SEARCH, "selenium")
    browser.send_keys(SEARCH, "shim", include_return_key_press=True)
    assert element.sent_keys == ["selenium", "shim" + Keys.RETURN]


def test_execute_action_dispatches(fast_settings):
    button = FakeElement()
    field = FakeElement()
    browser, _ = make_browser(fast_settings, elements={BUTTON: button, SEARCH: field})

    browser.execute_action(BUTTON, UserAction.CLICK)
    browser.execute_action(SEARCH, UserAction.CLEAR)
    browser.execute_action(SEARCH, "hello", include_return_key_press=True)

    assert button.clicks == 1
    assert field.clears == 1
    # Return is appended exactly once.
    assert field.sent_keys == ["hello" + Keys.RETURN]


def test_execute_action_type_text_without_text_is_rejected(fast_settings):
    browser, _ = make_browser(fast_settings, elements={SEARCH: FakeElement()})
    with pytest.raises(ValueError):
        browser.execute_action(SEARCH, UserAction.TYPE_TEXT)


def test_element_is_visible(fast_settings):
    browser, _ = make_browser(
        fast_settings,
        elements={BUTTON: FakeElement(displayed=True), BANNER: FakeElement(displayed=False)},
    )
    assert browser.element_is_visible(BUTTON) is True
    assert browser.element_is_visible(BANNER) is False


def test_element_is_visible_missing_uses_override_and_restores_timeout(fast_settings):
    browser, driver = make_browser(fast_settings)

    assert browser.element_is_visible(BUTTON, override_timeout=0) is False
    assert driver.lookups == 1
    assert browser.element_search_timeout == 0.3


def test_text_is_visible_ignores_case(fast_settings):
    browser, _ = make_browser(fast_settings, elements={BANNER: FakeElement(text="Welcome Back")})
    assert browser.text_is_visible(BANNER, "welcome back") is True


def test_text_is_visible_waits_for_text_to_change(fast_settings):
    element = FakeElement(texts=["Loading...", "Loading...", "Done"])
    browser, _ = make_browser(fast_settings, elements={BANNER: element})
    assert browser.text_is_visible(BANNER, "DONE") is True


def test_text_is_visible_false_on_mismatch_and_restores_timeout(fast_settings):
    browser, _ = make_browser(fast_settings, elements={BANNER: FakeElement(text="Goodbye")})

    assert browser.text_is_visible(BANNER, "Welcome", override_timeout=0.05) is False
    assert browser.element_search_timeout == 0.3


def test_text_is_visible_false_when_element_missing(fast_settings):
    browser, _ = make_browser(fast_settings)
    assert browser.text_is_visible(BANNER, "anything", override_timeout=0) is False


def test_start_navigates_only_for_non_blank_url(fast_settings):
    browser, driver = make_browser(fast_settings)

    browser.start("")
    browser.start("   ")
    browser.start("https://example.test/login")
    assert driver.visited == ["https://example.test/login"]


def test_get_user_input_falls_back_to_default(fast_settings, monkeypatch):
    browser, _ = make_browser(fast_settings)
    answers = iter(["", "123456"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(answers))

    assert browser.get_user_input("Code?", default_response="000000") == "000000"
    assert browser.get_user_input("Code?") == "123456"


def test_context_manager_quits_driver(fast_settings):
    driver = FakeDriver()
    with WebBrowser("firefox", web_driver=driver, settings=fast_settings) as browser:
        browser.close()
    assert driver.closed
    assert driver.quit_called


def test_driver_is_created_when_not_supplied(fast_settings, monkeypatch):
    created = {}

    def fake_create(browser_type, resource_package=None, resource_name="", settings=None):
        created.update(browser_type=browser_type, package=resource_package, name=resource_name)
        return FakeDriver()

    monkeypatch.setattr("selenium_shim.browser.web_browser.create_web_driver", fake_create)
    browser = WebBrowser("ie", resource_package="my_drivers", resource_name="IEDriverServer.exe", settings=fast_settings)

    assert isinstance(browser.web_driver, FakeDriver)
    assert created == {"browser_type": browser.browser_type, "package": "my_drivers", "name": "IEDriverServer.exe"}


def test_explicit_settings_ignore_invalid_browser_env(fast_settings, monkeypatch):
    monkeypatch.setenv("BROWSER_TYPE", "safari")

    browser, _ = make_browser(fast_settings)
    assert browser.browser_type.value == "chrome"


def test_logger_is_named_after_module(fast_settings):
    browser, _ = make_browser(fast_settings)
    assert browser.logger.name == "selenium_shim.browser.web_browser"


def test_start_logs_navigation_duration(fast_settings, caplog):
    browser, _ = make_browser(fast_settings)
    with caplog.at_level(logging.INFO, logger="selenium_shim.browser.web_browser"):
        browser.start("https://example.test/")

    assert "PERFORMANCE: navigate took" in caplog.text


def test_quit_writes_metrics_snapshot(fast_settings, monkeypatch, tmp_path):
    monkeypatch.setenv("METRICS_ENABLED", "1")
    monkeypatch.setenv("SHIM_LOG_DIR", str(tmp_path))
    browser, driver = make_browser(fast_settings, elements={BUTTON: FakeElement()}, pending={BUTTON: 1})

    browser.click_element(BUTTON)
    browser.quit()

    lines = (tmp_path / "metrics.jsonl").read_text(encoding="utf-8").splitlines()
    assert driver.quit_called
    assert len(lines) == 1
    totals = json.loads(lines[0])["totals"]
    assert totals["action.click"] == 1
    assert totals["retry.attempt"] == 1


def test_quit_skips_metrics_file_when_disabled(fast_settings, monkeypatch, tmp_path):
    monkeypatch.setenv("METRICS_ENABLED", "0")
    monkeypatch.setenv("SHIM_LOG_DIR", str(tmp_path))
    browser, _ = make_browser(fast_settings)

    browser.quit()
    assert not (tmp_path / "metrics.jsonl").exists()
