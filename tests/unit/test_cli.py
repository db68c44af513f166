import pytest

from selenium_shim import cli
from selenium_shim.browser.web_browser import WebBrowser

from fakes import FakeDriver


def test_driver_name(capsys):
    assert cli.main(["driver-name", "Suite.Drivers.chromedriver.exe"]) == 0
    assert capsys.readouterr().out.strip() == "chromedriver.exe"


def test_driver_name_error_exits_nonzero(capsys):
    assert cli.main(["driver-name", "chromedriver"]) == 1
    assert "Could not extract file name" in capsys.readouterr().err


def test_copy_driver(tmp_path, capsys):
    source = tmp_path / "geckodriver"
    source.write_bytes(b"bin")
    dest = tmp_path / "drivers"

    assert cli.main(["copy-driver", str(source), "--dest", str(dest)]) == 0
    assert (dest / "geckodriver").read_bytes() == b"bin"
    assert str(dest / "geckodriver") in capsys.readouterr().out


def test_copy_driver_missing_source(tmp_path):
    assert cli.main(["copy-driver", str(tmp_path / "missing"), "--dest", str(tmp_path)]) == 1


def test_kill_drivers_uses_requested_names(monkeypatch, capsys):
    asked = []
    monkeypatch.setattr(cli, "kill_web_driver", lambda name: asked.append(name) or 0)

    assert cli.main(["kill-drivers", "--name", "geckodriver"]) == 0
    assert asked == ["geckodriver"]
    assert "Killed 0" in capsys.readouterr().out


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])


@pytest.fixture
def fake_title_browser(monkeypatch, fast_settings):
    opened = []

    def make_browser(browser_type, settings=None):
        browser = WebBrowser(browser_type, web_driver=FakeDriver(title="Example Domain"), settings=settings)
        opened.append(browser)
        return browser

    monkeypatch.setattr(cli, "get_browser_settings", lambda: fast_settings)
    monkeypatch.setattr(cli, "WebBrowser", make_browser)
    return opened


def test_check_title_matches_ignoring_case(fake_title_browser, capsys):
    assert cli.main(["check-title", "https://example.test/", "example domain", "--headless"]) == 0

    browser = fake_title_browser[0]
    assert browser.settings.headless is True
    assert browser.web_driver.visited == ["https://example.test/"]
    assert browser.web_driver.quit_called
    assert capsys.readouterr().out.strip() == "OK: Example Domain"


def test_check_title_mismatch_exits_nonzero(fake_title_browser, capsys):
    assert cli.main(["check-title", "https://example.test/", "Other Site", "--timeout", "0.1"]) == 1

    assert fake_title_browser[0].settings.element_search_timeout == 0.1
    assert "did not match expected page title 'Other Site'" in capsys.readouterr().err
