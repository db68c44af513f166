#!/usr/bin/env python3
"""
Unified CLI entrypoint with subcommands.
"""

import argparse
import sys
from typing import List, Optional

from selenium_shim.browser.driver_files import (
    RUNNING_DRIVER_PROCESSES,
    copy_driver_to_directory,
    driver_name_from_resource_name,
    extract_driver_from_resource,
    kill_web_driver,
)
from selenium_shim.browser.web_browser import WebBrowser
from selenium_shim.core.config import ConfigManager, get_browser_settings
from selenium_shim.core.exceptions import ShimError
from selenium_shim.core.logging import setup_logger
from selenium_shim.pages.web_page import WebPage


def _cmd_driver_name(args) -> int:
    print(driver_name_from_resource_name(args.resource))
    return 0


def _cmd_extract_driver(args) -> int:
    path = extract_driver_from_resource(args.package, args.resource, args.dest)
    print(path)
    return 0


def _cmd_copy_driver(args) -> int:
    path = copy_driver_to_directory(args.source, args.dest)
    if path is None:
        print("Nothing to copy")
        return 0
    print(path)
    return 0


def _cmd_kill_drivers(args) -> int:
    names = args.name or list(RUNNING_DRIVER_PROCESSES)
    killed = sum(kill_web_driver(name) for name in names)
    print(f"Killed {killed} driver process(es)")
    return 0


def _cmd_check_title(args) -> int:
    settings = get_browser_settings()
    if args.headless:
        settings = settings.model_copy(update={"headless": True})
    if args.timeout is not None:
        settings = settings.model_copy(update={"element_search_timeout": args.timeout})

    with WebBrowser(args.browser or settings.browser, settings=settings) as browser:
        page = WebPage(browser, args.url, title=args.expected)
        page.load(validate_title=True)
        print(f"OK: {page.title}")
    return 0


def _cmd_config(args) -> int:
    ConfigManager(args.config_dir).load_all().print_summary()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="selenium-shim", description="Selenium driver and page utilities")
    sub = parser.add_subparsers(dest="command", required=True)

    name = sub.add_parser("driver-name", help="Print the driver file name for a dotted resource name")
    name.add_argument("resource")
    name.set_defaults(func=_cmd_driver_name)

    extract = sub.add_parser("extract-driver", help="Extract a driver binary shipped as package data")
    extract.add_argument("--package", required=True, help="Importable package holding the driver")
    extract.add_argument("--resource", required=True, help="Resource name, e.g. drivers.chromedriver.exe")
    extract.add_argument("--dest", default=None, help="Destination directory")
    extract.set_defaults(func=_cmd_extract_driver)

    copy = sub.add_parser("copy-driver", help="Copy a driver binary into the driver directory")
    copy.add_argument("source")
    copy.add_argument("--dest", default=None, help="Destination directory")
    copy.set_defaults(func=_cmd_copy_driver)

    kill = sub.add_parser("kill-drivers", help="Kill running chromedriver/IEDriverServer processes")
    kill.add_argument("--name", action="append", help="Process name to kill (repeatable)")
    kill.set_defaults(func=_cmd_kill_drivers)

    check = sub.add_parser("check-title", help="Open a URL and verify the page title")
    check.add_argument("url")
    check.add_argument("expected")
    check.add_argument("--browser", choices=["chrome", "firefox", "ie"], default=None)
    check.add_argument("--headless", action="store_true")
    check.add_argument("--timeout", type=float, default=None, help="Element search timeout in seconds")
    check.set_defaults(func=_cmd_check_title)

    config = sub.add_parser("config", help="Show effective configuration")
    config.add_argument("--config-dir", default=None)
    config.set_defaults(func=_cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = setup_logger("selenium_shim.cli")
    try:
        return args.func(args)
    except ShimError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
