"""
Purpose: Locate, extract and copy driver executables; kill stale driver processes.
Constraints: File and process utilities only; never talks to a browser.
"""

# Imports
import logging
import os
import shutil
import stat
import time
from importlib import resources
from pathlib import Path
from typing import Iterable, Optional, Union

import psutil

from selenium_shim.core.config import get_browser_settings
from selenium_shim.core.exceptions import DriverCopyError, DriverResourceError
from selenium_shim.core.metrics import get_metrics
from selenium_shim.core.utils.retry import retry

logger = logging.getLogger(__name__)

# Constants
CHROME_DRIVER_PROCESS = "chromedriver"
IE_DRIVER_PROCESS = "IEDriverServer"
RUNNING_DRIVER_PROCESSES = (CHROME_DRIVER_PROCESS, IE_DRIVER_PROCESS)
_COPY_CHUNK_SIZE = 64 * 1024

PathLike = Union[str, Path]


def default_driver_dir() -> Path:
    """Configured driver directory, or the working directory when unset."""
    configured = get_browser_settings().driver_dir
    return Path(configured) if configured else Path.cwd()


# Public API
def driver_name_from_resource_name(resource_name: str) -> str:
    """
    Derive the driver file name from a dotted resource name.

    "MyTests.Drivers.chromedriver.exe" -> "chromedriver.exe"
    """
    if not resource_name or not resource_name.strip():
        raise DriverResourceError("A valid embedded resource name must be provided.")

    segments = resource_name.strip().split(".")
    if len(segments) < 2:
        raise DriverResourceError("Could not extract file name from embedded resource name.")

    return f"{segments[-2]}.{segments[-1]}"


def extract_driver_from_resource(
    resource_package: str,
    resource_name: str,
    destination_dir: Optional[PathLike] = None,
) -> Path:
    """
    Stream a driver binary shipped as package data into ``destination_dir``.

    Running chromedriver/IEDriverServer processes are killed first so the
    destination file is not locked. An existing file is overwritten.
    """
    file_name = driver_name_from_resource_name(resource_name)
    kill_running_drivers()

    target_dir = Path(destination_dir) if destination_dir else default_driver_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / file_name

    source = _find_resource(resource_package, (resource_name, file_name))

    def _write() -> None:
        with source.open("rb") as stream_in, open(target, "wb") as stream_out:
            shutil.copyfileobj(stream_in, stream_out, _COPY_CHUNK_SIZE)

    # A driver that was just killed can keep the file locked for a moment.
    retry(_write, attempts=3, base_delay=0.5, exceptions=(PermissionError,))
    _make_executable(target)
    logger.info("Extracted driver %s to %s", resource_name, target)
    return target


def copy_driver_to_directory(
    source_path: Optional[PathLike],
    destination_dir: Optional[PathLike] = None,
) -> Optional[Path]:
    """
    Copy a driver binary into ``destination_dir`` unless it is already there.

    A blank ``source_path`` is a no-op and returns None.
    """
    if source_path is None or not str(source_path).strip():
        return None

    source = Path(source_path)
    if not source.is_file():
        raise DriverCopyError(str(source_path))

    target_dir = Path(destination_dir) if destination_dir else default_driver_dir()
    target = target_dir / source.name
    if target.exists():
        logger.debug("Driver %s already present, skipping copy", target)
        return target

    target_dir.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    _make_executable(target)
    logger.info("Copied driver %s to %s", source, target)
    return target


def kill_running_drivers() -> int:
    """Kill chromedriver and IEDriverServer processes; returns how many were killed."""
    return sum(kill_web_driver(name) for name in RUNNING_DRIVER_PROCESSES)


def kill_web_driver(process_name: str, kill_delay: Optional[float] = None) -> int:
    """
    Kill every process named ``process_name`` (".exe" suffix and case ignored).

    Failures are logged, never raised; cleanup is best effort.
    """
    wanted = _normalize_process_name(process_name)
    killed = 0
    try:
        for proc in psutil.process_iter(["name"]):
            try:
                if _normalize_process_name(proc.info.get("name") or "") != wanted:
                    continue
                proc.kill()
                killed += 1
                get_metrics().record("driver.killed")
            except (psutil.NoSuchProcess, psutil.AccessDenied) as exc:
                logger.debug("Could not kill %s (pid %s): %s", process_name, proc.pid, exc)

        if killed:
            delay = kill_delay if kill_delay is not None else get_browser_settings().kill_delay
            time.sleep(delay)
    except Exception as exc:
        logger.debug("There was an error attempting to kill process named %s: %s", process_name, exc)

    if killed:
        logger.info("Killed %s running %s process(es)", killed, process_name)
    return killed


def _normalize_process_name(name: str) -> str:
    name = name.strip().lower()
    return name[:-4] if name.endswith(".exe") else name


def _find_resource(resource_package: str, candidates: Iterable[str]):
    try:
        root = resources.files(resource_package)
    except (ModuleNotFoundError, TypeError) as exc:
        raise DriverResourceError(f"Resource package {resource_package!r} cannot be loaded: {exc}") from exc

    for candidate in candidates:
        entry = root.joinpath(candidate)
        if entry.is_file():
            return entry
    raise DriverResourceError(f"Driver resource {list(candidates)} not found in package {resource_package!r}")


def _make_executable(path: Path) -> None:
    if os.name == "nt":
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
