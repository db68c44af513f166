"""
Purpose: Retry helpers: fixed-delay polling until timeout, and exponential backoff.
Constraints: Utility only; callers decide what a result or a retriable error means.
"""

# Imports
import logging
import random
import time
from typing import Callable, Iterable, Optional, TypeVar

from selenium_shim.core.exceptions import ElementSearchTimeoutError
from selenium_shim.core.metrics import get_metrics

P = TypeVar("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)


# Public API
def wait_until_timeout(
    func: Callable[[P], Optional[T]],
    arg: P,
    *,
    timeout: float,
    retry_delay: float,
    on_retry: Optional[Callable[[int, Optional[Exception]], None]] = None,
    description: str = "",
) -> T:
    """
    Call ``func(arg)`` until it returns something other than None or ``timeout``
    seconds have elapsed.

    Exceptions raised by ``func`` are remembered and the call is retried after
    ``retry_delay`` seconds. When time runs out the last exception is re-raised
    unchanged; if ``func`` never raised, ElementSearchTimeoutError is raised.
    At least one attempt is always made.
    """
    metrics = get_metrics()
    last_exc: Optional[Exception] = None
    attempt = 0
    start = time.monotonic()
    while True:
        attempt += 1
        try:
            value = func(arg)
        except Exception as exc:
            last_exc = exc
            value = None
        if value is not None:
            return value

        metrics.record("retry.attempt", success=False)
        if on_retry:
            on_retry(attempt, last_exc)
        if time.monotonic() - start >= timeout:
            break
        time.sleep(retry_delay)
        if time.monotonic() - start >= timeout:
            break

    metrics.record_error("retry.timeout")
    logger.warning(
        "Gave up after %s attempt(s) in %.1fs%s: %s",
        attempt,
        timeout,
        f" ({description})" if description else "",
        last_exc if last_exc else "no result",
    )
    if last_exc is not None:
        raise last_exc
    raise ElementSearchTimeoutError(timeout, description)


def retry(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 5.0,
    jitter: float = 0.2,
    exceptions: Iterable[type[Exception]] = (Exception,),
    on_retry: Optional[Callable[[int, Exception], None]] = None,
) -> T:
    """Retry a callable with exponential backoff and optional jitter."""
    last_exc: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except tuple(exceptions) as exc:  # type: ignore[arg-type]
            last_exc = exc
            if attempt >= attempts:
                break
            if on_retry:
                on_retry(attempt, exc)
            delay = min(max_delay, base_delay * (2 ** (attempt - 1)))
            if jitter:
                delay += random.uniform(0, jitter)
            time.sleep(delay)
    raise last_exc if last_exc else RuntimeError("retry: failed without exception")
