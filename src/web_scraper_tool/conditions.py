"""Turn a wait specification into a blocking wait against a page."""

from __future__ import annotations

import logging
import time

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from .browser.base import PageHandle
from .errors import ElementNotFound
from .models import DurationWait, LocatorWait, WaitSpec

LOGGER = logging.getLogger(__name__)


def resolve(page: PageHandle, spec: WaitSpec, timeout_ms: float) -> float:
    """Block until ``spec`` is satisfied and return the elapsed milliseconds.

    A :class:`DurationWait` always succeeds once its time has passed, whatever
    the page contains. A :class:`LocatorWait` polls at Playwright's own cadence
    and raises :class:`ElementNotFound` once ``timeout_ms`` has elapsed.
    """

    started = time.monotonic()
    if isinstance(spec, DurationWait):
        LOGGER.debug("Waiting %dms", spec.milliseconds)
        page.wait_for_timeout(spec.milliseconds)
    elif isinstance(spec, LocatorWait):
        LOGGER.debug("Waiting up to %gms for %s", timeout_ms, spec.selector)
        try:
            page.wait_for_selector(spec.selector, state="attached", timeout=timeout_ms)
        except PlaywrightTimeoutError as exc:
            elapsed = _elapsed_ms(started)
            raise ElementNotFound(spec.selector, timeout_ms, elapsed) from exc
    else:
        raise TypeError(f"Unknown wait specification: {spec!r}")
    return _elapsed_ms(started)


def _elapsed_ms(started: float) -> float:
    return (time.monotonic() - started) * 1000
