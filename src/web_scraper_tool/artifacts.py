"""Write-once storage for page screenshots."""

from __future__ import annotations

import itertools
import logging
import threading
import time
from pathlib import Path

from .browser.base import PageHandle

LOGGER = logging.getLogger(__name__)

_SEQUENCE = itertools.count()
_SEQUENCE_LOCK = threading.Lock()


class ScreenshotStore:
    """Save full-page captures under unique, timestamp-qualified names."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def next_path(self, prefix: str) -> Path:
        with _SEQUENCE_LOCK:
            sequence = next(_SEQUENCE)
        millis = int(time.time() * 1000)
        return self._directory / f"{prefix}-{millis}-{sequence}.png"

    def capture(self, page: PageHandle, prefix: str = "screenshot") -> Path:
        self._directory.mkdir(parents=True, exist_ok=True)
        data = page.screenshot(full_page=True)
        path = self.next_path(prefix)
        # "xb" refuses to overwrite an existing artifact.
        with path.open("xb") as handle:
            handle.write(data)
        LOGGER.info("Screenshot saved to %s", path)
        return path
