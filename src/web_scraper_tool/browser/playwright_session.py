"""Playwright-powered browser session implementation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from playwright.sync_api import Error, sync_playwright

from ..config import BrowserConfig
from ..errors import EngineUnavailable
from ..models import EngineKind
from .base import BrowserSession, PageHandle

LOGGER = logging.getLogger(__name__)


class PlaywrightBrowserSession(BrowserSession):
    """Headless browser session backed by Playwright."""

    def __init__(
        self,
        engine: EngineKind = EngineKind.CHROMIUM,
        config: Optional[BrowserConfig] = None,
    ) -> None:
        self.engine = engine
        self._config = config or BrowserConfig()
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None

    @property
    def page(self) -> PageHandle:
        if self._page is None:
            raise EngineUnavailable("Browser session is not started")
        return self._page

    def start(self) -> None:
        LOGGER.debug("Starting Playwright %s session", self.engine.value)
        launch_kwargs: dict[str, Any] = {"headless": self._config.headless}
        # Only chromium understands these switches.
        if self.engine is EngineKind.CHROMIUM and self._config.launch_args:
            launch_kwargs["args"] = list(self._config.launch_args)
        viewport = {"width": self._config.viewport_width, "height": self._config.viewport_height}
        try:
            self._playwright = sync_playwright().start()
            browser_type = getattr(self._playwright, self.engine.value)
            self._browser = browser_type.launch(**launch_kwargs)
            self._context = self._browser.new_context(viewport=viewport)
            self._page = self._context.new_page()
        except Error as exc:
            self.stop()
            raise EngineUnavailable(
                f"Could not start {self.engine.value} browser: {exc}"
            ) from exc
        self.created_at = datetime.now(timezone.utc)

    def stop(self) -> None:
        if self._playwright is None:
            return
        LOGGER.debug("Stopping Playwright %s session", self.engine.value)
        try:
            if self._context:
                self._context.close()
        finally:
            try:
                if self._browser:
                    self._browser.close()
            finally:
                playwright = self._playwright
                self._context = None
                self._browser = None
                self._playwright = None
                self._page = None
                playwright.stop()
