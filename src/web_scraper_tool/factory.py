"""Factories for constructing components from configuration."""

from __future__ import annotations

from typing import Optional

from .artifacts import ScreenshotStore
from .browser.playwright_session import PlaywrightBrowserSession
from .config import BrowserConfig, ToolConfig
from .dispatcher import ToolDispatcher
from .executor import ActionExecutor
from .inspector import PageInspector
from .models import EngineKind
from .session import SessionFactory, SessionManager


def build_session_factory(config: BrowserConfig) -> SessionFactory:
    def _factory(engine: EngineKind) -> PlaywrightBrowserSession:
        return PlaywrightBrowserSession(engine, config)

    return _factory


def build_session_manager(
    config: ToolConfig,
    factory: Optional[SessionFactory] = None,
) -> SessionManager:
    return SessionManager(
        factory or build_session_factory(config.browser),
        default_engine=config.browser.default_engine,
    )


def build_dispatcher(
    config: ToolConfig,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> ToolDispatcher:
    screenshots = ScreenshotStore(config.artifacts.screenshot_dir)
    return ToolDispatcher(
        config=config,
        sessions=build_session_manager(config, session_factory),
        executor=ActionExecutor(screenshots, default_timeout_ms=config.timeouts.action_ms),
        inspector=PageInspector(),
        screenshots=screenshots,
    )
