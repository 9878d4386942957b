from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import pytest
from playwright.sync_api import Error
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from web_scraper_tool.browser.base import BrowserSession
from web_scraper_tool.config import ToolConfig
from web_scraper_tool.dispatcher import ToolDispatcher
from web_scraper_tool.factory import build_dispatcher
from web_scraper_tool.models import EngineKind


@dataclass
class FakeElement:
    text: Optional[str] = ""
    visible: bool = True
    attributes: dict[str, str] = field(default_factory=dict)
    value: Optional[str] = None

    def text_content(self) -> Optional[str]:
        return self.text

    def is_visible(self) -> bool:
        return self.visible


class FakePage:
    """In-memory stand-in for a Playwright page."""

    def __init__(
        self,
        elements: Optional[dict[str, FakeElement]] = None,
        *,
        groups: Optional[dict[str, list[FakeElement]]] = None,
        page_info: Optional[dict[str, Any]] = None,
        performance: Optional[dict[str, Any]] = None,
        broken_urls: tuple[str, ...] = (),
    ) -> None:
        self.elements = dict(elements or {})
        self.groups = dict(groups or {})
        self.page_info = page_info or {}
        self.performance_entries = performance or {}
        self.broken_urls = broken_urls
        self.calls: list[tuple[Any, ...]] = []
        self.waited: list[float] = []
        self._url = "about:blank"

    @property
    def url(self) -> str:
        return self._url

    def _locate(self, selector: str, timeout: Any) -> FakeElement:
        element = self.elements.get(selector)
        if element is None:
            raise PlaywrightTimeoutError(
                f"Timeout {timeout}ms exceeded.\n=== logs ===\nwaiting for locator('{selector}')"
            )
        return element

    def goto(self, url: str, **kwargs: Any) -> None:
        self.calls.append(("goto", url, kwargs))
        if url in self.broken_urls:
            raise Error(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self._url = url

    def click(self, selector: str, **kwargs: Any) -> None:
        self.calls.append(("click", selector, kwargs.get("timeout")))
        self._locate(selector, kwargs.get("timeout"))

    def fill(self, selector: str, value: str, **kwargs: Any) -> None:
        self.calls.append(("fill", selector, kwargs.get("timeout")))
        self._locate(selector, kwargs.get("timeout")).value = value

    def wait_for_selector(self, selector: str, **kwargs: Any) -> FakeElement:
        self.calls.append(("wait_for_selector", selector, kwargs.get("timeout")))
        return self._locate(selector, kwargs.get("timeout"))

    def wait_for_timeout(self, timeout: float) -> None:
        self.calls.append(("wait_for_timeout", timeout))
        self.waited.append(timeout)

    def screenshot(self, **kwargs: Any) -> bytes:
        self.calls.append(("screenshot", kwargs))
        return b"\x89PNG fake"

    def text_content(self, selector: str, **kwargs: Any) -> Optional[str]:
        self.calls.append(("text_content", selector, kwargs.get("timeout")))
        return self._locate(selector, kwargs.get("timeout")).text

    def get_attribute(self, selector: str, name: str, **kwargs: Any) -> Optional[str]:
        self.calls.append(("get_attribute", selector, kwargs.get("timeout")))
        return self._locate(selector, kwargs.get("timeout")).attributes.get(name)

    def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.elements.get(selector)

    def query_selector_all(self, selector: str) -> list[FakeElement]:
        if selector in self.groups:
            return list(self.groups[selector])
        element = self.elements.get(selector)
        return [element] if element is not None else []

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.calls.append(("evaluate",))
        if "getEntriesByType" in expression:
            return self.performance_entries
        return self.page_info


class FakeSession(BrowserSession):
    def __init__(
        self,
        engine: EngineKind,
        page: FakePage,
        ledger: "SessionLedger",
    ) -> None:
        self.engine = engine
        self._page = page
        self._ledger = ledger
        self.started = False

    @property
    def page(self) -> FakePage:
        return self._page

    def start(self) -> None:
        if self._ledger.fail_start:
            raise RuntimeError("browser executable missing")
        self.started = True
        self._ledger.started += 1
        self._ledger.engines.append(self.engine)

    def stop(self) -> None:
        self._ledger.stopped += 1
        if self._ledger.fail_stop:
            raise RuntimeError("browser already crashed")
        self.started = False


@dataclass
class SessionLedger:
    started: int = 0
    stopped: int = 0
    created: int = 0
    fail_start: bool = False
    fail_stop: bool = False
    engines: list[EngineKind] = field(default_factory=list)

    @property
    def live(self) -> int:
        return self.started - self.stopped


@pytest.fixture
def ledger() -> SessionLedger:
    return SessionLedger()


@pytest.fixture
def tool_config(tmp_path: Path) -> ToolConfig:
    return ToolConfig.model_validate({"artifacts": {"screenshot_dir": str(tmp_path / "shots")}})


@pytest.fixture
def session_factory(ledger: SessionLedger) -> Callable[[FakePage], Callable[[EngineKind], FakeSession]]:
    def _for_page(page: FakePage) -> Callable[[EngineKind], FakeSession]:
        def _factory(engine: EngineKind) -> FakeSession:
            ledger.created += 1
            return FakeSession(engine, page, ledger)

        return _factory

    return _for_page


@pytest.fixture
def make_dispatcher(
    tool_config: ToolConfig,
    session_factory: Callable[[FakePage], Callable[[EngineKind], FakeSession]],
) -> Callable[[FakePage], ToolDispatcher]:
    def _make(page: FakePage) -> ToolDispatcher:
        return build_dispatcher(tool_config, session_factory=session_factory(page))

    return _make
