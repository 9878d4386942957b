"""Map tool calls onto session-scoped scraping operations."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from playwright.sync_api import Error
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .artifacts import ScreenshotStore
from .browser.base import PageHandle
from .conditions import resolve
from .config import ToolConfig
from .errors import ArgumentInvalid, ElementNotFound, ToolError, describe
from .executor import ActionExecutor
from .inspector import PageInspector
from .models import (
    FAILURE_MARKER,
    SUCCESS_MARKER,
    Action,
    LocatorWait,
    ToolResult,
    parse_wait_spec,
)
from .report import SEQUENCE_HEADING, Report, ReportBuilder, navigation_outcome
from .session import SessionManager

LOGGER = logging.getLogger(__name__)

SCRAPE_SCREENSHOT_PREFIX = "screenshot"


# Argument models ------------------------------------------------------------


class _Arguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(description="URL to open")
    browser: Optional[str] = Field(
        default=None,
        description="Browser engine to use: chromium (default), firefox or webkit",
    )


class ScrapePageArguments(_Arguments):
    selector: Optional[str] = Field(
        default=None,
        description="CSS selector to target specific elements (optional)",
    )
    wait_for: Optional[str] = Field(
        default=None,
        alias="waitFor",
        description='Wait for specific selector or timeout in ms (e.g., "2000" or "#my-element")',
    )
    screenshot: bool = Field(default=False, description="Take a screenshot of the page")


class TestReactAppArguments(_Arguments):
    __test__ = False

    actions: List[Action] = Field(description="Array of actions to perform on the page")


class GetPageInfoArguments(_Arguments):
    include_performance: bool = Field(
        default=False,
        alias="includePerformance",
        description="Include performance metrics",
    )


class WaitForElementArguments(_Arguments):
    selector: str = Field(description="CSS selector to wait for")
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Maximum time to wait in milliseconds",
    )


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    arguments: Type[BaseModel]
    handler: Callable[[Any], Report]

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.arguments.model_json_schema(by_alias=True),
        }


class UnknownTool(ArgumentInvalid):
    """Raised when a caller names a tool that is not registered."""


# Dispatcher -----------------------------------------------------------------


class ToolDispatcher:
    """Validate a tool call, run it inside its own browser session, report.

    Argument problems are raised before any browser is launched. Anything that
    goes wrong once a session exists is turned into an error result after the
    session has been released.
    """

    def __init__(
        self,
        config: ToolConfig,
        sessions: SessionManager,
        executor: ActionExecutor,
        inspector: PageInspector,
        screenshots: ScreenshotStore,
    ) -> None:
        self._config = config
        self._sessions = sessions
        self._executor = executor
        self._inspector = inspector
        self._screenshots = screenshots
        self._tools: Dict[str, ToolSpec] = {
            spec.name: spec
            for spec in (
                ToolSpec(
                    "scrape_page",
                    "Scrape content from a web page using Playwright",
                    ScrapePageArguments,
                    self.scrape_page,
                ),
                ToolSpec(
                    "test_react_app",
                    "Test a React app by navigating and interacting with elements",
                    TestReactAppArguments,
                    self.test_react_app,
                ),
                ToolSpec(
                    "get_page_info",
                    "Get comprehensive information about a web page "
                    "(title, meta tags, performance metrics)",
                    GetPageInfoArguments,
                    self.get_page_info,
                ),
                ToolSpec(
                    "wait_for_element",
                    "Wait for an element to appear on the page "
                    "(useful for dynamic React content)",
                    WaitForElementArguments,
                    self.wait_for_element,
                ),
            )
        }

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in self._tools.values()]

    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """Run tool ``name`` and always return a well-formed result."""

        LOGGER.info("Tool call: %s", name)
        try:
            spec = self._tools.get(name)
            if spec is None:
                raise UnknownTool(f"Unknown tool: {name}")
            parsed = self.parse_arguments(spec, arguments)
            report = spec.handler(parsed)
        except ToolError as exc:
            LOGGER.warning("Tool %s failed: %s", name, exc)
            return ToolResult.error(describe(exc))
        except Error as exc:
            LOGGER.warning("Tool %s failed in the browser: %s", name, describe(exc))
            return ToolResult.error(describe(exc))
        except Exception as exc:
            LOGGER.exception("Unhandled error in tool %s", name)
            return ToolResult.error(describe(exc))
        return report.to_tool_result()

    @staticmethod
    def parse_arguments(spec: ToolSpec, arguments: Optional[Mapping[str, Any]]) -> Any:
        try:
            return spec.arguments.model_validate(dict(arguments or {}))
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'arguments'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ArgumentInvalid(f"Invalid arguments for {spec.name}: {problems}") from None

    # Operations --------------------------------------------------------------

    def scrape_page(self, args: ScrapePageArguments) -> Report:
        wait_spec = parse_wait_spec(args.wait_for) if args.wait_for else None
        engine = self._sessions.resolve_engine(args.browser)
        builder = ReportBuilder()
        with self._sessions.session(engine) as session:
            page = session.page
            self._navigate(page, args.url)
            if wait_spec is not None:
                resolve(page, wait_spec, self._config.timeouts.scrape_wait_for_ms)
            if args.selector:
                texts = [
                    element.text_content() or ""
                    for element in page.query_selector_all(args.selector)
                ]
                content = "\n---\n".join(texts)
            else:
                content = page.text_content("body") or ""
            builder.add_text(f"Scraped content from {args.url}:\n\n{content}")
            if args.screenshot:
                builder.add_artifact(
                    self._screenshots.capture(page, prefix=SCRAPE_SCREENSHOT_PREFIX)
                )
        return builder.build()

    def test_react_app(self, args: TestReactAppArguments) -> Report:
        for step, action in enumerate(args.actions, start=1):
            missing = action.missing_fields()
            if missing:
                raise ArgumentInvalid(
                    f"Action {step} ({action.type_name}) requires: {', '.join(missing)}"
                )
        engine = self._sessions.resolve_engine(args.browser)
        builder = ReportBuilder(heading=SEQUENCE_HEADING)
        with self._sessions.session(engine) as session:
            page = session.page
            self._navigate(page, args.url)
            builder.add_outcome(navigation_outcome(args.url))
            builder.add_outcomes(self._executor.execute(page, args.actions))
        report = builder.build()
        if report.failed_steps:
            LOGGER.info(
                "%d of %d steps failed for %s",
                len(report.failed_steps),
                len(args.actions),
                args.url,
            )
        return report

    def get_page_info(self, args: GetPageInfoArguments) -> Report:
        engine = self._sessions.resolve_engine(args.browser)
        builder = ReportBuilder()
        with self._sessions.session(engine) as session:
            page = session.page
            load_time = self._navigate(page, args.url)
            snapshot = self._inspector.snapshot(page, args.include_performance, load_time)
            builder.set_snapshot(snapshot, args.url)
        return builder.build()

    def wait_for_element(self, args: WaitForElementArguments) -> Report:
        engine = self._sessions.resolve_engine(args.browser)
        timeout = (
            args.timeout if args.timeout is not None else self._config.timeouts.wait_for_element_ms
        )
        builder = ReportBuilder()
        with self._sessions.session(engine) as session:
            page = session.page
            self._navigate(page, args.url)
            try:
                elapsed = resolve(page, LocatorWait(args.selector), timeout)
            except ElementNotFound as exc:
                builder.add_text(
                    f"{FAILURE_MARKER} Element not found: {args.selector}\n"
                    f"Wait time: {exc.elapsed_ms or timeout:.0f}ms\n"
                    f"Timeout: {timeout:.0f}ms"
                )
                builder.mark_error()
                return builder.build()
            element = page.query_selector(args.selector)
            text = element.text_content() if element is not None else None
            visible = element.is_visible() if element is not None else False
            builder.add_text(
                f"{SUCCESS_MARKER} Element found: {args.selector}\n"
                f"Wait time: {elapsed:.0f}ms\n"
                f"Visible: {str(visible).lower()}\n"
                f'Text content: "{text}"'
            )
        return builder.build()

    # Helpers -----------------------------------------------------------------

    def _navigate(self, page: PageHandle, url: str) -> float:
        """Load ``url`` and return how long the navigation took in milliseconds."""

        browser_config = self._config.browser
        started = time.monotonic()
        page.goto(
            url,
            wait_until=browser_config.navigation_wait_until,
            timeout=browser_config.navigation_timeout_ms,
        )
        elapsed = (time.monotonic() - started) * 1000
        LOGGER.debug("Navigated to %s in %.0fms", url, elapsed)
        return elapsed
