"""Execute ordered interaction sequences against a page."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from playwright.sync_api import Error

from .artifacts import ScreenshotStore
from .browser.base import PageHandle
from .conditions import resolve
from .errors import ToolError, UnsupportedAction, describe
from .models import Action, ActionOutcome, ActionType, LocatorWait

LOGGER = logging.getLogger(__name__)

SCREENSHOT_PREFIX = "react-test"

HandlerResult = Tuple[str, Optional[Path]]
Handler = Callable[[PageHandle, Action, float], HandlerResult]


class ActionExecutor:
    """Run actions one after another, recording an outcome for each.

    A failing action never stops the sequence: its error is captured in the
    outcome and the next action runs against whatever state the page is in.
    Outcomes are numbered from 1 so step 0 stays free for the navigation.
    """

    def __init__(
        self,
        screenshots: ScreenshotStore,
        *,
        default_timeout_ms: float = 5000,
    ) -> None:
        self._screenshots = screenshots
        self._default_timeout_ms = default_timeout_ms
        self._handlers: Dict[ActionType, Handler] = {
            ActionType.CLICK: self._click,
            ActionType.FILL: self._fill,
            ActionType.WAIT: self._wait,
            ActionType.SCREENSHOT: self._screenshot,
            ActionType.GET_TEXT: self._get_text,
            ActionType.GET_ATTRIBUTE: self._get_attribute,
        }

    def execute(self, page: PageHandle, actions: Sequence[Action]) -> List[ActionOutcome]:
        return [self.run_one(page, action, step) for step, action in enumerate(actions, start=1)]

    def run_one(self, page: PageHandle, action: Action, step: int) -> ActionOutcome:
        LOGGER.info("Executing step %d: %s %s", step, action.type_name, action.selector or "")
        timeout = action.timeout if action.timeout is not None else self._default_timeout_ms
        try:
            handler = self._handlers.get(action.kind) if action.kind is not None else None
            if handler is None:
                raise UnsupportedAction(f"Unknown action type: {action.type_name}")
            summary, artifact = handler(page, action, timeout)
        except UnsupportedAction as exc:
            LOGGER.warning("Skipping step %d: %s", step, exc)
            return self._failure(step, action, str(exc), summary=str(exc))
        except (Error, ToolError) as exc:
            LOGGER.warning("Step %d (%s) failed: %s", step, action.type_name, exc)
            return self._failure(step, action, describe(exc))
        except Exception as exc:
            LOGGER.exception("Step %d (%s) raised unexpectedly", step, action.type_name)
            return self._failure(step, action, describe(exc))
        return ActionOutcome(
            index=step,
            action_type=action.type_name,
            selector=action.selector,
            success=True,
            summary=summary,
            artifact=artifact,
        )

    # Handlers ----------------------------------------------------------------

    def _click(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        page.click(_require(action.selector, "selector"), timeout=timeout)
        return f"Clicked: {action.selector}", None

    def _fill(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        value = _require(action.value, "value", allow_empty=True)
        page.fill(_require(action.selector, "selector"), value, timeout=timeout)
        return f'Filled "{value}" into: {action.selector}', None

    def _wait(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        elapsed = resolve(page, LocatorWait(_require(action.selector, "selector")), timeout)
        return f"Waited for: {action.selector} ({elapsed:.0f}ms)", None

    def _screenshot(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        path = self._screenshots.capture(page, prefix=SCREENSHOT_PREFIX)
        return f"Screenshot saved: {path}", path

    def _get_text(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        text = page.text_content(_require(action.selector, "selector"), timeout=timeout)
        return f'Text from {action.selector}: "{text}"', None

    def _get_attribute(self, page: PageHandle, action: Action, timeout: float) -> HandlerResult:
        name = _require(action.value, "value")
        attr = page.get_attribute(_require(action.selector, "selector"), name, timeout=timeout)
        return f'Attribute "{name}" from {action.selector}: "{attr}"', None

    @staticmethod
    def _failure(
        step: int,
        action: Action,
        message: str,
        *,
        summary: Optional[str] = None,
    ) -> ActionOutcome:
        return ActionOutcome(
            index=step,
            action_type=action.type_name,
            selector=action.selector,
            success=False,
            summary=summary
            or f"Failed {action.type_name} on {action.selector or 'page'}: {message}",
            error=message,
        )


def _require(value: Optional[str], field: str, *, allow_empty: bool = False) -> str:
    if value is None or (value == "" and not allow_empty):
        raise ToolError(f"Action requires a {field}")
    return value

