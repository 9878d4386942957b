"""Error taxonomy shared by the scraping tools."""

from __future__ import annotations

from typing import Optional


class ToolError(RuntimeError):
    """Base class for failures reported back to the tool caller."""


class EngineUnavailable(ToolError):
    """Raised when the requested browser engine cannot be started."""


class ArgumentInvalid(ToolError):
    """Raised when tool arguments fail validation before a session exists."""


class UnsupportedAction(ToolError):
    """Raised for an action kind the executor does not know."""


class ElementNotFound(ToolError):
    """Raised when a selector does not appear before its deadline."""

    def __init__(
        self,
        selector: str,
        timeout_ms: float,
        elapsed_ms: Optional[float] = None,
    ) -> None:
        super().__init__(f"Timeout {timeout_ms:g}ms exceeded waiting for selector {selector!r}")
        self.selector = selector
        self.timeout_ms = timeout_ms
        self.elapsed_ms = elapsed_ms


def describe(exc: BaseException) -> str:
    """Return the first line of an exception message."""

    # Playwright appends a multi-line call log to its messages.
    text = str(exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__
