"""Browser session abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Optional, Protocol

from ..models import EngineKind


class ElementHandle(Protocol):
    """Subset of a Playwright element handle used by the tools."""

    def text_content(self) -> Optional[str]: ...

    def is_visible(self) -> bool: ...


class PageHandle(Protocol):
    """Subset of the Playwright sync ``Page`` API the tools rely on."""

    @property
    def url(self) -> str: ...

    def goto(self, url: str, **kwargs: Any) -> Any: ...

    def click(self, selector: str, **kwargs: Any) -> None: ...

    def fill(self, selector: str, value: str, **kwargs: Any) -> None: ...

    def wait_for_selector(self, selector: str, **kwargs: Any) -> Optional[ElementHandle]: ...

    def wait_for_timeout(self, timeout: float) -> None: ...

    def screenshot(self, **kwargs: Any) -> bytes: ...

    def text_content(self, selector: str, **kwargs: Any) -> Optional[str]: ...

    def get_attribute(self, selector: str, name: str, **kwargs: Any) -> Optional[str]: ...

    def query_selector(self, selector: str) -> Optional[ElementHandle]: ...

    def query_selector_all(self, selector: str) -> List[ElementHandle]: ...

    def evaluate(self, expression: str, arg: Any = None) -> Any: ...


class BrowserSession(ABC):
    """One browser instance plus one page, owned by a single request."""

    engine: EngineKind
    created_at: Optional[datetime] = None

    @abstractmethod
    def start(self) -> None:
        """Launch the browser and open the page."""

    @abstractmethod
    def stop(self) -> None:
        """Terminate the browser. Calling it twice must be harmless."""

    @property
    @abstractmethod
    def page(self) -> PageHandle:
        """Return the live page handle."""
