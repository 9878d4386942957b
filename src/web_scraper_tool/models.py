"""Shared models used across the web scraper tool."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import EngineUnavailable

SUCCESS_MARKER = "✅"
FAILURE_MARKER = "❌"

_DURATION_PATTERN = re.compile(r"[0-9]+")


class EngineKind(str, enum.Enum):
    """Browser engines a session can be launched with."""

    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"

    @classmethod
    def parse(cls, value: Union[str, "EngineKind", None], default: "EngineKind") -> "EngineKind":
        if value is None or value == "":
            return default
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(kind.value for kind in cls)
            raise EngineUnavailable(
                f"Unsupported browser engine: {value!r} (expected one of: {choices})"
            ) from None


class ActionType(str, enum.Enum):
    """Enumerated interactions a test sequence can contain."""

    CLICK = "click"
    FILL = "fill"
    WAIT = "wait"
    SCREENSHOT = "screenshot"
    GET_TEXT = "getText"
    GET_ATTRIBUTE = "getAttribute"


class Action(BaseModel):
    """One step of an interaction sequence."""

    model_config = ConfigDict(frozen=True)

    # Unknown kinds are kept as plain strings so the executor can record them.
    type: Union[ActionType, str] = Field(union_mode="left_to_right")
    selector: Optional[str] = None
    value: Optional[str] = None
    timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Timeout in milliseconds; the configured default applies when omitted.",
    )

    @property
    def kind(self) -> Optional[ActionType]:
        return self.type if isinstance(self.type, ActionType) else None

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, ActionType) else str(self.type)

    def missing_fields(self) -> List[str]:
        """Return the names of required fields this action does not carry."""

        kind = self.kind
        if kind is None:
            return []
        missing: List[str] = []
        if kind is not ActionType.SCREENSHOT and not self.selector:
            missing.append("selector")
        if kind in {ActionType.FILL, ActionType.GET_ATTRIBUTE} and self.value is None:
            missing.append("value")
        return missing


@dataclass(frozen=True)
class DurationWait:
    """Block unconditionally for a fixed number of milliseconds."""

    milliseconds: int


@dataclass(frozen=True)
class LocatorWait:
    """Block until an element matching ``selector`` is attached to the DOM."""

    selector: str


WaitSpec = Union[DurationWait, LocatorWait]


def parse_wait_spec(text: str) -> WaitSpec:
    """Decide once whether ``text`` is a duration (all digits) or a selector."""

    if _DURATION_PATTERN.fullmatch(text):
        return DurationWait(milliseconds=int(text))
    return LocatorWait(selector=text)


class ActionOutcome(BaseModel):
    """Recorded result of one step (navigation or action)."""

    index: int
    action_type: str
    selector: Optional[str] = None
    success: bool
    summary: str
    error: Optional[str] = None
    artifact: Optional[Path] = None
    finished_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def line(self) -> str:
        marker = SUCCESS_MARKER if self.success else FAILURE_MARKER
        return f"{marker} {self.summary}"


class MetaTag(BaseModel):
    name: str
    content: Optional[str] = None


class Heading(BaseModel):
    level: int
    text: str

    @property
    def tag(self) -> str:
        return f"h{self.level}"


class PerformanceMetrics(BaseModel):
    """Timing data reported by the browser; any field may be missing."""

    load_time_ms: float
    dom_content_loaded_ms: Optional[float] = None
    load_complete_ms: Optional[float] = None
    first_paint_ms: Optional[float] = None
    first_contentful_paint_ms: Optional[float] = None


class PageSnapshot(BaseModel):
    """Structured description of a loaded page."""

    title: str = ""
    url: str
    meta_tags: List[MetaTag] = Field(default_factory=list)
    headings: List[Heading] = Field(default_factory=list)
    link_count: int = 0
    image_count: int = 0
    form_count: int = 0
    load_time_ms: float
    performance: Optional[PerformanceMetrics] = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Tool-call response returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent] = Field(default_factory=list)
    is_error: bool = Field(default=False, alias="isError")

    @property
    def text(self) -> str:
        return "\n".join(item.text for item in self.content)

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=f"Error: {message}")], is_error=True)
