"""Aggregate step outcomes and extraction results into tool reports."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .models import ActionOutcome, PageSnapshot, TextContent, ToolResult

SEQUENCE_HEADING = "React App Test Results:"


class Report(BaseModel):
    """Everything one tool call produced, in the order it happened."""

    heading: Optional[str] = None
    outcomes: List[ActionOutcome] = Field(default_factory=list)
    snapshot: Optional[PageSnapshot] = None
    requested_url: Optional[str] = None
    texts: List[str] = Field(default_factory=list)
    artifacts: List[Path] = Field(default_factory=list)
    is_error: bool = False

    @property
    def failed_steps(self) -> List[ActionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    def to_tool_result(self) -> ToolResult:
        blocks: List[str] = []
        if self.outcomes:
            lines = "\n".join(outcome.line for outcome in self.outcomes)
            blocks.append(f"{self.heading}\n\n{lines}" if self.heading else lines)
        if self.snapshot is not None:
            blocks.append(render_snapshot(self.snapshot, self.requested_url))
        blocks.extend(self.texts)
        reported = {outcome.artifact for outcome in self.outcomes if outcome.artifact}
        blocks.extend(
            f"Screenshot saved to: {path}" for path in self.artifacts if path not in reported
        )
        return ToolResult(
            content=[TextContent(text=block) for block in blocks],
            is_error=self.is_error,
        )


class ReportBuilder:
    """Collect results while a session is open, then freeze them into a report."""

    def __init__(self, *, heading: Optional[str] = None) -> None:
        self._heading = heading
        self._outcomes: List[ActionOutcome] = []
        self._artifacts: List[Path] = []
        self._texts: List[str] = []
        self._snapshot: Optional[PageSnapshot] = None
        self._requested_url: Optional[str] = None
        self._is_error = False

    def add_outcome(self, outcome: ActionOutcome) -> None:
        self._outcomes.append(outcome)
        if outcome.artifact is not None:
            self._artifacts.append(outcome.artifact)

    def add_outcomes(self, outcomes: Iterable[ActionOutcome]) -> None:
        for outcome in outcomes:
            self.add_outcome(outcome)

    def add_text(self, text: str) -> None:
        self._texts.append(text)

    def add_artifact(self, path: Path) -> None:
        self._artifacts.append(path)

    def set_snapshot(self, snapshot: PageSnapshot, requested_url: Optional[str] = None) -> None:
        self._snapshot = snapshot
        self._requested_url = requested_url

    def mark_error(self) -> None:
        self._is_error = True

    def build(self) -> Report:
        return Report(
            heading=self._heading,
            outcomes=list(self._outcomes),
            snapshot=self._snapshot,
            requested_url=self._requested_url,
            texts=list(self._texts),
            artifacts=list(self._artifacts),
            is_error=self._is_error,
        )


def navigation_outcome(url: str) -> ActionOutcome:
    return ActionOutcome(
        index=0,
        action_type="navigate",
        selector=url,
        success=True,
        summary=f"Navigated to {url}",
    )


def render_snapshot(snapshot: PageSnapshot, requested_url: Optional[str] = None) -> str:
    meta = "\n".join(f"- {tag.name}: {tag.content or ''}" for tag in snapshot.meta_tags)
    headings = "\n".join(f"- {item.tag.upper()}: {item.text}" for item in snapshot.headings)
    text = (
        f"Page Information for {requested_url or snapshot.url}:\n\n"
        f"Title: {snapshot.title}\n"
        f"URL: {snapshot.url}\n\n"
        f"Meta Tags:\n{meta}\n\n"
        f"Headings:\n{headings}\n\n"
        "Page Elements:\n"
        f"- Links: {snapshot.link_count}\n"
        f"- Images: {snapshot.image_count}\n"
        f"- Forms: {snapshot.form_count}"
    )
    perf = snapshot.performance
    if perf is not None:
        text += (
            "\n\nPerformance Metrics:\n"
            f"- Page Load Time: {_ms(perf.load_time_ms)}\n"
            f"- DOM Content Loaded: {_ms(perf.dom_content_loaded_ms)}\n"
            f"- Load Complete: {_ms(perf.load_complete_ms)}\n"
            f"- First Paint: {_ms(perf.first_paint_ms)}\n"
            f"- First Contentful Paint: {_ms(perf.first_contentful_paint_ms)}"
        )
    return text


def _ms(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:.0f}ms"
