"""Console rendering of tool results."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from rich.console import Console
from rich.table import Table

from .models import FAILURE_MARKER, SUCCESS_MARKER, ToolResult


class ResultPrinter(ABC):
    """Interface for presenting tool results to a user."""

    @abstractmethod
    def print_result(self, result: ToolResult) -> None:
        """Show a tool result."""

    @abstractmethod
    def print_tools(self, tools: Iterable[Dict[str, Any]]) -> None:
        """Show the available tools."""


class ConsolePrinter(ResultPrinter):
    """Print results to the terminal using Rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console()

    def print_result(self, result: ToolResult) -> None:
        for block in result.content:
            for line in block.text.splitlines() or [""]:
                self._console.print(line, style=_line_style(line, result.is_error), markup=False)
            self._console.print()

    def print_tools(self, tools: Iterable[Dict[str, Any]]) -> None:
        table = Table("Tool", "Description", "Arguments")
        for tool in tools:
            properties = tool.get("inputSchema", {}).get("properties", {})
            table.add_row(tool["name"], tool["description"], ", ".join(properties))
        self._console.print(table)


def _line_style(line: str, is_error: bool) -> str:
    if line.startswith(FAILURE_MARKER) or (is_error and line.startswith("Error:")):
        return "red"
    if line.startswith(SUCCESS_MARKER):
        return "green"
    return "white" if not is_error else "yellow"
