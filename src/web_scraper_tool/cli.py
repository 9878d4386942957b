"""Command line interface for web-scraper-tool."""

from __future__ import annotations

import asyncio
import json
import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import yaml

from .client import ToolServiceClient
from .config import ToolConfig, load_config
from .console import ConsolePrinter
from .factory import build_dispatcher
from .models import ToolResult

app = typer.Typer(help="Web Scraper Tool entry point")

BrowserOption = Annotated[
    Optional[str],
    typer.Option("--browser", "-b", help="Browser engine: chromium, firefox or webkit."),
]
RemoteOption = Annotated[
    Optional[str],
    typer.Option("--remote", help="Base URL of a running tool service to call instead."),
]


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = {"config_path": config_path, "env_file": env_file}


def _config(ctx: typer.Context, **overrides: Any) -> ToolConfig:
    options = ctx.obj or {}
    return load_config(options.get("config_path"), env_file=options.get("env_file"), **overrides)


def _run_tool(
    ctx: typer.Context,
    name: str,
    arguments: dict[str, Any],
    remote: Optional[str] = None,
) -> None:
    if remote:
        result = asyncio.run(ToolServiceClient(remote).call_tool(name, arguments))
    else:
        dispatcher = build_dispatcher(_config(ctx))
        result = dispatcher.call_tool(name, arguments)
    _finish(result)


def _finish(result: ToolResult) -> None:
    ConsolePrinter().print_result(result)
    if result.is_error:
        raise typer.Exit(code=1)


def _parse_json(value: str, option: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"not valid JSON: {exc}", param_hint=option) from exc


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("web-scraper-tool"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[Optional[str], typer.Option("--host", help="Binding address.")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="HTTP port.")] = None,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes.")] = False,
) -> None:
    """Run the HTTP tool service."""

    import uvicorn

    from . import service

    config = _config(ctx)
    service.state = service.ServiceState(config)
    uvicorn.run(
        service.app,
        host=host or config.service.host,
        port=port or config.service.port,
        reload=reload,
    )


@app.command()
def tools(ctx: typer.Context, remote: RemoteOption = None) -> None:
    """List the available tools."""

    if remote:
        described = asyncio.run(ToolServiceClient(remote).list_tools())
        listing = [item.model_dump() for item in described]
    else:
        listing = build_dispatcher(_config(ctx)).list_tools()
    ConsolePrinter().print_tools(listing)


@app.command()
def call(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Tool name, e.g. scrape_page.")],
    arguments: Annotated[
        str,
        typer.Option("--args", "-a", help="Tool arguments as a JSON object."),
    ] = "{}",
    remote: RemoteOption = None,
) -> None:
    """Call any tool with raw JSON arguments."""

    parsed = _parse_json(arguments, "--args")
    if not isinstance(parsed, dict):
        raise typer.BadParameter("expected a JSON object", param_hint="--args")
    _run_tool(ctx, name, parsed, remote)


@app.command()
def scrape(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL to scrape.")],
    selector: Annotated[
        Optional[str],
        typer.Option("--selector", "-s", help="Only return text of matching elements."),
    ] = None,
    wait_for: Annotated[
        Optional[str],
        typer.Option("--wait-for", help='Milliseconds ("2000") or a selector to wait for.'),
    ] = None,
    screenshot: Annotated[
        bool,
        typer.Option("--screenshot", help="Save a full-page screenshot."),
    ] = False,
    browser: BrowserOption = None,
    remote: RemoteOption = None,
) -> None:
    """Scrape the text content of a page."""

    arguments: dict[str, Any] = {"url": url, "screenshot": screenshot}
    if selector:
        arguments["selector"] = selector
    if wait_for:
        arguments["waitFor"] = wait_for
    if browser:
        arguments["browser"] = browser
    _run_tool(ctx, "scrape_page", arguments, remote)


@app.command("test-app")
def test_app(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL of the app under test.")],
    actions: Annotated[
        Optional[str],
        typer.Option("--actions", help="Actions as a JSON array."),
    ] = None,
    actions_file: Annotated[
        Optional[Path],
        typer.Option("--actions-file", help="YAML or JSON file holding the action list."),
    ] = None,
    browser: BrowserOption = None,
    remote: RemoteOption = None,
) -> None:
    """Run an ordered list of actions and report every step."""

    if actions_file is not None:
        steps = yaml.safe_load(actions_file.read_text()) or []
    elif actions is not None:
        steps = _parse_json(actions, "--actions")
    else:
        raise typer.BadParameter("provide --actions or --actions-file")
    if not isinstance(steps, list):
        raise typer.BadParameter("the action list must be an array")
    arguments: dict[str, Any] = {"url": url, "actions": steps}
    if browser:
        arguments["browser"] = browser
    _run_tool(ctx, "test_react_app", arguments, remote)


@app.command("page-info")
def page_info(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL to analyze.")],
    performance: Annotated[
        bool,
        typer.Option("--performance/--no-performance", help="Include performance metrics."),
    ] = False,
    browser: BrowserOption = None,
    remote: RemoteOption = None,
) -> None:
    """Show title, meta tags, headings and element counts of a page."""

    arguments: dict[str, Any] = {"url": url, "includePerformance": performance}
    if browser:
        arguments["browser"] = browser
    _run_tool(ctx, "get_page_info", arguments, remote)


@app.command("wait-for")
def wait_for(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="URL to monitor.")],
    selector: Annotated[str, typer.Argument(help="CSS selector to wait for.")],
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", "-t", help="Maximum wait in milliseconds."),
    ] = None,
    browser: BrowserOption = None,
    remote: RemoteOption = None,
) -> None:
    """Wait until an element appears and report its visibility and text."""

    arguments: dict[str, Any] = {"url": url, "selector": selector}
    if timeout is not None:
        arguments["timeout"] = timeout
    if browser:
        arguments["browser"] = browser
    _run_tool(ctx, "wait_for_element", arguments, remote)


if __name__ == "__main__":
    app()
