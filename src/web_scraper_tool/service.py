"""HTTP service exposing the scraping tools."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .config import ToolConfig, load_config
from .dispatcher import ToolDispatcher
from .errors import ToolError, describe
from .factory import build_dispatcher
from .models import EngineKind, ToolResult

CONFIG_PATH = os.environ.get("WEB_SCRAPER_TOOL_CONFIG_FILE")
app = FastAPI(title="Web Scraper Tool")


class ToolCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ToolDescriptor(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


# Service state ---------------------------------------------------------------


class ServiceState:
    def __init__(self, config: ToolConfig, dispatcher: Optional[ToolDispatcher] = None) -> None:
        self._config = config
        self._dispatcher = dispatcher or build_dispatcher(config)

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    def health(self) -> Dict[str, Any]:
        return {
            "browser": self._check_browser(),
            "engines": [kind.value for kind in EngineKind],
            "default_engine": self._config.browser.default_engine.value,
            "active_sessions": self._dispatcher.sessions.active_sessions,
        }

    def _check_browser(self) -> Dict[str, Any]:
        engine = self._config.browser.default_engine
        try:
            with self._dispatcher.sessions.session(engine):
                pass
        except ToolError as exc:
            return {"status": "error", "engine": engine.value, "detail": describe(exc)}
        return {"status": "available", "engine": engine.value}


state = ServiceState(load_config(Path(CONFIG_PATH) if CONFIG_PATH else None))


# API routes -----------------------------------------------------------------


@app.get("/health")
def get_health() -> Dict[str, Any]:
    return state.health()


@app.get("/tools", response_model=List[ToolDescriptor])
def list_tools() -> List[Dict[str, Any]]:
    return state.dispatcher.list_tools()


@app.post("/tools/{name}", response_model=ToolResult)
def call_tool(name: str, payload: ToolCallRequest) -> ToolResult:
    # Sync on purpose: each call gets its own worker thread.
    if not state.dispatcher.has_tool(name):
        raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")
    return state.dispatcher.call_tool(name, payload.arguments)
