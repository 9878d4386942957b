"""HTTP client for a running web scraper tool service."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel

from .models import ToolResult


class ToolDescription(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class ServiceHealth(BaseModel):
    browser: Dict[str, Any]
    engines: List[str]
    default_engine: str
    active_sessions: int


class ToolServiceClient:
    """Wrapper around the tool service HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def list_tools(self) -> List[ToolDescription]:
        async with self._client() as client:
            response = await client.get("/tools")
            response.raise_for_status()
            data = response.json()
        return [ToolDescription.model_validate(item) for item in data]

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> ToolResult:
        payload = {"arguments": dict(arguments or {})}
        async with self._client() as client:
            response = await client.post(f"/tools/{name}", json=payload)
            response.raise_for_status()
            data = response.json()
        return ToolResult.model_validate(data)

    async def get_health(self) -> ServiceHealth:
        async with self._client() as client:
            response = await client.get("/health")
            response.raise_for_status()
            data = response.json()
        return ServiceHealth.model_validate(data)
