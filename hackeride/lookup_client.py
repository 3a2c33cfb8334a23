"""Cliente asíncrono para el flujo de búsqueda OSINT.

Registra la búsqueda con ``POST /api/lookup`` (HTTP Basic) y después lee
el stream SSE ``/api/stream/{sessionId}`` devolviendo cada mensaje ya
decodificado. Sirve tanto contra un servidor real (``http(s)://``) como
contra la app en memoria pasando un ``transport`` de httpx.
"""

from __future__ import annotations

import json
from types import TracebackType
from typing import Any, AsyncIterator

import httpx


class LookupClient:
    """Cliente mínimo de terminal para Footprint-X."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=(username, password),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "LookupClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self._client.aclose()

    async def start(self, query: str) -> str:
        response = await self._client.post("/api/lookup", json={"query": query})
        response.raise_for_status()
        return response.json()["sessionId"]

    async def stream(self, session_id: str) -> AsyncIterator[dict[str, Any]]:
        async with self._client.stream("GET", f"/api/stream/{session_id}") as response:
            response.raise_for_status()
            async for line in response.aiter_lines():
                if line.startswith("data: "):
                    yield json.loads(line[len("data: "):])

    async def lookup(self, query: str) -> AsyncIterator[dict[str, Any]]:
        session_id = await self.start(query)
        async for message in self.stream(session_id):
            yield message


def format_result(result: dict[str, Any]) -> list[str]:
    """Líneas de terminal para un mensaje: ``[source] message`` y sus datos."""

    lines = [f"[{result.get('source')}] {result.get('message')}"]
    for key, value in (result.get("data") or {}).items():
        if key == "demo_mode":
            continue
        lines.append(f"  {key}: {value}")
    return lines
