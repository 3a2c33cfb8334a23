"""Difusión de la salida de terminal a los clientes WebSocket de cada proyecto."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from .observability import TERMINAL_CONNECTIONS


logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "\x1b[32mHackerIDE Terminal v2.1.0 - Connected\x1b[0m\r\n"


class TerminalHub:
    """Agrupa conexiones abiertas por proyecto y les reenvía mensajes."""

    def __init__(self) -> None:
        self._connections: dict[int, set[WebSocket]] = {}

    async def register(self, project_id: int, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.setdefault(project_id, set()).add(websocket)
        TERMINAL_CONNECTIONS.inc()
        logger.info("Terminal conectada al proyecto %s", project_id)
        await websocket.send_json({"type": "output", "data": WELCOME_MESSAGE})

    def unregister(self, project_id: int, websocket: WebSocket) -> None:
        connections = self._connections.get(project_id)
        if not connections or websocket not in connections:
            return
        connections.discard(websocket)
        TERMINAL_CONNECTIONS.dec()
        if not connections:
            del self._connections[project_id]

    def connection_count(self, project_id: int) -> int:
        return len(self._connections.get(project_id, ()))

    async def broadcast(self, project_id: int, message: dict[str, Any]) -> None:
        """Envía el mensaje a todas las terminales del proyecto."""

        stale: list[WebSocket] = []
        for connection in list(self._connections.get(project_id, ())):
            try:
                await connection.send_json(message)
            except Exception as exc:  # pragma: no cover - desconexiones inesperadas
                logger.debug("Descartando terminal del proyecto %s: %s", project_id, exc)
                stale.append(connection)
        for connection in stale:
            self.unregister(project_id, connection)
