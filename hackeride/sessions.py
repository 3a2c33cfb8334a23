"""Registro de sesiones de búsqueda OSINT pendientes de transmitir.

Guarda ``session_id -> consulta`` desde que se acepta la búsqueda hasta
que su stream SSE termina. Usa un hash de Redis cuando hay ``REDIS_URL``
(para compartir sesiones entre workers) y un dict en memoria si no.
"""

from __future__ import annotations

import os
import uuid

import redis


class LookupSessionRegistry:
    """Mapa sin expulsión de sesiones abiertas."""

    key = "osint:sessions"

    def __init__(self, redis_url: str | None = None) -> None:
        self.redis_url = redis_url or os.getenv("REDIS_URL")
        self._client = redis.from_url(self.redis_url, decode_responses=True) if self.redis_url else None
        self._memory: dict[str, str] = {}

    def create(self, query: str) -> str:
        session_id = str(uuid.uuid4())
        if self._client:
            self._client.hset(self.key, session_id, query)
        else:
            self._memory[session_id] = query
        return session_id

    def get(self, session_id: str) -> str | None:
        if self._client:
            return self._client.hget(self.key, session_id)
        return self._memory.get(session_id)

    def exists(self, session_id: str) -> bool:
        return self.get(session_id) is not None

    def discard(self, session_id: str) -> None:
        if self._client:
            self._client.hdel(self.key, session_id)
        else:
            self._memory.pop(session_id, None)

    def __len__(self) -> int:
        if self._client:
            return int(self._client.hlen(self.key))
        return len(self._memory)
