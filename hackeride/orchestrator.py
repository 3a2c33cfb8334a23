"""Clasificación de consultas OSINT y secuencia de mensajes de una búsqueda."""

from __future__ import annotations

import logging
import re
from typing import AsyncIterator

from .integrations.lookups import LookupResult, LookupServices
from .observability import record_lookup


logger = logging.getLogger(__name__)

PHONE_PATTERNS = (
    re.compile(r"^\+?[1-9]\d{1,14}$", re.ASCII),
    re.compile(r"^\d{10,15}$", re.ASCII),
)
IP_PATTERN = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$", re.ASCII)
NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$", re.ASCII)

UNKNOWN_QUERY_MESSAGE = "Unknown query type. Try: phone number, email, IP address, or person name"
COMPLETED_MESSAGE = "OSINT lookup completed. Type another query or 'help' for commands."


def detect_query_type(query: str) -> str:
    """Devuelve ``phone``, ``email``, ``ip``, ``name`` o ``unknown``."""

    query = query.strip().lower()

    if any(pattern.match(query) for pattern in PHONE_PATTERNS):
        return "phone"
    if "@" in query and "." in query:
        return "email"
    if IP_PATTERN.match(query):
        return "ip"
    if NAME_PATTERN.match(query):
        return "name"
    return "unknown"


def system_message(query: str, session_id: str, message: str, *, error: bool = False) -> LookupResult:
    return LookupResult(
        source="System",
        type="error" if error else "status",
        query=query,
        session_id=session_id,
        success=not error,
        message=message,
    )


class OsintOrchestrator:
    """Encadena mensaje de inicio, resultados del proveedor y mensaje final."""

    def __init__(self, services: LookupServices) -> None:
        self.services = services

    async def perform_lookup(self, query: str, session_id: str) -> AsyncIterator[LookupResult]:
        query_type = detect_query_type(query)
        logger.info("Búsqueda %s: %r detectada como %s", session_id, query, query_type)

        yield system_message(
            query,
            session_id,
            f"Starting OSINT lookup for: {query} (detected as: {query_type})",
        )

        try:
            results = await self._lookup(query, query_type, session_id)
        except Exception as exc:
            logger.exception("Error en la búsqueda %s", session_id)
            results = [system_message(query, session_id, f"Error during lookup: {exc}", error=True)]

        for result in results:
            record_lookup(query_type, result.success)
            yield result

        yield system_message("", session_id, COMPLETED_MESSAGE)

    async def _lookup(self, query: str, query_type: str, session_id: str) -> list[LookupResult]:
        if query_type == "phone":
            return [await self.services.phone.lookup_phone(query, session_id)]
        if query_type == "email":
            return [await self.services.email.lookup_email(query, session_id)]
        if query_type == "ip":
            return [await self.services.geo.lookup_ip(query, session_id)]
        if query_type == "name":
            email_result = await self.services.email.lookup_email(f"{query}@gmail.com", session_id)
            social = LookupResult(
                source="Social Search (Demo)",
                type="name",
                query=query,
                session_id=session_id,
                success=True,
                message=f"Social media search completed for: {query}",
            )
            return [email_result, social]
        return [system_message(query, session_id, UNKNOWN_QUERY_MESSAGE, error=True)]
