"""Clientes HTTP para búsquedas OSINT (Numverify, Clearbit e IPStack).

Cada servicio tiene un modo demo, activo cuando su clave es ``demo_key``,
que devuelve un payload fijo sin tocar la red. Con una clave real se llama
a la API del proveedor con ``httpx``; cualquier fallo se convierte en un
resultado con ``success=False`` en lugar de propagarse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import httpx

from ..config import DEMO_KEY, AppSettings


logger = logging.getLogger(__name__)


@dataclass
class LookupResult:
    """Mensaje individual del stream de búsqueda."""

    source: str
    type: str
    query: str
    session_id: str
    success: bool = False
    message: str = ""
    data: dict[str, Any] | None = None
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "source": self.source,
            "type": self.type,
            "query": self.query,
            "success": self.success,
            "message": self.message,
            "timestamp": self.timestamp,
            "sessionId": self.session_id,
        }
        if self.data is not None:
            payload["data"] = self.data
        return payload


class LookupService:
    """Base común: clave, timeout y llamada HTTP que tolera fallos."""

    source = "base"
    query_type = "base"
    success_message = ""
    failure_message = ""

    def __init__(
        self,
        api_key: str = DEMO_KEY,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def demo_mode(self) -> bool:
        return self.api_key == DEMO_KEY

    async def _fetch(self, query: str, session_id: str, url: str, **request_kwargs: Any) -> LookupResult:
        result = LookupResult(source=self.source, type=self.query_type, query=query, session_id=session_id)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, **request_kwargs)
                response.raise_for_status()
                data = response.json()
        except Exception as exc:
            logger.warning("%s falló para %r: %s", self.source, query, exc)
            result.message = self.failure_message
            return result

        result.success = True
        result.data = data
        result.message = self.success_message
        return result


class PhoneInfoService(LookupService):
    """Validación de números de teléfono con Numverify."""

    source = "Numverify"
    query_type = "phone"
    success_message = "Phone lookup completed successfully"
    failure_message = "Failed to lookup phone number"
    base_url = "http://apilayer.net/api/validate"

    async def lookup_phone(self, phone_number: str, session_id: str) -> LookupResult:
        if self.demo_mode:
            return demo_phone_result(phone_number, session_id)
        params = {"access_key": self.api_key, "number": phone_number}
        return await self._fetch(phone_number, session_id, self.base_url, params=params)


class EmailInfoService(LookupService):
    """Enriquecimiento de personas/empresas a partir del correo con Clearbit."""

    source = "Clearbit"
    query_type = "email"
    success_message = "Email lookup completed successfully"
    failure_message = "Failed to lookup email"
    base_url = "https://person.clearbit.com/v2/combined/find"

    async def lookup_email(self, email: str, session_id: str) -> LookupResult:
        if self.demo_mode:
            return demo_email_result(email, session_id)
        return await self._fetch(
            email,
            session_id,
            self.base_url,
            params={"email": email},
            headers={"Authorization": f"Bearer {self.api_key}"},
        )


class GeoIPService(LookupService):
    """Geolocalización de direcciones IP con IPStack."""

    source = "IPStack"
    query_type = "ip"
    success_message = "IP geolocation lookup completed successfully"
    failure_message = "Failed to lookup IP address"
    base_url = "http://api.ipstack.com"

    async def lookup_ip(self, ip_address: str, session_id: str) -> LookupResult:
        if self.demo_mode:
            return demo_ip_result(ip_address, session_id)
        return await self._fetch(
            ip_address,
            session_id,
            f"{self.base_url}/{ip_address}",
            params={"access_key": self.api_key},
        )


# Payloads de demostración ---------------------------------------------------

def demo_phone_result(phone_number: str, session_id: str) -> LookupResult:
    return LookupResult(
        source="Numverify (Demo)",
        type="phone",
        query=phone_number,
        session_id=session_id,
        success=True,
        message="Demo phone lookup completed",
        data={
            "number": phone_number,
            "valid": True,
            "country_code": "US",
            "country_name": "United States of America",
            "location": "California",
            "carrier": "Demo Carrier",
            "line_type": "mobile",
            "demo_mode": True,
        },
    )


def demo_email_result(email: str, session_id: str) -> LookupResult:
    return LookupResult(
        source="Clearbit (Demo)",
        type="email",
        query=email,
        session_id=session_id,
        success=True,
        message="Demo email lookup completed",
        data={
            "person": {
                "email": email,
                "name": "John Demo User",
                "location": "San Francisco, CA",
                "title": "Software Engineer",
                "linkedin": "https://linkedin.com/in/demo-user",
                "twitter": "https://twitter.com/demo_user",
            },
            "company": {
                "name": "Demo Tech Corp",
                "domain": "demotechcorp.com",
                "industry": "Technology",
                "size": "100-500",
            },
            "demo_mode": True,
        },
    )


def demo_ip_result(ip_address: str, session_id: str) -> LookupResult:
    return LookupResult(
        source="IPStack (Demo)",
        type="ip",
        query=ip_address,
        session_id=session_id,
        success=True,
        message="Demo IP lookup completed",
        data={
            "ip": ip_address,
            "country_code": "US",
            "country_name": "United States",
            "region_code": "CA",
            "region_name": "California",
            "city": "San Francisco",
            "zip": "94102",
            "latitude": 37.7749,
            "longitude": -122.4194,
            "connection_type": "Corporate",
            "isp": "Demo Internet Provider",
            "demo_mode": True,
        },
    )


@dataclass
class LookupServices:
    """Los tres proveedores configurados juntos."""

    phone: PhoneInfoService
    email: EmailInfoService
    geo: GeoIPService

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "LookupServices":
        return cls(
            phone=PhoneInfoService(settings.numverify_key, timeout=settings.lookup_timeout),
            email=EmailInfoService(settings.clearbit_key, timeout=settings.lookup_timeout),
            geo=GeoIPService(settings.ipstack_key, timeout=settings.lookup_timeout),
        )
