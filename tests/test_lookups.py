import asyncio
import pathlib
import sys

import httpx

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride.config import AppSettings  # noqa: E402
from hackeride.integrations.lookups import (  # noqa: E402
    EmailInfoService,
    GeoIPService,
    LookupResult,
    LookupServices,
    PhoneInfoService,
)


def test_demo_phone_payload():
    result = asyncio.run(PhoneInfoService().lookup_phone("+14155552671", "s-1"))

    assert result.source == "Numverify (Demo)"
    assert result.type == "phone"
    assert result.success is True
    assert result.message == "Demo phone lookup completed"
    assert result.data == {
        "number": "+14155552671",
        "valid": True,
        "country_code": "US",
        "country_name": "United States of America",
        "location": "California",
        "carrier": "Demo Carrier",
        "line_type": "mobile",
        "demo_mode": True,
    }


def test_demo_email_payload():
    result = asyncio.run(EmailInfoService().lookup_email("user@example.com", "s-2"))

    assert result.source == "Clearbit (Demo)"
    assert result.message == "Demo email lookup completed"
    assert result.data["person"]["email"] == "user@example.com"
    assert result.data["person"]["name"] == "John Demo User"
    assert result.data["company"] == {
        "name": "Demo Tech Corp",
        "domain": "demotechcorp.com",
        "industry": "Technology",
        "size": "100-500",
    }
    assert result.data["demo_mode"] is True


def test_demo_ip_payload():
    result = asyncio.run(GeoIPService().lookup_ip("8.8.8.8", "s-3"))

    assert result.source == "IPStack (Demo)"
    assert result.data["ip"] == "8.8.8.8"
    assert result.data["city"] == "San Francisco"
    assert result.data["latitude"] == 37.7749
    assert result.data["longitude"] == -122.4194


def test_live_phone_lookup_sends_key_and_number():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"valid": True, "carrier": "Real Carrier"})

    service = PhoneInfoService("live-key", transport=httpx.MockTransport(handler))
    result = asyncio.run(service.lookup_phone("+14155552671", "s-4"))

    assert result.source == "Numverify"
    assert result.success is True
    assert result.message == "Phone lookup completed successfully"
    assert result.data == {"valid": True, "carrier": "Real Carrier"}
    assert seen[0].url.host == "apilayer.net"
    assert seen[0].url.params["access_key"] == "live-key"
    assert seen[0].url.params["number"] == "+14155552671"


def test_live_email_lookup_uses_bearer_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer clearbit-key"
        assert request.url.params["email"] == "user@example.com"
        return httpx.Response(200, json={"person": {"name": "Real Person"}})

    service = EmailInfoService("clearbit-key", transport=httpx.MockTransport(handler))
    result = asyncio.run(service.lookup_email("user@example.com", "s-5"))

    assert result.success is True
    assert result.data["person"]["name"] == "Real Person"


def test_live_ip_lookup_puts_address_in_path():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/1.1.1.1"
        return httpx.Response(200, json={"ip": "1.1.1.1", "city": "Sydney"})

    service = GeoIPService("ipstack-key", transport=httpx.MockTransport(handler))
    result = asyncio.run(service.lookup_ip("1.1.1.1", "s-6"))

    assert result.success is True
    assert result.message == "IP geolocation lookup completed successfully"


def test_provider_error_status_becomes_failed_result():
    service = GeoIPService(
        "ipstack-key",
        transport=httpx.MockTransport(lambda request: httpx.Response(503, text="down")),
    )
    result = asyncio.run(service.lookup_ip("1.1.1.1", "s-7"))

    assert result.success is False
    assert result.message == "Failed to lookup IP address"
    assert result.data is None


def test_transport_error_becomes_failed_result():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    service = EmailInfoService("clearbit-key", transport=httpx.MockTransport(handler))
    result = asyncio.run(service.lookup_email("user@example.com", "s-8"))

    assert result.success is False
    assert result.message == "Failed to lookup email"


def test_result_serialization_omits_missing_data():
    result = LookupResult(source="System", type="status", query="q", session_id="abc", success=True, message="hi")
    payload = result.to_dict()

    assert payload["sessionId"] == "abc"
    assert "data" not in payload
    assert set(payload) == {"source", "type", "query", "success", "message", "timestamp", "sessionId"}


def test_services_from_settings_default_to_demo_mode():
    services = LookupServices.from_settings(AppSettings())
    assert services.phone.demo_mode
    assert services.email.demo_mode
    assert services.geo.demo_mode

    live = LookupServices.from_settings(AppSettings(numverify_key="real", lookup_timeout=3.0))
    assert not live.phone.demo_mode
    assert live.phone.timeout == 3.0
