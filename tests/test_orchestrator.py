import asyncio
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride.integrations.lookups import (  # noqa: E402
    EmailInfoService,
    GeoIPService,
    LookupServices,
    PhoneInfoService,
)
from hackeride.orchestrator import (  # noqa: E402
    COMPLETED_MESSAGE,
    UNKNOWN_QUERY_MESSAGE,
    OsintOrchestrator,
)


class BrokenGeoService(GeoIPService):
    async def lookup_ip(self, ip, session_id):
        raise RuntimeError("provider exploded")


def _demo_services(geo=None):
    return LookupServices(
        phone=PhoneInfoService(),
        email=EmailInfoService(),
        geo=geo or GeoIPService(),
    )


def _collect(orchestrator, query, session_id="sess-1"):
    async def gather():
        return [message async for message in orchestrator.perform_lookup(query, session_id)]

    return asyncio.run(gather())


def test_phone_lookup_sequence():
    messages = _collect(OsintOrchestrator(_demo_services()), "+14155552671")

    assert [m.source for m in messages] == ["System", "Numverify (Demo)", "System"]
    assert messages[0].message == "Starting OSINT lookup for: +14155552671 (detected as: phone)"
    assert messages[0].type == "status"
    assert messages[0].success is True
    assert messages[-1].message == COMPLETED_MESSAGE
    assert messages[-1].query == ""
    assert all(m.session_id == "sess-1" for m in messages)


def test_name_lookup_emits_email_and_social_results():
    messages = _collect(OsintOrchestrator(_demo_services()), "Jane Doe")

    assert len(messages) == 4
    assert messages[0].message.endswith("(detected as: name)")
    assert messages[1].source == "Clearbit (Demo)"
    assert messages[1].data["person"]["email"] == "Jane Doe@gmail.com"
    assert messages[2].source == "Social Search (Demo)"
    assert messages[2].type == "name"
    assert messages[2].message == "Social media search completed for: Jane Doe"
    assert messages[3].message == COMPLETED_MESSAGE


def test_unknown_query_reports_error():
    messages = _collect(OsintOrchestrator(_demo_services()), "john_doe!")

    assert len(messages) == 3
    assert messages[1].source == "System"
    assert messages[1].type == "error"
    assert messages[1].success is False
    assert messages[1].message == UNKNOWN_QUERY_MESSAGE


def test_provider_exception_becomes_error_message():
    messages = _collect(OsintOrchestrator(_demo_services(geo=BrokenGeoService())), "10.0.0.1")

    assert len(messages) == 3
    assert messages[1].type == "error"
    assert messages[1].message == "Error during lookup: provider exploded"
    assert messages[2].message == COMPLETED_MESSAGE
