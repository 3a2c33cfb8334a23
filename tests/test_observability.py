import pathlib
import sys

from fastapi.testclient import TestClient

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from hackeride import api  # noqa: E402
from hackeride.api import app  # noqa: E402
from hackeride.auth import BasicCredentialChecker, get_password_hash, verify_password  # noqa: E402
from hackeride.config import DEMO_KEY, AppSettings  # noqa: E402
from hackeride.database import get_engine  # noqa: E402
from hackeride.observability import format_request_line  # noqa: E402


def test_request_line_format():
    assert format_request_line("GET", "/api/projects", 200, 0.0123) == "GET /api/projects 200 in 12ms"


def test_request_line_is_truncated():
    line = format_request_line("GET", "/api/stream/" + "x" * 100, 200, 1.5)
    assert len(line) == 80
    assert line.endswith("…")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("STREAM_DELAY_MS", "250")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.delenv("NUMVERIFY_KEY", raising=False)
    monkeypatch.delenv("REDIS_URL", raising=False)

    settings = AppSettings.from_env()

    assert settings.port == 8080
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.stream_delay_seconds == 0.25
    assert settings.log_level == "DEBUG"
    assert settings.numverify_key == DEMO_KEY
    assert settings.redis_url is None


def test_password_hash_round_trip():
    hashed = get_password_hash("admin123")
    assert hashed != "admin123"
    assert verify_password("admin123", hashed)
    assert not verify_password("admin124", hashed)


def test_credential_checker():
    checker = BasicCredentialChecker("admin", "admin123")
    assert checker.is_valid("admin", "admin123")
    assert not checker.is_valid("root", "admin123")
    assert not checker.is_valid("admin", "")


def test_metrics_endpoint_exposes_counters():
    client = TestClient(app)
    client.get("/api/languages")

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "hackeride_api_latency_seconds" in response.text


def test_default_engine_follows_settings(monkeypatch):
    assert api.engine is get_engine(api.settings.database_url)

    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    assert AppSettings.from_env().database_url == "sqlite:///:memory:"
    assert get_engine() is get_engine("sqlite:///:memory:")
    assert get_engine() is not api.engine
