"""Settings validation."""

import pytest
from pydantic import ValidationError

from coursehub.config import Settings


def test_defaults():
    s = Settings(_env_file=None)
    assert s.session_ttl_seconds == 24 * 60 * 60
    assert s.api_prefix == "/api"
    assert s.session_backend == "database"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("COURSEHUB_PORT", "8123")
    monkeypatch.setenv("COURSEHUB_SESSION_TTL_HOURS", "2")
    s = Settings()
    assert s.port == 8123
    assert s.session_ttl_seconds == 7200


def test_production_requires_secret():
    with pytest.raises(ValidationError):
        Settings(environment="production")
    Settings(environment="production", session_secret="a-real-secret")


def test_unknown_session_backend_rejected():
    with pytest.raises(ValidationError):
        Settings(session_backend="memcached")
