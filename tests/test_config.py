"""Tests for configuration parsing."""

import pytest

from nutriai.config import Settings, parse_storage_backend


def test_parse_storage_backend_defaults_to_file() -> None:
    assert parse_storage_backend(None) == "file"
    assert parse_storage_backend("  ") == "file"
    assert parse_storage_backend(" Memory ") == "memory"
    assert parse_storage_backend("supabase") == "supabase"


def test_parse_storage_backend_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown storage backend"):
        parse_storage_backend("redis")


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("REMINDER_POLL_SECONDS", "5")
    monkeypatch.setenv("FALLBACK_SEED", "42")

    settings = Settings()

    assert settings.api_base_url == "https://api.example.com"
    assert settings.reminder_poll_seconds == 5
    assert settings.fallback_seed == 42
    assert settings.demo_token == "demo-token"
