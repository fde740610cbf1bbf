# tests/test_config.py
import pytest

from config import Settings

ENV_VARS = [
    "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY",
    "SUPABASE_JWT_SECRET", "GHL_WEBHOOK_SECRET", "GHL_WEBHOOK_SECRET_HEADER", "GHL_INBOUND_WEBHOOK_URL",
    "GHL_NOTIFY_TIMEOUT_SECS", "APP_URL", "FRONTEND_URL", "INVITE_TTL_DAYS", "AVATAR_BUCKET", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_and_missing_settings():
    settings = Settings.from_env()

    assert settings.webhook_secret_header == "x-agm-secret"
    assert settings.notify_timeout_secs == 5.0
    assert settings.invite_ttl_days is None
    assert settings.avatar_bucket == "avatars"
    assert settings.missing() == [
        "SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_JWT_SECRET", "GHL_WEBHOOK_SECRET",
    ]
    with pytest.raises(RuntimeError, match="GHL_WEBHOOK_SECRET"):
        settings.validate()


def test_fallback_variables(monkeypatch):
    monkeypatch.setenv("NEXT_PUBLIC_SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "anon-or-service")
    monkeypatch.setenv("SUPABASE_JWT_SECRET", "jwt")
    monkeypatch.setenv("GHL_WEBHOOK_SECRET", "  shared  ")
    monkeypatch.setenv("FRONTEND_URL", "https://dojo.example/")

    settings = Settings.from_env().validate()

    assert settings.supabase_url == "https://project.supabase.co"
    assert settings.supabase_key == "anon-or-service"
    assert settings.webhook_secret == "shared"
    assert settings.app_url == "https://dojo.example"
    assert "https://dojo.example" in settings.cors_origins


def test_service_role_key_preferred(monkeypatch):
    monkeypatch.setenv("SUPABASE_KEY", "anon")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")

    assert Settings.from_env().supabase_key == "service"


@pytest.mark.parametrize("raw, expected", [("14", 14), ("0", None), ("-3", None), ("soon", None)])
def test_invite_ttl(monkeypatch, raw, expected):
    monkeypatch.setenv("INVITE_TTL_DAYS", raw)

    assert Settings.from_env().invite_ttl_days == expected
