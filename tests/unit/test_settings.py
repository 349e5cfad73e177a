"""Testes unitários para config/settings.py.

Valida defaults, parsing das credenciais e métodos de validação.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tiktok_relay.config.settings import (
    DEFAULT_CAPTION_PREFIX,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    Settings,
    get_settings,
)


class TestSettingsDefaults:
    """Testes para valores padrão de Settings."""

    def test_default_timeout_is_bounded(self) -> None:
        """Toda chamada de saída tem timeout finito."""
        s = Settings()
        assert s.http_timeout_seconds == DEFAULT_HTTP_TIMEOUT_SECONDS
        assert 0 < s.http_timeout_seconds <= 120

    def test_default_caption_prefix(self) -> None:
        s = Settings()
        assert s.caption_prefix == DEFAULT_CAPTION_PREFIX

    def test_default_server_values(self) -> None:
        s = Settings(host="0.0.0.0", port=8080, shutdown_grace_seconds=5)
        assert s.port == 8080
        assert s.shutdown_grace_seconds == 5


class TestCredentialSet:
    """Testes para parsing de RAPIDAPI_KEYS."""

    def test_keeps_configured_order(self) -> None:
        s = Settings(rapidapi_keys="k3,k1,k2")
        assert s.credential_set == ("k3", "k1", "k2")

    def test_strips_whitespace_and_drops_empty_items(self) -> None:
        s = Settings(rapidapi_keys=" k1 , ,k2,")
        assert s.credential_set == ("k1", "k2")

    def test_empty_string_yields_empty_set(self) -> None:
        s = Settings(rapidapi_keys="")
        assert s.credential_set == ()

    def test_reads_comma_separated_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAPIDAPI_KEYS", "alpha,beta")
        monkeypatch.setenv("SESSION_ID", "ruli2")
        s = Settings()
        assert s.credential_set == ("alpha", "beta")
        assert s.session_id == "ruli2"


class TestSettingsValidation:
    """Testes para métodos validate_*."""

    def test_lookup_config_missing_host_and_keys(self) -> None:
        s = Settings(rapidapi_host="", rapidapi_keys="")
        errors = s.validate_lookup_config()
        assert any("RAPIDAPI_HOST" in e for e in errors)
        assert any("RAPIDAPI_KEYS" in e for e in errors)

    def test_lookup_config_ok(self) -> None:
        s = Settings(rapidapi_host="api.test", rapidapi_keys="k1")
        assert s.validate_lookup_config() == []

    def test_gateway_config_requires_url_and_session(self) -> None:
        s = Settings(wa_api_url="", session_id="")
        errors = s.validate_gateway_config()
        assert any("WA_API_URL" in e for e in errors)
        assert any("SESSION_ID" in e for e in errors)

    def test_server_config_rejects_non_positive_timeout(self) -> None:
        s = Settings(http_timeout_seconds=0)
        assert any("HTTP_TIMEOUT_SECONDS" in e for e in s.validate_server_config())

    def test_server_config_rejects_unknown_log_format(self) -> None:
        s = Settings(log_format="xml")
        assert any("LOG_FORMAT" in e for e in s.validate_server_config())


class TestGetSettings:
    def test_get_settings_is_cached(self) -> None:
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()

    def test_settings_are_immutable(self) -> None:
        s = Settings(session_id="abc")
        with pytest.raises(ValidationError):
            s.session_id = "other"  # type: ignore[misc]
