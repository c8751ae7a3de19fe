"""
tests/test_config.py -- Settings validation: required secrets are fatal.

Settings is constructed directly with _env_file=None so a developer's local
.env cannot leak into these tests; the cached get_settings() is untouched.
"""

from __future__ import annotations

import pytest

from core.config import ConfigurationMissing, Settings

REQUIRED = ("SECRET_KEY", "FACEBOOK_APP_ID", "FACEBOOK_APP_SECRET")


@pytest.mark.parametrize("missing", REQUIRED)
def test_missing_required_setting_is_fatal(monkeypatch: pytest.MonkeyPatch, missing: str) -> None:
    monkeypatch.delenv(missing, raising=False)
    with pytest.raises(ConfigurationMissing) as exc_info:
        Settings(_env_file=None)
    assert missing in str(exc_info.value)


def test_error_names_variables_not_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FACEBOOK_APP_ID", raising=False)
    monkeypatch.setenv("FACEBOOK_APP_SECRET", "very-private-app-secret")
    with pytest.raises(ConfigurationMissing) as exc_info:
        Settings(_env_file=None)
    assert "very-private-app-secret" not in str(exc_info.value)


def test_short_secret_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SECRET_KEY", "too-short")
    with pytest.raises(ConfigurationMissing):
        Settings(_env_file=None)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ALLOWED_USERS", raising=False)
    monkeypatch.delenv("TOKEN_EXPIRE_DAYS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.token_issuer == "myapi.com"
    assert settings.token_audience == "myapi.com"
    assert settings.token_expire_days == 7
    assert settings.default_role == "User"
    assert settings.allowed_users == ["Prerak"]


def test_allowed_users_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_USERS", '["Prerak", "Asha"]')
    assert Settings(_env_file=None).allowed_users == ["Prerak", "Asha"]


def test_default_hosts_are_local_only(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ALLOWED_HOSTS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.allowed_hosts == ["localhost", "127.0.0.1", "*.localhost"]
    assert not hasattr(settings, "debug")
