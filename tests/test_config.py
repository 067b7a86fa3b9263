from __future__ import annotations

import pytest

from oauth_login.utils.config import (
    COGNITO_REQUIRED_VARS,
    SERVER_REQUIRED_VARS,
    ConfigurationError,
    DevelopmentConfig,
    ProductionConfig,
    get_config,
)


def test_environment_selects_config_class(monkeypatch):
    assert isinstance(get_config(), DevelopmentConfig)
    monkeypatch.setenv("ENVIRONMENT", "production")
    config = get_config()
    assert isinstance(config, ProductionConfig)
    assert config.COOKIE_SECURE is True


def test_development_cookies_are_not_secure():
    assert get_config().COOKIE_SECURE is False


def test_missing_variables_are_all_reported(monkeypatch):
    monkeypatch.delenv("JWT_SECRET")
    monkeypatch.delenv("COOKIE_KEY")

    with pytest.raises(ConfigurationError) as excinfo:
        get_config().validate_required_config(SERVER_REQUIRED_VARS)

    assert excinfo.value.missing == ["JWT_SECRET", "COOKIE_KEY"]
    assert "JWT_SECRET, COOKIE_KEY" in str(excinfo.value)


def test_server_url_defaults_to_port(monkeypatch):
    monkeypatch.delenv("SERVER_URL")
    monkeypatch.setenv("PORT", "8080")
    config = get_config()
    assert config.SERVER_URL == "http://localhost:8080"
    assert config.SERVER_CALLBACK_URL == "http://localhost:8080/auth/google/callback"


def test_cognito_domain_gets_scheme(monkeypatch):
    monkeypatch.setenv("COGNITO_DOMAIN", "example.auth.us-east-1.amazoncognito.com/")
    cognito = get_config().get_cognito_config()
    assert cognito["authorization_url"] == "https://example.auth.us-east-1.amazoncognito.com/oauth2/authorize"
    assert cognito["token_url"] == "https://example.auth.us-east-1.amazoncognito.com/oauth2/token"
    assert cognito["callback_url"] == "https://app.example.com/auth/callback"


def test_cognito_config_validates():
    assert get_config().validate_required_config(COGNITO_REQUIRED_VARS) is True
