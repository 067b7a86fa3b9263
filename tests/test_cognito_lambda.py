from __future__ import annotations

import json
import urllib.parse

import pytest

from oauth_login.auth.cognito import CognitoAuthClient
from oauth_login.lambdas import cognito as cognito_lambda

COGNITO_TOKEN_URL = "https://example.auth.us-east-1.amazoncognito.com/oauth2/token"


@pytest.fixture
def stubbed_client(monkeypatch, provider_stub):
    def factory(config):
        return CognitoAuthClient(config, http_client=provider_stub.client())

    monkeypatch.setattr(cognito_lambda, "CognitoAuthClient", factory)
    return provider_stub


def test_redirect_to_hosted_ui():
    response = cognito_lambda.auth_redirect_handler({}, None)

    assert response["statusCode"] == 302
    location = response["headers"]["Location"]
    parsed = urllib.parse.urlsplit(location)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
        "https://example.auth.us-east-1.amazoncognito.com/oauth2/authorize"
    )
    params = urllib.parse.parse_qs(parsed.query)
    assert params["redirect_uri"] == ["https://app.example.com/auth/callback"]
    assert params["scope"] == ["openid profile email phone"]


def test_redirect_without_configuration(monkeypatch):
    monkeypatch.delenv("COGNITO_CLIENT_ID")
    response = cognito_lambda.auth_redirect_handler({}, None)
    assert response["statusCode"] == 500


@pytest.mark.parametrize("event", [{}, {"queryStringParameters": None}, {"queryStringParameters": {"state": "x"}}])
def test_callback_without_code(event):
    response = cognito_lambda.auth_callback_handler(event, None)

    assert response["statusCode"] == 400
    assert json.loads(response["body"]) == {"message": "Authorization code not found."}


def test_callback_returns_id_token(stubbed_client):
    stubbed_client.add(COGNITO_TOKEN_URL, json_body={
        "id_token": "header.payload.sig",
        "access_token": "access",
        "refresh_token": "refresh",
        "expires_in": 3600,
    })

    response = cognito_lambda.auth_callback_handler({"queryStringParameters": {"code": "abc"}}, None)

    assert response["statusCode"] == 200
    assert response["headers"]["Content-Type"] == "application/json"
    assert json.loads(response["body"]) == {
        "message": "Authentication successful!",
        "id_token": "header.payload.sig",
    }
    assert stubbed_client.form_of(0)["code"] == "abc"


def test_callback_hides_provider_errors(stubbed_client):
    stubbed_client.add(COGNITO_TOKEN_URL, status_code=400, json_body={
        "error": "invalid_grant",
        "error_description": "Code expired",
    })

    response = cognito_lambda.auth_callback_handler({"queryStringParameters": {"code": "old"}}, None)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"message": "Internal Server Error"}


def test_callback_hides_non_json_token_response(stubbed_client):
    stubbed_client.add(COGNITO_TOKEN_URL, text="<html>oops</html>")

    response = cognito_lambda.auth_callback_handler({"queryStringParameters": {"code": "abc"}}, None)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"message": "Internal Server Error"}


def test_callback_hides_missing_configuration(monkeypatch):
    monkeypatch.delenv("COGNITO_CLIENT_SECRET")

    response = cognito_lambda.auth_callback_handler({"queryStringParameters": {"code": "abc"}}, None)

    assert response["statusCode"] == 500
    assert json.loads(response["body"]) == {"message": "Internal Server Error"}
