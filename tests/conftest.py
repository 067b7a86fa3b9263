from __future__ import annotations

import time
import urllib.parse
from typing import Any, Callable, Dict, List, Optional

import boto3
import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt
from moto import mock_aws

from oauth_login.auth import routes, session, users
from oauth_login.auth.google import reset_jwks_cache

GOOGLE_CLIENT_ID = "test-client.apps.googleusercontent.com"
SIGNING_KID = "test-kid"

TEST_ENV = {
    "ENVIRONMENT": "development",
    "DEBUG": "false",
    "PORT": "3000",
    "SERVER_URL": "http://localhost:3000",
    "GOOGLE_CLIENT_ID": GOOGLE_CLIENT_ID,
    "GOOGLE_CLIENT_SECRET": "google-secret",
    "GOOGLE_REDIRECT_URI": "https://api.example.com/auth/google/callback",
    "JWT_SECRET": "jwt-test-secret",
    "COOKIE_KEY": "auth_token",
    "COGNITO_DOMAIN": "https://example.auth.us-east-1.amazoncognito.com",
    "COGNITO_CLIENT_ID": "cognito-client",
    "COGNITO_CLIENT_SECRET": "cognito-secret",
    "APP_BASE_URL": "https://app.example.com",
    "USERS_TABLE": "users-test",
    "AWS_REGION": "us-east-1",
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
}


@pytest.fixture(autouse=True)
def app_env(monkeypatch):
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    session.reset_session_manager()
    users.reset_user_store()
    routes._google_client = None
    reset_jwks_cache()
    yield TEST_ENV
    session.reset_session_manager()
    users.reset_user_store()
    routes._google_client = None
    reset_jwks_cache()


@pytest.fixture(scope="session")
def rsa_keys() -> Dict[str, Any]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    public_jwk = jwk.construct(public_pem, "RS256").to_dict()
    public_jwk["kid"] = SIGNING_KID
    public_jwk["use"] = "sig"
    return {"private_pem": private_pem, "jwks": {"keys": [public_jwk]}}


@pytest.fixture
def make_id_token(rsa_keys) -> Callable[..., str]:
    def _make(kid: str = SIGNING_KID, **overrides: Any) -> str:
        now = int(time.time())
        claims = {
            "iss": "https://accounts.google.com",
            "aud": GOOGLE_CLIENT_ID,
            "sub": "1234567890",
            "email": "ada@example.com",
            "name": "Ada Lovelace",
            "iat": now,
            "exp": now + 3600,
        }
        claims.update(overrides)
        # None drops a claim
        claims = {key: value for key, value in claims.items() if value is not None}
        return jwt.encode(claims, rsa_keys["private_pem"], algorithm="RS256", headers={"kid": kid})

    return _make


class ProviderStub:
    """Serves canned provider responses and records every request"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Dict[str, Any]] = {}

    def add(self, url: str, status_code: int = 200, json_body: Any = None, text: Optional[str] = None):
        if text is not None:
            self.routes[url] = {"status_code": status_code, "text": text}
        else:
            self.routes[url] = {"status_code": status_code, "json": json_body}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]
        if url not in self.routes:
            return httpx.Response(404, json={"error": "not_found"})
        return httpx.Response(**self.routes[url])

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def form_of(self, index: int = 0) -> Dict[str, str]:
        body = self.requests[index].content.decode()
        return {k: v[0] for k, v in urllib.parse.parse_qs(body).items()}


@pytest.fixture
def provider_stub() -> ProviderStub:
    return ProviderStub()


@pytest.fixture
def users_table(app_env):
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        table = dynamodb.create_table(
            TableName=app_env["USERS_TABLE"],
            KeySchema=[{"AttributeName": "pk", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "pk", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield table
