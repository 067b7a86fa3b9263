"""
OAuth 2.0 authorization code client shared by the Cognito and Google flows
"""
import base64
import urllib.parse
from datetime import timedelta
from typing import Any, Dict, List, Optional

import httpx

from ..models.auth import OAuthTokens, utcnow
from ..utils.logger import setup_logger
from .errors import ProviderError

logger = setup_logger(__name__)


class OAuthProviderClient:
    """Authorization code flow against a single identity provider"""

    provider_name = "oauth"
    # "client_secret_basic" sends the secret as HTTP Basic auth,
    # "client_secret_post" sends it in the form body
    client_auth_method = "client_secret_basic"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        authorization_url: str,
        token_url: str,
        scopes: List[str],
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.authorization_url = authorization_url
        self.token_url = token_url
        self.scopes = scopes

        # HTTP client for OAuth requests, created on first use
        self._owns_http_client = http_client is None
        self._http_client = http_client

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _get_basic_auth_header(self) -> str:
        """
        Generate Basic Authentication header for client credentials

        Returns:
            str: Basic auth header value
        """
        credentials = f"{self.client_id}:{self.client_secret}"
        encoded_credentials = base64.b64encode(credentials.encode('utf-8')).decode('utf-8')
        return f"Basic {encoded_credentials}"

    def build_authorization_url(self, redirect_uri: str, **extra_params: str) -> str:
        """
        Build the provider consent screen URL

        Args:
            redirect_uri: Callback URL registered with the provider
            **extra_params: Additional query parameters (access_type, prompt, ...)

        Returns:
            str: Fully encoded authorization URL
        """
        params = {
            'response_type': 'code',
            'client_id': self.client_id,
            'redirect_uri': redirect_uri,
            'scope': ' '.join(self.scopes),
        }
        params.update({key: value for key, value in extra_params.items() if value is not None})
        return f"{self.authorization_url}?{urllib.parse.urlencode(params, quote_via=urllib.parse.quote)}"

    async def exchange_code_for_tokens(
        self,
        authorization_code: str,
        redirect_uri: str,
        require_access_token: bool = False,
    ) -> OAuthTokens:
        """
        Exchange authorization code for tokens

        Args:
            authorization_code: OAuth authorization code from the provider
            redirect_uri: Must match the redirect URI used for the consent screen
            require_access_token: Fail if the response carries no access token

        Returns:
            OAuthTokens: Access, ID and (optionally) refresh tokens

        Raises:
            ProviderError: If token exchange fails
        """
        token_data = {
            'grant_type': 'authorization_code',
            'client_id': self.client_id,
            'code': authorization_code,
            'redirect_uri': redirect_uri,
        }
        headers = {'Content-Type': 'application/x-www-form-urlencoded'}

        if self.client_auth_method == "client_secret_post":
            token_data['client_secret'] = self.client_secret
        else:
            headers['Authorization'] = self._get_basic_auth_header()

        logger.debug(f"Making {self.provider_name} token request to: {self.token_url}")

        try:
            response = await self.http_client.post(self.token_url, data=token_data, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"{self.provider_name} token request failed: {e}")
            raise ProviderError(f"Token request failed: {e}") from e

        logger.debug(f"Token response status: {response.status_code}")

        if response.status_code != 200:
            raise self._provider_error("Token exchange failed", response)

        token_response = self._json_body("Token exchange failed", response)
        logger.debug(f"Token response: {list(token_response.keys())}")  # Log keys only for security

        if not token_response.get('id_token') or (require_access_token and not token_response.get('access_token')):
            raise ProviderError(
                f"Failed to retrieve tokens from {self.provider_name}",
                status_code=response.status_code,
                details=f"Failed to retrieve tokens from {self.provider_name}",
            )

        try:
            expires_in = int(token_response.get('expires_in', 3600))
        except (TypeError, ValueError):
            expires_in = 3600
        tokens = OAuthTokens(
            access_token=token_response.get('access_token'),
            id_token=token_response['id_token'],
            refresh_token=token_response.get('refresh_token'),
            token_type=token_response.get('token_type', 'Bearer'),
            expires_in=expires_in,
            expires_at=utcnow() + timedelta(seconds=expires_in),
        )

        logger.info(f"Successfully exchanged authorization code for {self.provider_name} tokens")
        return tokens

    def _json_body(self, action: str, response: httpx.Response) -> Dict[str, Any]:
        """Parse a successful provider response, which must be a JSON object"""
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            logger.error(f"{action}: unexpected response body from {self.provider_name}")
            raise ProviderError(
                f"{action}: {self.provider_name} returned an invalid response",
                status_code=response.status_code,
                details=response.text,
            )
        return body

    def _provider_error(self, action: str, response: httpx.Response) -> ProviderError:
        """Build a ProviderError from a failed provider response"""
        error_text = response.text
        logger.error(f"{action} with status {response.status_code}: {error_text}")

        details: Any = error_text
        try:
            error_data: Dict[str, Any] = response.json()
        except ValueError:
            error_msg = f'{action}: {response.status_code} - {error_text}'
        else:
            details = error_data
            if isinstance(error_data, dict):
                error_msg = error_data.get('error_description') or error_data.get('error') or f'{action}: {response.status_code}'
            else:
                error_msg = f'{action}: {response.status_code}'

        return ProviderError(error_msg, status_code=response.status_code, details=details)

    async def close(self):
        """Close HTTP client"""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
