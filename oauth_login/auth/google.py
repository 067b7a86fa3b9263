"""
Google OpenID Connect authentication client
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

import httpx
from jose import jwt, JWTError
from pydantic import ValidationError

from ..models.auth import GoogleUserInfo, IdTokenClaims, utcnow
from ..utils.config import Config, get_config
from ..utils.logger import setup_logger
from .errors import ProviderError, TokenVerificationError
from .provider import OAuthProviderClient

logger = setup_logger(__name__)

# JWKS by URL with its expiry, shared by every client in the process
_jwks_cache: Dict[str, Tuple[Dict[str, Any], datetime]] = {}


def reset_jwks_cache():
    """Forget cached signing keys"""
    _jwks_cache.clear()


class GoogleAuthClient(OAuthProviderClient):
    """Google OAuth 2.0 client for web server applications"""

    provider_name = "Google"
    client_auth_method = "client_secret_post"

    def __init__(self, app_config: Optional[Config] = None, http_client: Optional[httpx.AsyncClient] = None):
        app_config = app_config or get_config()
        self.config = app_config.get_google_config()

        super().__init__(
            client_id=self.config['client_id'],
            client_secret=self.config['client_secret'],
            authorization_url=self.config['authorization_url'],
            token_url=self.config['token_url'],
            scopes=self.config['scopes'],
            http_client=http_client,
        )

    def build_authorization_url(self, redirect_uri: str, prompt: Optional[str] = None, **extra_params: str) -> str:
        """Google consent URL; always asks for offline access"""
        return super().build_authorization_url(redirect_uri, access_type='offline', prompt=prompt, **extra_params)

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """
        Get user information using access token

        Args:
            access_token: Google access token

        Returns:
            GoogleUserInfo: User information

        Raises:
            ProviderError: If user info retrieval fails
        """
        try:
            response = await self.http_client.get(
                self.config['user_info_url'],
                headers={'Authorization': f'Bearer {access_token}'}
            )
        except httpx.HTTPError as e:
            logger.error(f"User info request failed: {e}")
            raise ProviderError(f"User info request failed: {e}") from e

        if response.status_code != 200:
            raise self._provider_error("User info request failed", response)

        body = self._json_body("User info request failed", response)
        try:
            user_info = GoogleUserInfo(**body)
        except ValidationError as e:
            logger.error(f"Unexpected user info from Google: {e}")
            raise ProviderError("User info request failed: invalid user info response", details=body) from e

        logger.info(f"Successfully retrieved user info for user: {user_info.id}")
        return user_info

    async def verify_id_token(self, id_token: str, access_token: Optional[str] = None) -> IdTokenClaims:
        """
        Verify ID token signature and claims

        Args:
            id_token: Google ID token
            access_token: Access token from the same exchange, checked against at_hash

        Returns:
            IdTokenClaims: Verified claims

        Raises:
            TokenVerificationError: If the token is invalid
        """
        try:
            unverified_header = jwt.get_unverified_header(id_token)
        except JWTError as e:
            raise TokenVerificationError(f"Malformed ID token: {e}") from e

        kid = unverified_header.get('kid')
        if not kid:
            raise TokenVerificationError("ID token missing 'kid' in header")

        key = await self._find_signing_key(kid)

        options = {} if access_token else {'verify_at_hash': False}
        try:
            payload = jwt.decode(
                id_token,
                key,
                algorithms=['RS256'],
                audience=self.client_id,
                issuer=self.config['issuers'],
                access_token=access_token,
                options=options,
            )
        except JWTError as e:
            logger.error(f"ID token verification failed: {e}")
            raise TokenVerificationError(f"Invalid ID token: {e}") from e

        logger.debug(f"ID token verified successfully for user: {payload.get('sub')}")
        try:
            return IdTokenClaims(**payload)
        except ValidationError as e:
            raise TokenVerificationError(f"Invalid ID token claims: {e}") from e

    def decode_id_token(self, id_token: str) -> Optional[Dict[str, Any]]:
        """Decode ID token claims without verification (for logging)"""
        try:
            return jwt.get_unverified_claims(id_token)
        except JWTError as e:
            logger.error(f"Failed to decode ID token: {e}")
            return None

    async def _find_signing_key(self, kid: str) -> Dict[str, Any]:
        jwks = await self._get_jwks()
        for jwk in jwks.get('keys', []):
            if jwk.get('kid') == kid:
                return jwk

        # Google rotates keys; refetch once before giving up
        jwks = await self._get_jwks(force_refresh=True)
        for jwk in jwks.get('keys', []):
            if jwk.get('kid') == kid:
                return jwk

        raise TokenVerificationError(f"Signing key with kid '{kid}' not found in JWKS")

    async def _get_jwks(self, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Get JSON Web Key Set (JWKS) from Google

        Returns:
            Dict: JWKS data
        """
        jwks_url = self.config['jwks_url']
        cached = _jwks_cache.get(jwks_url)
        if not force_refresh and cached and utcnow() < cached[1]:
            return cached[0]

        try:
            response = await self.http_client.get(jwks_url)
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch JWKS: {e}")
            raise ProviderError(f"JWKS request failed: {e}") from e

        if response.status_code != 200:
            raise self._provider_error("JWKS request failed", response)

        jwks = self._json_body("JWKS request failed", response)

        # Cache for 1 hour
        _jwks_cache[jwks_url] = (jwks, utcnow() + timedelta(hours=1))

        logger.debug("JWKS fetched and cached successfully")
        return jwks
