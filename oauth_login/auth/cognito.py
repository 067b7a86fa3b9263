"""
Amazon Cognito Hosted UI authentication client
"""
from typing import Optional

import httpx

from ..utils.config import Config, COGNITO_REQUIRED_VARS, get_config
from .provider import OAuthProviderClient


class CognitoAuthClient(OAuthProviderClient):
    """Cognito Hosted UI client using a confidential app client secret"""

    provider_name = "Cognito"
    client_auth_method = "client_secret_basic"

    def __init__(self, app_config: Optional[Config] = None, http_client: Optional[httpx.AsyncClient] = None):
        app_config = app_config or get_config()
        app_config.validate_required_config(COGNITO_REQUIRED_VARS)
        self.config = app_config.get_cognito_config()

        super().__init__(
            client_id=self.config['client_id'],
            client_secret=self.config['client_secret'],
            authorization_url=self.config['authorization_url'],
            token_url=self.config['token_url'],
            scopes=self.config['scopes'],
            http_client=http_client,
        )
        self.callback_url = self.config['callback_url']

    def build_login_url(self) -> str:
        """Hosted UI URL that sends the user back to our callback"""
        return self.build_authorization_url(self.callback_url)
