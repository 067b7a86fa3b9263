"""
Cognito Hosted UI login as a Lambda handler pair

auth_redirect_handler sends the browser to the Hosted UI; auth_callback_handler
exchanges the returned code and hands back the raw ID token.
"""
import asyncio
from typing import Any, Dict

from ..auth.cognito import CognitoAuthClient
from ..auth.errors import AuthError
from ..utils.config import ConfigurationError, get_config
from ..utils.logger import setup_logger
from .responses import get_query_param, json_response, redirect_response

logger = setup_logger(__name__)


def auth_redirect_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Redirect the user to the Cognito Hosted UI"""
    try:
        client = CognitoAuthClient(get_config())
    except ConfigurationError as e:
        logger.error(f"Cognito redirect misconfigured: {e}")
        return json_response(500, {"message": "Internal Server Error"})

    authorization_url = client.build_login_url()
    logger.info(f"Redirecting user to: {authorization_url}")
    return redirect_response(authorization_url)


def auth_callback_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Exchange the authorization code and return the ID token"""
    code = get_query_param(event, "code")
    if not code:
        return json_response(400, {"message": "Authorization code not found."})

    try:
        id_token = asyncio.run(_exchange(code))
    except (AuthError, ValueError) as e:
        logger.error(f"Error exchanging code for tokens: {getattr(e, 'details', e)}")
        return json_response(500, {"message": "Internal Server Error"})

    return json_response(200, {
        "message": "Authentication successful!",
        "id_token": id_token,
    })


async def _exchange(code: str) -> str:
    # One client per invocation; asyncio.run closes the loop it was bound to
    async with CognitoAuthClient(get_config()) as client:
        tokens = await client.exchange_code_for_tokens(code, client.callback_url)
    return tokens.id_token
