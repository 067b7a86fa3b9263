"""
Google login as a Lambda handler pair with persisted users

The callback verifies the Google ID token, records the user in DynamoDB on
first login and issues a seven day session cookie.
"""
import asyncio
from typing import Any, Dict

from botocore.exceptions import BotoCoreError, ClientError

from ..auth.errors import AuthError, MissingCodeError
from ..auth.google import GoogleAuthClient
from ..auth.session import SessionTokenManager
from ..auth.users import get_user_store
from ..models.auth import IdTokenClaims
from ..utils.config import Config, ConfigurationError, GOOGLE_LAMBDA_REQUIRED_VARS, get_config
from ..utils.logger import setup_logger
from .responses import get_query_param, json_response, redirect_response

logger = setup_logger(__name__)


def auth_consent_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Redirect the user to the Google consent screen"""
    config = get_config()
    try:
        config.validate_required_config(("GOOGLE_CLIENT_ID", "GOOGLE_REDIRECT_URI"))
    except ConfigurationError as e:
        logger.error(f"Google consent misconfigured: {e}")
        return json_response(500, {"error": str(e)})

    client = GoogleAuthClient(config)
    location = client.build_authorization_url(config.GOOGLE_REDIRECT_URI, prompt='consent')
    return redirect_response(location)


def auth_callback_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """Finish Google login and set the session cookie"""
    try:
        code = get_query_param(event, "code")
        if not code:
            raise MissingCodeError("Missing code")

        config = get_config()
        config.validate_required_config(GOOGLE_LAMBDA_REQUIRED_VARS)

        claims = asyncio.run(_verify_login(config, code))

        user, created = get_user_store().get_or_create(claims)
        logger.info(f"Google login for {user.pk} ({'new' if created else 'existing'} user)")

        sessions = _lambda_session_manager(config)
        token = sessions.issue({"sub": claims.sub, "email": claims.email})

        return redirect_response("/", headers={"Set-Cookie": sessions.build_set_cookie_header(token)})

    except (AuthError, ClientError, BotoCoreError, ValueError) as e:
        logger.error(f"Callback error: {e}")
        return json_response(400, {"error": str(e)})


async def _verify_login(config: Config, code: str) -> IdTokenClaims:
    async with GoogleAuthClient(config) as client:
        tokens = await client.exchange_code_for_tokens(code, config.GOOGLE_REDIRECT_URI)
        return await client.verify_id_token(tokens.id_token, access_token=tokens.access_token)


def _lambda_session_manager(config: Config) -> SessionTokenManager:
    return SessionTokenManager(
        secret=config.JWT_SECRET,
        cookie_name=config.LAMBDA_SESSION_COOKIE,
        max_age=config.LAMBDA_SESSION_MAX_AGE,
        secure=True,
        samesite=None,
    )
