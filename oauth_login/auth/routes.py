"""
Authentication API routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, RedirectResponse

from ..models.auth import SessionUser
from ..utils.config import get_config
from ..utils.logger import setup_logger
from .errors import AuthError
from .google import GoogleAuthClient
from .session import SessionTokenManager, get_session_manager, require_session_user

logger = setup_logger(__name__)

# Create routers
router = APIRouter(prefix="/auth", tags=["authentication"])
api_router = APIRouter(prefix="/api", tags=["profile"])

# Global Google client, shared by every request
_google_client: Optional[GoogleAuthClient] = None


def get_google_client() -> GoogleAuthClient:
    """Get global Google client instance"""
    global _google_client
    if _google_client is None:
        _google_client = GoogleAuthClient(get_config())
    return _google_client


async def close_google_client():
    global _google_client
    if _google_client is not None:
        await _google_client.close()
        _google_client = None


@router.get("/google")
async def google_login(google_client: GoogleAuthClient = Depends(get_google_client)):
    """
    Initiate Google OAuth flow
    """
    auth_url = google_client.build_authorization_url(get_config().SERVER_CALLBACK_URL)
    logger.info(f"Redirecting to Google OAuth: {auth_url}")
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = Query(None, description="Authorization code"),
    error: Optional[str] = Query(None, description="OAuth error"),
    google_client: GoogleAuthClient = Depends(get_google_client),
    session_manager: SessionTokenManager = Depends(get_session_manager),
):
    """
    Handle Google OAuth callback
    """
    if error:
        logger.error(f"OAuth error: {error}")
        return JSONResponse(
            content={"error": "Authentication failed", "details": error},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    if not code:
        logger.error("No authorization code received")
        return JSONResponse(
            content={"error": "No authorization code received"},
            status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        tokens = await google_client.exchange_code_for_tokens(
            code, get_config().SERVER_CALLBACK_URL, require_access_token=True
        )

        id_token_payload = google_client.decode_id_token(tokens.id_token) or {}
        logger.debug(f"ID token issued for subject: {id_token_payload.get('sub')}")

        user_info = await google_client.get_user_info(tokens.access_token)
        user = SessionUser.from_user_info(user_info)

    except AuthError as e:
        details = getattr(e, 'details', str(e))
        logger.error(f"Error during token exchange: {details}")
        return JSONResponse(
            content={"error": "Authentication failed", "details": details},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    token = session_manager.issue(user.model_dump())

    redirect_response = RedirectResponse(url="/dashboard.html", status_code=status.HTTP_302_FOUND)
    session_manager.set_session_cookie(redirect_response, token)

    logger.info("Authentication successful, redirecting to dashboard")
    return redirect_response


@api_router.get("/profile", response_model=SessionUser)
async def get_profile(user: SessionUser = Depends(require_session_user)):
    """
    Get the signed-in user's profile (requires authentication)
    """
    logger.info(f"Profile request from user: {user.email}")
    return user


@api_router.post("/logout")
async def logout(session_manager: SessionTokenManager = Depends(get_session_manager)):
    """
    Logout user and clear the session cookie
    """
    response = JSONResponse(content={"message": "Logged out successfully"})
    session_manager.clear_session_cookie(response)
    return response
