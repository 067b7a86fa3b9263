"""
Authentication module for OAuth Code Login

This module provides:
- Cognito Hosted UI and Google authorization code clients
- Session token signing and cookie handling
- DynamoDB user records
- Web server authentication routes
"""

from .cognito import CognitoAuthClient
from .google import GoogleAuthClient
from .session import SessionTokenManager, get_session_manager, require_session_user
from .users import UserStore, get_user_store
from .routes import router as auth_router, api_router

__all__ = [
    'CognitoAuthClient',
    'GoogleAuthClient',
    'SessionTokenManager',
    'get_session_manager',
    'require_session_user',
    'UserStore',
    'get_user_store',
    'auth_router',
    'api_router'
]
