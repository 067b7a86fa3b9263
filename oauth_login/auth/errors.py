"""
Authentication exceptions
"""
from typing import Any, Optional


class AuthError(Exception):
    """Base class for login flow failures"""


class MissingCodeError(AuthError):
    """The provider redirected back without an authorization code"""


class ProviderError(AuthError):
    """An identity provider endpoint returned an error"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details if details is not None else message


class TokenVerificationError(AuthError):
    """An ID token or session token failed verification"""
