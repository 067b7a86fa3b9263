"""
Session tokens issued after a successful login
"""
from datetime import timedelta
from typing import Any, Dict, Optional

from fastapi import Request, Response, status
from jose import jwt, JWTError
from pydantic import ValidationError

from ..models.auth import SessionUser, utcnow
from ..utils.config import get_config
from ..utils.logger import setup_logger
from .errors import AuthError, TokenVerificationError

logger = setup_logger(__name__)

SESSION_ALGORITHM = "HS256"


class SessionAuthError(AuthError):
    """Session cookie missing or rejected; carries the HTTP status to answer with"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class SessionTokenManager:
    """Signs session JWTs and moves them in and out of cookies"""

    def __init__(
        self,
        secret: str,
        cookie_name: str,
        max_age: int,
        secure: bool = True,
        httponly: bool = True,
        samesite: Optional[str] = "lax",
    ):
        if not secret:
            raise ValueError("A signing secret is required for session tokens")
        self.secret = secret
        self.cookie_name = cookie_name
        self.max_age = max_age
        self.cookie_secure = secure
        self.cookie_httponly = httponly
        self.cookie_samesite = samesite

    def issue(self, claims: Dict[str, Any]) -> str:
        """
        Sign a session token

        Args:
            claims: Claims to embed; iat and exp are added

        Returns:
            str: Compact HS256 JWT
        """
        now = utcnow()
        payload = dict(claims)
        payload['iat'] = int(now.timestamp())
        payload['exp'] = int((now + timedelta(seconds=self.max_age)).timestamp())
        return jwt.encode(payload, self.secret, algorithm=SESSION_ALGORITHM)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verify a session token

        Raises:
            TokenVerificationError: If the signature is bad, the token is malformed or expired
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[SESSION_ALGORITHM])
        except JWTError as e:
            raise TokenVerificationError(f"Invalid session token: {e}") from e

    def set_session_cookie(self, response: Response, token: str):
        """
        Set session cookie in response

        Args:
            response: FastAPI response object
            token: Signed session token
        """
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=self.max_age,
            httponly=self.cookie_httponly,
            secure=self.cookie_secure,
            samesite=self.cookie_samesite,
            path="/",
        )
        logger.debug(f"Set session cookie '{self.cookie_name}'")

    def clear_session_cookie(self, response: Response):
        """Clear session cookie"""
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            secure=self.cookie_secure,
            httponly=self.cookie_httponly,
            samesite=self.cookie_samesite,
        )
        logger.debug("Cleared session cookie")

    def build_set_cookie_header(self, token: str) -> str:
        """Raw Set-Cookie header value for API Gateway proxy responses"""
        parts = [f"{self.cookie_name}={token}"]
        if self.cookie_httponly:
            parts.append("HttpOnly")
        if self.cookie_secure:
            parts.append("Secure")
        if self.cookie_samesite:
            parts.append(f"SameSite={self.cookie_samesite.capitalize()}")
        parts.append("Path=/")
        parts.append(f"Max-Age={self.max_age}")
        return "; ".join(parts)

    def get_user_from_request(self, request: Request) -> SessionUser:
        """
        Read and verify the session cookie

        Raises:
            SessionAuthError: 401 when the cookie is missing, 403 when it is invalid or expired
        """
        token = request.cookies.get(self.cookie_name)
        if not token:
            raise SessionAuthError("Access token is missing", status.HTTP_401_UNAUTHORIZED)

        try:
            claims = self.verify(token)
        except TokenVerificationError as e:
            logger.info(f"Rejected session cookie: {e}")
            raise SessionAuthError("Invalid or expired token", status.HTTP_403_FORBIDDEN) from e

        try:
            return SessionUser(**claims)
        except ValidationError as e:
            # Signed with our secret but not a web server profile
            logger.info(f"Rejected session claims: {e}")
            raise SessionAuthError("Invalid or expired token", status.HTTP_403_FORBIDDEN) from e


# Global session manager instance
_session_manager: Optional[SessionTokenManager] = None


def get_session_manager() -> SessionTokenManager:
    """Get global session manager for the web server"""
    global _session_manager
    if _session_manager is None:
        config = get_config()
        config.validate_required_config(("JWT_SECRET", "COOKIE_KEY"))
        _session_manager = SessionTokenManager(
            secret=config.JWT_SECRET,
            cookie_name=config.COOKIE_KEY,
            max_age=config.SERVER_SESSION_MAX_AGE,
            secure=config.COOKIE_SECURE,
        )
    return _session_manager


def reset_session_manager():
    """Drop the cached session manager so configuration is re-read"""
    global _session_manager
    _session_manager = None


async def require_session_user(request: Request) -> SessionUser:
    """
    Dependency to require a valid session cookie

    Raises:
        SessionAuthError: If not authenticated
    """
    return get_session_manager().get_user_from_request(request)
