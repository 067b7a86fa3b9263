"""
Configuration management for OAuth Code Login
"""
import os
from typing import Dict, Any, Iterable, List, Optional


class ConfigurationError(ValueError):
    """Raised when required environment variables are missing"""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required environment variables: {', '.join(missing)}")


# Variables the web server refuses to start without
SERVER_REQUIRED_VARS = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "JWT_SECRET", "COOKIE_KEY")

# Variables each Lambda pair needs
COGNITO_REQUIRED_VARS = ("COGNITO_DOMAIN", "COGNITO_CLIENT_ID", "COGNITO_CLIENT_SECRET", "APP_BASE_URL")
GOOGLE_LAMBDA_REQUIRED_VARS = (
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "JWT_SECRET",
    "USERS_TABLE",
)


class Config:
    """Application configuration"""

    # Google OAuth endpoints
    GOOGLE_AUTHORIZATION_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_USER_INFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
    GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")

    # Session lifetimes in seconds
    SERVER_SESSION_MAX_AGE = 5 * 60
    LAMBDA_SESSION_MAX_AGE = 7 * 24 * 60 * 60
    LAMBDA_SESSION_COOKIE = "session"

    DEBUG = False

    def __init__(self):
        self.ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
        self.DEBUG = os.getenv("DEBUG", str(self.DEBUG)).lower() == "true"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL")

        # Web server
        self.PORT = int(os.getenv("PORT", "3000"))
        self.SERVER_URL = os.getenv("SERVER_URL") or f"http://localhost:{self.PORT}"
        self.JWT_SECRET = os.getenv("JWT_SECRET")
        self.COOKIE_KEY = os.getenv("COOKIE_KEY")

        # Google
        self.GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID")
        self.GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET")
        self.GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI")

        # Cognito Hosted UI
        self.COGNITO_DOMAIN = os.getenv("COGNITO_DOMAIN")
        self.COGNITO_CLIENT_ID = os.getenv("COGNITO_CLIENT_ID")
        self.COGNITO_CLIENT_SECRET = os.getenv("COGNITO_CLIENT_SECRET")
        self.APP_BASE_URL = os.getenv("APP_BASE_URL")

        # DynamoDB user table
        self.AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
        self.USERS_TABLE = os.getenv("USERS_TABLE")

    def validate_required_config(self, names: Iterable[str] = SERVER_REQUIRED_VARS):
        """Validate that all required configuration is present"""
        missing_vars = [name for name in names if not getattr(self, name, None)]

        if missing_vars:
            raise ConfigurationError(missing_vars)

        return True

    @property
    def COOKIE_SECURE(self) -> bool:
        """Secure cookies are only sent over HTTPS, so enable them in production"""
        return self.ENVIRONMENT == "production"

    @property
    def SERVER_CALLBACK_URL(self) -> str:
        return f"{self.SERVER_URL.rstrip('/')}/auth/google/callback"

    @property
    def COGNITO_BASE_URL(self) -> Optional[str]:
        """Cognito Hosted UI base URL, with scheme"""
        if not self.COGNITO_DOMAIN:
            return None
        domain = self.COGNITO_DOMAIN.rstrip("/")
        if not domain.startswith(("https://", "http://")):
            domain = f"https://{domain}"
        return domain

    @property
    def COGNITO_CALLBACK_URL(self) -> str:
        return f"{(self.APP_BASE_URL or '').rstrip('/')}/auth/callback"

    @classmethod
    def get_google_scopes(cls) -> list:
        """Get Google OAuth 2.0 scopes"""
        return ["openid", "email", "profile"]

    @classmethod
    def get_cognito_scopes(cls) -> list:
        """Get Cognito OAuth 2.0 scopes"""
        return ["openid", "profile", "email", "phone"]

    def get_google_config(self) -> Dict[str, Any]:
        """Get Google configuration for authentication"""
        return {
            "client_id": self.GOOGLE_CLIENT_ID,
            "client_secret": self.GOOGLE_CLIENT_SECRET,
            "authorization_url": self.GOOGLE_AUTHORIZATION_URL,
            "token_url": self.GOOGLE_TOKEN_URL,
            "user_info_url": self.GOOGLE_USER_INFO_URL,
            "jwks_url": self.GOOGLE_JWKS_URL,
            "issuers": list(self.GOOGLE_ISSUERS),
            "scopes": self.get_google_scopes(),
        }

    def get_cognito_config(self) -> Dict[str, Any]:
        """Get Cognito configuration for authentication"""
        base_url = self.COGNITO_BASE_URL
        return {
            "client_id": self.COGNITO_CLIENT_ID,
            "client_secret": self.COGNITO_CLIENT_SECRET,
            "domain": base_url,
            "authorization_url": f"{base_url}/oauth2/authorize" if base_url else None,
            "token_url": f"{base_url}/oauth2/token" if base_url else None,
            "scopes": self.get_cognito_scopes(),
            "callback_url": self.COGNITO_CALLBACK_URL,
        }


class DevelopmentConfig(Config):
    """Development environment configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production environment configuration"""
    DEBUG = False


def get_config() -> Config:
    """Get configuration based on environment"""
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env == "production":
        return ProductionConfig()
    return DevelopmentConfig()
