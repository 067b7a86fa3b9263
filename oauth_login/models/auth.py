"""
Authentication related data models
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OAuthTokens(BaseModel):
    """Tokens returned by an authorization code exchange"""
    access_token: Optional[str] = Field(None, description="Access token")
    id_token: Optional[str] = Field(None, description="OpenID Connect ID token")
    refresh_token: Optional[str] = Field(None, description="Refresh token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(default=3600, description="Token expiration in seconds")
    expires_at: datetime = Field(..., description="Token expiration timestamp")


class GoogleUserInfo(BaseModel):
    """User information from the Google v2 userinfo endpoint"""
    id: str = Field(..., description="Google account ID")
    email: Optional[str] = Field(None, description="User email")
    name: Optional[str] = Field(None, description="Display name")
    picture: Optional[str] = Field(None, description="Profile picture URL")
    verified_email: Optional[bool] = Field(None, description="Email verification status")


class IdTokenClaims(BaseModel):
    """Verified OpenID Connect ID token claims"""
    sub: str = Field(..., description="Subject identifier")
    email: Optional[str] = Field(None, description="User email")
    name: Optional[str] = Field(None, description="Display name")

    model_config = ConfigDict(extra="allow")


class SessionUser(BaseModel):
    """Profile carried in the web server session token"""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    verified_email: Optional[bool] = None

    @classmethod
    def from_user_info(cls, user_info: GoogleUserInfo) -> "SessionUser":
        return cls(**user_info.model_dump())


class UserRecord(BaseModel):
    """User row persisted in DynamoDB"""
    pk: str = Field(..., description="Partition key, USER#<sub>")
    sub: str = Field(..., description="Provider subject identifier")
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 creation time")

    model_config = ConfigDict(populate_by_name=True)

    @staticmethod
    def key_for(sub: str) -> str:
        return f"USER#{sub}"

    @classmethod
    def from_claims(cls, claims: IdTokenClaims) -> "UserRecord":
        return cls(
            pk=cls.key_for(claims.sub),
            sub=claims.sub,
            email=claims.email,
            name=claims.name,
            created_at=utcnow().isoformat(),
        )

    def to_item(self) -> dict:
        """DynamoDB item, dropping empty attributes"""
        return self.model_dump(by_alias=True, exclude_none=True)


class HealthStatus(BaseModel):
    """Health check response"""
    status: str = "OK"
    timestamp: str
    environment: str
