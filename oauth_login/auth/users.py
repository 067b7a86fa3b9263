"""
DynamoDB-backed user records
"""
from typing import Optional, Tuple

import boto3
from botocore.exceptions import ClientError

from ..models.auth import IdTokenClaims, UserRecord
from ..utils.config import get_config
from ..utils.logger import setup_logger

logger = setup_logger(__name__)


class UserStore:
    """Get-or-create store for users keyed by provider subject"""

    def __init__(self, table_name: str, region: Optional[str] = None):
        self.table_name = table_name
        dynamodb = boto3.resource('dynamodb', region_name=region)
        self.table = dynamodb.Table(table_name)

    def get(self, sub: str) -> Optional[UserRecord]:
        response = self.table.get_item(Key={'pk': UserRecord.key_for(sub)})
        item = response.get('Item')
        return UserRecord(**item) if item else None

    def get_or_create(self, claims: IdTokenClaims) -> Tuple[UserRecord, bool]:
        """
        Return the stored user for these claims, creating it on first login

        Args:
            claims: Verified ID token claims

        Returns:
            Tuple[UserRecord, bool]: (user, created)
        """
        user = self.get(claims.sub)
        if user:
            logger.debug(f"Found existing user: {user.pk}")
            return user, False

        user = UserRecord.from_claims(claims)
        try:
            self.table.put_item(
                Item=user.to_item(),
                ConditionExpression='attribute_not_exists(pk)'
            )
        except ClientError as e:
            if e.response['Error']['Code'] != 'ConditionalCheckFailedException':
                raise
            # Another login created the row first
            existing = self.get(claims.sub)
            if existing is None:
                raise
            return existing, False

        logger.info(f"Created user: {user.pk}")
        return user, True


# Global instance
_user_store: Optional[UserStore] = None


def get_user_store() -> UserStore:
    """Get global user store instance"""
    global _user_store
    if _user_store is None:
        config = get_config()
        config.validate_required_config(("USERS_TABLE",))
        _user_store = UserStore(config.USERS_TABLE, region=config.AWS_REGION)
    return _user_store


def reset_user_store():
    """Drop the cached user store so configuration is re-read"""
    global _user_store
    _user_store = None
