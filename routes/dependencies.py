"""
Request dependencies: caller identity and permission checks.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import structlog

from models.auth import CurrentUser
from services.auth_service import verify_token
from services.permissions import has_permission
from exceptions import AuthenticationError, PermissionDeniedError

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """Resolve the caller from the bearer token."""
    if not credentials:
        raise AuthenticationError("Unauthorized - No token provided")

    return verify_token(credentials.credentials)


def require_permission(permission: str):
    """Dependency factory: the caller must hold `permission`."""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not has_permission(user.role, permission):
            logger.warning(
                "permission_denied",
                user_id=user.id,
                role=user.role,
                permission=permission
            )
            raise PermissionDeniedError(permission, user.role)
        return user

    return checker
