"""
Access token verification.

Tokens are HS256 JWTs carrying userId, email, role and organizationId.
Issuing tokens belongs to the login flow; create_access_token exists for
tooling and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import structlog

import jwt
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.auth import CurrentUser
from exceptions import TokenExpiredError, InvalidTokenError

logger = structlog.get_logger(__name__)


def create_access_token(
    user_id: str,
    email: str,
    role: str,
    organization_id: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """Sign an access token for the given identity."""
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes if expires_minutes is not None
        else settings.access_token_expire_minutes
    )
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "organizationId": organization_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> CurrentUser:
    """
    Verify a bearer token and return the caller.

    Raises:
        TokenExpiredError: If the token is past `exp`
        InvalidTokenError: If the signature or claims are invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        logger.info("token_expired")
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        logger.warning("token_invalid", error=str(e))
        raise InvalidTokenError()

    try:
        return CurrentUser(**payload)
    except PydanticValidationError as e:
        logger.warning("token_claims_invalid", error=str(e))
        raise InvalidTokenError()
