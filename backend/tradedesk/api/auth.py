"""Auth Dependencies — bearer token to Principal, and permission guards for routes.

Invariants:
    - Missing, malformed, expired or non-access tokens are 401
    - Deleted or non-ACTIVE users are 401 even with a valid token
    - require_permission(name) is 403 when the principal lacks `name`

Design Decisions:
    - HTTPBearer(auto_error=False): the 401 comes from UnauthorizedError so it uses the
      same error envelope as every other failure
"""

import logging
import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.domain_types import UserStatus
from tradedesk.core.errors import ForbiddenError, UnauthorizedError
from tradedesk.core.permissions import Principal, has_permission
from tradedesk.infrastructure.database import get_db
from tradedesk.infrastructure.security import decode_access_token
from tradedesk.models.user import User

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)


def principal_for(user: User) -> Principal:
    role = user.role
    return Principal(
        user_id=str(user.id),
        role_name=role.name if role else None,
        permissions=frozenset(p.name for p in role.permissions) if role else frozenset(),
        status=user.status,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    claims = decode_access_token(credentials.credentials)
    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError:
        raise UnauthorizedError("Invalid or expired token")

    user = await db.get(User, user_id)
    if user is None or user.deleted_at is not None:
        raise UnauthorizedError("User not found")
    if user.status != UserStatus.ACTIVE.value:
        raise UnauthorizedError("User account is not active")
    return principal_for(user)


def require_permission(permission: str | None):
    """Dependency factory: the current principal, checked against `permission`."""

    async def dependency(principal: Principal = Depends(get_current_user)) -> Principal:
        if not has_permission(principal, permission):
            logger.warning(
                f"Permission {permission} denied",
                extra={"user_id": principal.user_id},
            )
            raise ForbiddenError(f"Permission denied: {permission}")
        return principal

    return dependency
