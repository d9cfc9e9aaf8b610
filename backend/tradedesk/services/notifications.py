"""Notifications — in-app notices for users and admins, written inside the caller's transaction."""

import logging
import uuid
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.permissions import SUPER_ADMIN_ROLE
from tradedesk.models.system import Notification
from tradedesk.models.user import Permission, Role, User, role_permissions

logger = logging.getLogger(__name__)


async def create_notification(
    db: AsyncSession,
    user_id: uuid.UUID | str,
    title: str,
    message: str,
    type: str = "system",
    details: str | None = None,
    link: str | None = None,
    related_id: str | None = None,
    actions: list[dict[str, Any]] | None = None,
) -> Notification:
    """Add a notification to the session; the caller commits."""
    notification = Notification(
        user_id=user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id)),
        type=type,
        title=title,
        message=message,
        details=details,
        link=link,
        related_id=related_id,
        actions=actions,
    )
    db.add(notification)
    await db.flush()
    logger.debug(f"Notification queued for user {user_id}: {title}")
    return notification


async def create_admin_notification(
    db: AsyncSession,
    permission: str,
    title: str,
    message: str,
    type: str = "system",
    link: str | None = None,
    details: str | None = None,
    actions: list[dict[str, Any]] | None = None,
) -> list[Notification]:
    """Notify every active admin whose role grants `permission`; Super Admins always match."""
    result = await db.execute(
        select(User.id)
        .join(Role, User.role_id == Role.id)
        .outerjoin(role_permissions, role_permissions.c.role_id == Role.id)
        .outerjoin(Permission, Permission.id == role_permissions.c.permission_id)
        .where(
            or_(Role.name == SUPER_ADMIN_ROLE, Permission.name == permission),
            User.deleted_at.is_(None),
        )
        .distinct(),
    )
    admin_ids = result.scalars().all()
    logger.debug(f"Notifying {len(admin_ids)} admins holding {permission}")
    return [
        await create_notification(
            db, admin_id, title, message,
            type=type, details=details, link=link, actions=actions,
        )
        for admin_id in admin_ids
    ]
