"""CRM Service — users (password hashing, blocks) and roles (permission sets).

Invariants:
    - Plain passwords never reach the database; password_hash never leaves it
    - Super Admin accounts and the acting admin cannot be blocked
    - At most one block in force per user; blocking sets SUSPENDED or BANNED,
      unblocking deactivates every block and sets ACTIVE
"""

import logging
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.domain_types import UserStatus
from tradedesk.core.errors import BadRequestError, ForbiddenError, UnauthorizedError, create_error
from tradedesk.core.permissions import SUPER_ADMIN_ROLE, Principal
from tradedesk.core.user_blocks import (
    blocked_until, is_block_in_force, status_for_block, validate_block_request,
)
from tradedesk.db.base import utcnow
from tradedesk.infrastructure.security import hash_password, verify_password
from tradedesk.models.user import Permission, Role, User, UserBlock
from tradedesk.services.records import (
    as_uuid, commit_or_conflict, load_instance, serialize, store_record, update_record,
)

logger = logging.getLogger(__name__)


# ─── Users ───────────────────────────────────────────────────────

def _with_password_hash(data: Mapping[str, Any]) -> dict[str, Any]:
    values = dict(data)
    password = values.pop("password", None)
    if password:
        values["password_hash"] = hash_password(password)
    return values


async def create_user(db: AsyncSession, data: Mapping[str, Any]) -> dict:
    return await store_record(db, "user", _with_password_hash(data))


async def update_user(db: AsyncSession, user_id: Any, data: Mapping[str, Any]) -> dict:
    return await update_record(db, "user", user_id, _with_password_hash(data))


async def _active_blocks(db: AsyncSession, user_id: Any) -> list[UserBlock]:
    result = await db.execute(
        select(UserBlock).where(UserBlock.user_id == user_id, UserBlock.is_active.is_(True)),
    )
    return list(result.scalars().all())


async def block_user(
    db: AsyncSession,
    admin: Principal,
    user_id: Any,
    reason: str,
    is_temporary: bool,
    duration: int | None,
) -> dict:
    validate_block_request(is_temporary, duration)
    user = await load_instance(db, "user", user_id)
    if user.role is not None and user.role.name == SUPER_ADMIN_ROLE:
        raise create_error(403, "Cannot block Super Admin accounts")
    if str(user.id) == str(admin.user_id):
        raise create_error(403, "You cannot block your own account")

    log_step("Checking existing blocks")
    now = utcnow()
    for block in await _active_blocks(db, user.id):
        if is_block_in_force(block.is_active, block.is_temporary, block.blocked_until, now):
            raise BadRequestError("User is already blocked")

    log_step("Creating block record")
    block = UserBlock(
        user_id=user.id,
        admin_id=as_uuid(admin.user_id),
        reason=reason,
        is_temporary=is_temporary,
        duration=duration if is_temporary else None,
        blocked_until=blocked_until(now, is_temporary, duration),
        is_active=True,
    )
    db.add(block)
    user.status = status_for_block(is_temporary).value
    await commit_or_conflict(db, "userBlock")
    logger.info(
        f"User {user.id} blocked by {admin.user_id} ({'temporary' if is_temporary else 'permanent'})",
        extra={"user_id": str(admin.user_id)},
    )
    return {
        "message": f"User {'temporarily blocked' if is_temporary else 'blocked'} successfully",
        "block_id": str(block.id),
    }


async def unblock_user(db: AsyncSession, admin: Principal, user_id: Any) -> dict:
    user = await load_instance(db, "user", user_id)
    blocks = await _active_blocks(db, user.id)
    if not blocks and user.status not in (UserStatus.SUSPENDED.value, UserStatus.BANNED.value):
        raise BadRequestError("User is not blocked")
    for block in blocks:
        block.is_active = False
    user.status = UserStatus.ACTIVE.value
    await commit_or_conflict(db, "userBlock")
    log_step(f"Deactivated {len(blocks)} blocks")
    logger.info(f"User {user.id} unblocked by {admin.user_id}", extra={"user_id": str(admin.user_id)})
    return {"message": "User unblocked successfully"}


# ─── Roles ───────────────────────────────────────────────────────

async def _permissions_by_id(db: AsyncSession, permission_ids: list[Any]) -> list[Permission]:
    if not permission_ids:
        return []
    wanted = {str(pid) for pid in permission_ids}
    result = await db.execute(select(Permission).where(Permission.id.in_(list(permission_ids))))
    permissions = list(result.scalars().all())
    missing = wanted - {str(p.id) for p in permissions}
    if missing:
        raise BadRequestError(f"Unknown permission ids: {', '.join(sorted(missing))}")
    return permissions


async def create_role(db: AsyncSession, name: str, permission_ids: list[Any]) -> dict:
    role = Role(name=name, permissions=await _permissions_by_id(db, permission_ids))
    db.add(role)
    await commit_or_conflict(db, "role")
    log_step(f"Role {role.id} created with {len(role.permissions)} permissions")
    return {"message": "Role created successfully", "record": serialize(role, ("permissions",))}


async def update_role(
    db: AsyncSession, role_id: Any, name: str | None, permission_ids: list[Any] | None,
) -> dict:
    role = await load_instance(db, "role", role_id, ("permissions",))
    if name is not None:
        role.name = name
    if permission_ids is not None:
        role.permissions = await _permissions_by_id(db, permission_ids)
    await commit_or_conflict(db, "role")
    log_step(f"Role {role.id} updated")
    return {"message": "Role updated successfully", "record": serialize(role, ("permissions",))}


# ─── Login ───────────────────────────────────────────────────────

async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """User for a login attempt; lifts a temporary block that has run out."""
    result = await db.execute(
        select(User).where(User.email == email.strip().lower(), User.deleted_at.is_(None)),
    )
    user = result.scalar_one_or_none()
    if user is None or not verify_password(password, user.password_hash):
        raise UnauthorizedError("Invalid email or password")

    now = utcnow()
    if user.status == UserStatus.BANNED.value:
        raise ForbiddenError("Your account has been banned")
    if user.status == UserStatus.SUSPENDED.value:
        blocks = await _active_blocks(db, user.id)
        if any(
            is_block_in_force(b.is_active, b.is_temporary, b.blocked_until, now) for b in blocks
        ):
            raise ForbiddenError("Your account is temporarily suspended")
        for block in blocks:
            block.is_active = False
        user.status = UserStatus.ACTIVE.value
        log_step(f"Expired block lifted for user {user.id}")
    elif user.status != UserStatus.ACTIVE.value:
        raise UnauthorizedError("User account is not active")

    user.last_login = now
    await commit_or_conflict(db, "user")
    return user
