"""CRM Routes — users (with block/unblock) and roles.

Invariants:
    - Block and unblock need edit.user; the rest follows the CRUD permission set
    - Passwords are hashed in services.crm, never in the route

Design Decisions:
    - Custom user routes live on their own router included before the CRUD routers
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import UserStatus, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint, status_update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.crm import BlockUserRequest, RoleCreate, RoleUpdate, UserCreate, UserUpdate
from tradedesk.services import crm

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/crm"

BLOCK_USER = register_endpoint(EndpointMetadata(
    summary="Block a user",
    operation_id="blockUser",
    tags=("crm",),
    permission="edit.user",
    log_module="crm",
    responses=status_update_responses("User"),
))
UNBLOCK_USER = register_endpoint(EndpointMetadata(
    summary="Unblock a user",
    operation_id="unblockUser",
    tags=("crm",),
    permission="edit.user",
    log_module="crm",
    responses=status_update_responses("User"),
))

custom = APIRouter(prefix=f"{PREFIX}/user", tags=["crm"])


@custom.post("/{user_id}/block", **BLOCK_USER.route_kwargs())
async def block_user(
    user_id: UUID,
    body: BlockUserRequest,
    request: Request,
    principal: Principal = Depends(require_permission(BLOCK_USER.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(BLOCK_USER, principal, request):
        return await crm.block_user(
            db, principal, user_id, body.reason, body.is_temporary, body.duration,
        )


@custom.post("/{user_id}/unblock", **UNBLOCK_USER.route_kwargs())
async def unblock_user(
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(require_permission(UNBLOCK_USER.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(UNBLOCK_USER, principal, request):
        return await crm.unblock_user(db, principal, user_id)


# ─── CRUD resources ──────────────────────────────────────────────

async def _create_user(db, principal, body: UserCreate) -> dict:
    return await crm.create_user(db, body.model_dump(mode="json"))


async def _update_user(db, principal, record_id, body: UserUpdate) -> dict:
    return await crm.update_user(db, record_id, body.model_dump(mode="json", exclude_unset=True))


async def _create_role(db, principal, body: RoleCreate) -> dict:
    return await crm.create_role(db, body.name, body.permission_ids)


async def _update_role(db, principal, record_id, body: RoleUpdate) -> dict:
    return await crm.update_role(db, record_id, body.name, body.permission_ids)


USERS = CrudResource(
    model="user",
    permission="user",
    name="User",
    tag="crm",
    log_module="crm",
    create_schema=UserCreate,
    update_schema=UserUpdate,
    searchable=("email", "first_name", "last_name"),
    includes=("role",),
    statuses=values(UserStatus),
    demo_mask=("email", "phone", "first_name", "last_name"),
    create_handler=_create_user,
    update_handler=_update_user,
)

ROLES = CrudResource(
    model="role",
    permission="role",
    name="Role",
    tag="crm",
    log_module="crm",
    create_schema=RoleCreate,
    update_schema=RoleUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "bulk_delete"}),
    searchable=("name",),
    includes=("permissions",),
    default_sort="name",
    create_handler=_create_role,
    update_handler=_update_role,
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/user", USERS))
router.include_router(build_crud_router(f"{PREFIX}/role", ROLES))
