"""ICO Routes — offerings (guarded delete), transactions (review only) and ICO settings.

Invariants:
    - Offering delete always goes through services.ico.delete_offering, force or not
    - Transactions are never created or deleted from the admin API
    - Limits and platform settings are read with view.ico.settings and written
      with edit.ico.settings
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import IcoTransactionStatus, OfferingStatus, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint, single_item_responses, update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.ico import (
    IcoLimits, IcoPlatformSettings, IcoTransactionUpdate, OfferingCreate, OfferingUpdate,
)
from tradedesk.services import ico

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/ext/ico"

GET_LIMITS = register_endpoint(EndpointMetadata(
    summary="Get ICO investment limits",
    operation_id="getIcoLimits",
    tags=("ico",),
    permission="view.ico.settings",
    log_module="ico",
    log_title="Get limits",
    responses=single_item_responses("ICO Limits"),
))
UPDATE_LIMITS = register_endpoint(EndpointMetadata(
    summary="Update ICO investment limits",
    operation_id="updateIcoLimits",
    tags=("ico",),
    permission="edit.ico.settings",
    log_module="ico",
    log_title="Update limits",
    responses=update_responses("ICO Limits"),
))

GET_PLATFORM = register_endpoint(EndpointMetadata(
    summary="Get ICO platform settings",
    operation_id="getIcoPlatformSettings",
    tags=("ico",),
    permission="view.ico.settings",
    log_module="ico",
    log_title="Get platform settings",
    responses=single_item_responses("ICO Platform Settings"),
))
UPDATE_PLATFORM = register_endpoint(EndpointMetadata(
    summary="Update ICO platform settings",
    operation_id="updateIcoPlatformSettings",
    tags=("ico",),
    permission="edit.ico.settings",
    log_module="ico",
    log_title="Update platform settings",
    responses=update_responses("ICO Platform Settings"),
))

custom = APIRouter(prefix=f"{PREFIX}/settings", tags=["ico"])


@custom.get("/limits", **GET_LIMITS.route_kwargs())
async def get_limits(
    request: Request,
    principal: Principal = Depends(require_permission(GET_LIMITS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(GET_LIMITS, principal, request):
        return await ico.get_limits(db)


@custom.put("/limits", **UPDATE_LIMITS.route_kwargs())
async def update_limits(
    body: IcoLimits,
    request: Request,
    principal: Principal = Depends(require_permission(UPDATE_LIMITS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(UPDATE_LIMITS, principal, request):
        return await ico.update_limits(db, principal, body.model_dump(exclude_none=True))


@custom.get("/platform", **GET_PLATFORM.route_kwargs())
async def get_platform_settings(
    request: Request,
    principal: Principal = Depends(require_permission(GET_PLATFORM.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(GET_PLATFORM, principal, request):
        return await ico.get_platform_settings(db)


@custom.put("/platform", **UPDATE_PLATFORM.route_kwargs())
async def update_platform_settings(
    body: IcoPlatformSettings,
    request: Request,
    principal: Principal = Depends(require_permission(UPDATE_PLATFORM.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(UPDATE_PLATFORM, principal, request):
        return await ico.update_platform_settings(db, principal, body.model_dump(exclude_none=True))


async def _delete_offering(db, principal, record_id, force: bool) -> dict:
    return await ico.delete_offering(db, record_id)


OFFERINGS = CrudResource(
    model="icoTokenOffering",
    permission="ico.offer",
    name="IcoOffering",
    tag="ico",
    log_module="ico",
    create_schema=OfferingCreate,
    update_schema=OfferingUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "status"}),
    searchable=("name", "symbol"),
    includes=("phases", "team_members", "roadmap_items"),
    statuses=values(OfferingStatus),
    delete_handler=_delete_offering,
)

TRANSACTIONS = CrudResource(
    model="icoTransaction",
    permission="ico.transaction",
    name="IcoTransaction",
    tag="ico",
    log_module="ico",
    update_schema=IcoTransactionUpdate,
    operations=frozenset({"list", "get", "update", "status"}),
    includes=("user", "offering"),
    statuses=values(IcoTransactionStatus),
    demo_mask=("user.email", "wallet_address"),
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/offer", OFFERINGS))
router.include_router(build_crud_router(f"{PREFIX}/transaction", TRANSACTIONS))
