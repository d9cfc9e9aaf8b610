"""System Routes — platform key/value settings (mlmSystem, referralApprovalRequired, ico_*)."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import operation
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint, single_item_responses, update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.system import SettingsUpdate
from tradedesk.services.settings_store import get_settings_map, upsert_settings

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin/system/settings", tags=["system"])

GET_SETTINGS = register_endpoint(EndpointMetadata(
    summary="Get platform settings",
    operation_id="getSettings",
    tags=("system",),
    permission="view.settings",
    log_module="system",
    responses=single_item_responses("Settings"),
))
UPDATE_SETTINGS = register_endpoint(EndpointMetadata(
    summary="Update platform settings",
    operation_id="updateSettings",
    tags=("system",),
    permission="edit.settings",
    log_module="system",
    responses=update_responses("Settings"),
))


@router.get("", **GET_SETTINGS.route_kwargs())
async def get_settings(
    request: Request,
    principal: Principal = Depends(require_permission(GET_SETTINGS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(GET_SETTINGS, principal, request):
        return {"settings": await get_settings_map(db)}


@router.put("", **UPDATE_SETTINGS.route_kwargs())
async def update_settings(
    body: SettingsUpdate,
    request: Request,
    principal: Principal = Depends(require_permission(UPDATE_SETTINGS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(UPDATE_SETTINGS, principal, request):
        written = await upsert_settings(db, body.settings)
    return {"message": "Settings updated successfully", "settings": written}
