"""ICO Service — guarded offering deletion, investment limits and platform settings.

Invariants:
    - An offering with PENDING or VERIFICATION transactions is never deleted
    - SUCCESS offerings are kept for history
    - Deleting an offering removes its children, its activity log and its finished
      transactions in one commit
    - Every limits or platform settings update writes one SETTINGS_UPDATED admin activity
"""

import json
import logging
from typing import Any, Mapping

from sqlalchemy import delete, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.domain_types import IcoTransactionStatus, OfferingStatus
from tradedesk.core.errors import BadRequestError
from tradedesk.core.ico_limits import (
    LIMIT_KEYS, PLATFORM_KEYS, limits_to_settings, platform_settings_to_rows, read_limits,
    read_platform_settings, validate_limits, validate_platform_settings,
)
from tradedesk.core.permissions import Principal
from tradedesk.models.ico import IcoAdminActivity, IcoTransaction
from tradedesk.services.records import as_uuid, commit_or_conflict, load_instance
from tradedesk.services.settings_store import get_settings_map, upsert_settings

logger = logging.getLogger(__name__)

_ACTIVE_TRANSACTION_STATUSES = (
    IcoTransactionStatus.PENDING.value,
    IcoTransactionStatus.VERIFICATION.value,
)


async def delete_offering(db: AsyncSession, offering_id: Any) -> dict:
    offering = await load_instance(db, "icoTokenOffering", offering_id)

    log_step("Checking for active transactions")
    active = await db.scalar(
        select(func.count()).select_from(IcoTransaction).where(
            IcoTransaction.offering_id == offering.id,
            IcoTransaction.status.in_(_ACTIVE_TRANSACTION_STATUSES),
        ),
    )
    if active:
        raise BadRequestError(
            f"Cannot delete offering with {active} active investment(s). "
            "Please wait for all investments to be released or rejected first."
        )
    if offering.status == OfferingStatus.SUCCESS.value:
        raise BadRequestError(
            "Cannot delete successful offerings. They are kept for historical records."
        )

    log_step("Deleting associated records")
    await db.execute(delete(IcoAdminActivity).where(IcoAdminActivity.offering_id == offering.id))
    await db.execute(delete(IcoTransaction).where(IcoTransaction.offering_id == offering.id))
    await db.delete(offering)
    await commit_or_conflict(db, "icoTokenOffering")
    logger.info(f"ICO offering {offering_id} deleted")
    return {"message": "ICO offering deleted successfully"}


async def get_limits(db: AsyncSession) -> dict:
    keys = [key for key, _ in LIMIT_KEYS.values()]
    return read_limits(await get_settings_map(db, keys))


async def update_limits(db: AsyncSession, admin: Principal, update: Mapping[str, Any]) -> dict:
    log_step("Validating limit values")
    validate_limits(update)
    rows = limits_to_settings(update)
    if not rows:
        raise BadRequestError("No limit values provided")

    log_step("Updating limit settings")
    await upsert_settings(db, rows, commit=False)
    db.add(IcoAdminActivity(
        type="SETTINGS_UPDATED",
        offering_id=None,
        offering_name="ICO Limits",
        admin_id=as_uuid(admin.user_id),
        details=json.dumps({"updates": rows}),
    ))
    await commit_or_conflict(db, "icoAdminActivity")
    return {"message": "ICO limits updated successfully"}


async def get_platform_settings(db: AsyncSession) -> dict:
    keys = [key for key, _ in PLATFORM_KEYS.values()]
    return read_platform_settings(await get_settings_map(db, keys))


async def update_platform_settings(
    db: AsyncSession, admin: Principal, update: Mapping[str, Any],
) -> dict:
    log_step("Preparing platform settings updates")
    validate_platform_settings(update)
    rows = platform_settings_to_rows(update)
    if not rows:
        raise BadRequestError("No platform settings provided")

    log_step(f"Updating {len(rows)} platform settings")
    await upsert_settings(db, rows, commit=False)
    db.add(IcoAdminActivity(
        type="SETTINGS_UPDATED",
        offering_id=None,
        offering_name="ICO Platform",
        admin_id=as_uuid(admin.user_id),
        details=json.dumps({"updates": rows}),
    ))
    await commit_or_conflict(db, "icoAdminActivity")
    logger.info(f"ICO platform settings updated: {sorted(rows)}")
    return {"message": "Platform settings updated successfully"}
