"""E-commerce Service — discount code validation for shoppers."""

import logging
from typing import Any

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_fail, log_step, log_success
from tradedesk.core.discounts import (
    discount_message, discount_rejection, discount_value, normalize_code,
)
from tradedesk.db.base import utcnow
from tradedesk.models.ecommerce import EcommerceDiscount, EcommerceUserDiscount
from tradedesk.services.records import as_uuid, commit_or_conflict

logger = logging.getLogger(__name__)


async def validate_discount(db: AsyncSession, user_id: Any, code: str) -> dict:
    """Check a code for one user and record the use when it applies.

    Rejections are returned as {"error", "is_valid": False}, not raised: the
    checkout form shows them inline.
    """
    user_id = as_uuid(user_id)
    log_step("Looking up discount code")
    result = await db.execute(
        select(EcommerceDiscount).where(
            EcommerceDiscount.code == normalize_code(code),
            EcommerceDiscount.status.is_(True),
            EcommerceDiscount.deleted_at.is_(None),
        ),
    )
    discount = result.scalar_one_or_none()
    if discount is None:
        log_fail("Invalid discount code")
        return {"error": "Invalid discount code", "is_valid": False}

    log_step("Checking usage history")
    used_by_user = await db.scalar(
        select(func.count()).select_from(EcommerceUserDiscount).where(
            EcommerceUserDiscount.discount_id == discount.id,
            EcommerceUserDiscount.user_id == user_id,
        ),
    )
    usage_count = await db.scalar(
        select(func.count()).select_from(EcommerceUserDiscount).where(
            EcommerceUserDiscount.discount_id == discount.id,
        ),
    )
    rejection = discount_rejection(
        utcnow(), discount.valid_from, discount.valid_until,
        discount.max_uses, bool(used_by_user), usage_count or 0,
    )
    if rejection is not None:
        log_fail(rejection)
        return {"error": rejection, "is_valid": False}

    db.add(EcommerceUserDiscount(user_id=user_id, discount_id=discount.id))
    await commit_or_conflict(db, "ecommerceUserDiscount")
    log_success(f'Discount code "{discount.code}" validated successfully')
    return {
        "id": str(discount.id),
        "code": discount.code,
        "type": discount.type,
        "value": discount_value(discount.type, discount.percentage, discount.amount),
        "message": discount_message(discount.type, discount.percentage, discount.amount),
        "is_valid": True,
    }
