"""Staking Service — earnings distribution and external pool performance records.

Invariants:
    - Admin earning, earning records, admin activity and the admin notification are
      written in one commit; a failed distribution leaves no rows behind
    - Shares follow core.staking.split_earnings (4 dp, zero shares dropped)
    - Performance lists come newest first with a summary over the same rows
"""

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.domain_types import PositionStatus
from tradedesk.core.errors import BadRequestError, create_error
from tradedesk.core.permissions import Principal
from tradedesk.core.staking import split_earnings, summarize_performance
from tradedesk.models.staking import (
    StakingAdminActivity, StakingAdminEarning, StakingEarningRecord, StakingExternalPoolPerformance,
    StakingPool, StakingPosition,
)
from tradedesk.services.notifications import create_notification
from tradedesk.services.records import as_uuid, commit_or_conflict, load_instance, serialize

logger = logging.getLogger(__name__)


async def distribute_earnings(
    db: AsyncSession, admin: Principal, pool_id: Any, amount: float, distribution_type: str,
) -> dict:
    pool = await load_instance(db, "stakingPool", pool_id)

    log_step("Get active staking positions")
    result = await db.execute(
        select(StakingPosition).where(
            StakingPosition.pool_id == pool.id,
            StakingPosition.status == PositionStatus.ACTIVE.value,
        ),
    )
    positions = result.scalars().all()

    log_step("Calculate admin fee and user earnings")
    try:
        split = split_earnings(
            amount, pool.admin_fee_percentage, [(p.id, p.amount) for p in positions],
        )
    except ValueError as e:
        raise BadRequestError(str(e))

    db.add(StakingAdminEarning(
        pool_id=pool.id,
        amount=split.admin_fee,
        type="PLATFORM_FEE",
        currency=pool.symbol,
        is_claimed=False,
    ))

    log_step(f"Distribute earnings to {len(split.shares)} positions")
    earning_type = distribution_type.upper()
    for position_id, share in split.shares:
        db.add(StakingEarningRecord(
            position_id=position_id,
            amount=share,
            type=earning_type,
            description=f"Earnings distribution from pool {pool.name}",
            is_claimed=False,
        ))

    db.add(StakingAdminActivity(
        user_id=as_uuid(admin.user_id),
        action="distribute",
        type="earnings",
        related_id=str(pool.id),
    ))
    await create_notification(
        db,
        admin.user_id,
        title="Earnings Distributed",
        message=(
            f"Distributed {amount} {pool.symbol}: Admin Fee {split.admin_fee}, "
            f"User Earnings {split.user_total}"
        ),
        details="Earnings distribution completed successfully.",
        link="/admin/staking/earnings",
        related_id=str(pool.id),
        actions=[{"label": "View Earnings", "link": "/admin/staking/earnings", "primary": True}],
    )
    await commit_or_conflict(db, "stakingEarningRecord")
    logger.info(
        f"Pool {pool.id}: distributed {amount} {pool.symbol} "
        f"(fee {split.admin_fee}, users {split.user_total})",
    )
    return {
        "message": "Earnings distributed successfully",
        "admin_fee": split.admin_fee,
        "user_total": split.user_total,
        "positions": len(split.shares),
    }


# ─── External pool performance ───────────────────────────────────

async def list_performance(
    db: AsyncSession,
    pool_id: Any = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> dict:
    stmt = select(StakingExternalPoolPerformance).order_by(StakingExternalPoolPerformance.date.desc())
    if pool_id is not None:
        stmt = stmt.where(StakingExternalPoolPerformance.pool_id == as_uuid(pool_id))
    if start_date is not None:
        stmt = stmt.where(StakingExternalPoolPerformance.date >= start_date)
    if end_date is not None:
        stmt = stmt.where(StakingExternalPoolPerformance.date <= end_date)
    rows = (await db.execute(stmt)).scalars().all()
    summary = summarize_performance([(r.apr, r.total_staked, r.profit) for r in rows])
    return {
        "items": [serialize(r, ("pool",)) for r in rows],
        "summary": asdict(summary),
    }


async def record_performance(db: AsyncSession, admin: Principal, data: dict[str, Any]) -> dict:
    pool = await db.get(StakingPool, as_uuid(data["pool_id"]))
    if pool is None:
        raise create_error(404, "Pool not found")

    log_step("Create performance record")
    performance = StakingExternalPoolPerformance(
        pool=pool,
        date=data["date"],
        apr=data["apr"],
        total_staked=data["total_staked"],
        profit=data["profit"],
        notes=data.get("notes") or "",
    )
    db.add(performance)
    await db.flush()
    await create_notification(
        db,
        admin.user_id,
        title="Pool Performance Added",
        message=f"New performance record added for {pool.name} with {performance.apr}% APR.",
        details="The performance record has been created successfully.",
        link="/admin/staking/performance",
        related_id=str(performance.id),
        actions=[{"label": "View Performance", "link": "/admin/staking/performance", "primary": True}],
    )
    await commit_or_conflict(db, "stakingExternalPoolPerformance")
    logger.info(f"Pool {pool.id}: performance recorded at {performance.apr}% APR")
    return {
        "message": "Pool performance recorded successfully",
        "record": serialize(performance, ("pool",)),
    }
