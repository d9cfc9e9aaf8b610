"""Affiliate Dashboard — headline metrics and chart series over referrals and rewards.

Invariants:
    - Self-referrals (MLM tree roots) are never counted as referrals or affiliates
    - "Current" is the calendar month of `now`; "previous" is the month before it
    - Monthly earnings always carry 12 points, empty months as 0

Design Decisions:
    - Counts and sums run in SQL; month bucketing runs in Python so the same code
      works on PostgreSQL and SQLite
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import and_, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.affiliate_metrics import (
    conversion_metric, conversion_rate, growth_metric, month_labels, month_start,
)
from tradedesk.core.api_context import log_step
from tradedesk.db.base import utcnow
from tradedesk.models.affiliate import MlmReferral, MlmReferralReward
from tradedesk.models.user import User

logger = logging.getLogger(__name__)

NOT_ROOT = MlmReferral.referrer_id != MlmReferral.referred_id


def _window(column, start: datetime, end: datetime | None = None):
    if end is None:
        return column >= start
    return and_(column >= start, column < end)


async def _current_and_previous(db: AsyncSession, column, created_at, now: datetime, *where) -> tuple:
    current_start, previous_start = month_start(now), month_start(now, 1)
    current = await db.scalar(
        select(column).where(*where, _window(created_at, current_start)),
    )
    previous = await db.scalar(
        select(column).where(*where, _window(created_at, previous_start, current_start)),
    )
    return current or 0, previous or 0


async def _monthly_earnings(db: AsyncSession, now: datetime) -> list[dict]:
    labels = month_labels(now)
    buckets = dict.fromkeys(labels, 0.0)
    result = await db.execute(
        select(MlmReferralReward.created_at, MlmReferralReward.reward).where(
            MlmReferralReward.created_at >= month_start(now, len(labels) - 1),
        ),
    )
    for created_at, reward in result.all():
        key = created_at.strftime("%Y-%m")
        if key in buckets:
            buckets[key] += reward
    return [{"month": month, "amount": amount} for month, amount in buckets.items()]


async def _top_affiliates(db: AsyncSession, limit: int) -> list[dict]:
    referral_rows = (await db.execute(
        select(MlmReferral.referrer_id, func.count(MlmReferral.id))
        .where(NOT_ROOT)
        .group_by(MlmReferral.referrer_id),
    )).all()
    if not referral_rows:
        return []
    reward_rows = (await db.execute(
        select(
            MlmReferralReward.referrer_id,
            func.sum(MlmReferralReward.reward),
            func.count(MlmReferralReward.id),
        ).group_by(MlmReferralReward.referrer_id),
    )).all()
    earned: dict[Any, tuple[float, int]] = {
        referrer_id: (total or 0.0, count) for referrer_id, total, count in reward_rows
    }
    referrer_ids = [referrer_id for referrer_id, _ in referral_rows]
    users = (await db.execute(
        select(User.id, User.first_name, User.last_name).where(User.id.in_(referrer_ids)),
    )).all()
    names = {
        user_id: f"{first or ''} {last or ''}".strip()
        for user_id, first, last in users
    }

    ranked = []
    for referrer_id, referrals in referral_rows:
        earnings, reward_count = earned.get(referrer_id, (0.0, 0))
        ranked.append({
            "id": str(referrer_id),
            "name": names.get(referrer_id) or str(referrer_id),
            "referrals": referrals,
            "earnings": earnings,
            "conversion_rate": conversion_rate(reward_count, referrals),
        })
    ranked.sort(key=lambda row: (-row["earnings"], -row["referrals"]))
    return ranked[:limit]


async def get_dashboard(db: AsyncSession, now: datetime | None = None, top: int = 10) -> dict:
    now = now or utcnow()

    log_step("Calculating affiliate and referral totals")
    total_affiliates = await db.scalar(
        select(func.count(distinct(MlmReferral.referrer_id))).where(NOT_ROOT),
    ) or 0
    total_referrals = await db.scalar(
        select(func.count(MlmReferral.id)).where(NOT_ROOT),
    ) or 0
    affiliates = await _current_and_previous(
        db, func.count(distinct(MlmReferral.referrer_id)), MlmReferral.created_at, now, NOT_ROOT,
    )
    referrals = await _current_and_previous(
        db, func.count(MlmReferral.id), MlmReferral.created_at, now, NOT_ROOT,
    )

    log_step("Calculating earnings and conversion")
    total_earnings = await db.scalar(select(func.sum(MlmReferralReward.reward))) or 0.0
    earnings = await _current_and_previous(
        db, func.sum(MlmReferralReward.reward), MlmReferralReward.created_at, now,
    )
    reward_counts = await _current_and_previous(
        db, func.count(MlmReferralReward.id), MlmReferralReward.created_at, now,
    )

    log_step("Building chart series")
    status_rows = (await db.execute(
        select(MlmReferral.status, func.count(MlmReferral.id))
        .where(NOT_ROOT)
        .group_by(MlmReferral.status)
        .order_by(MlmReferral.status),
    )).all()

    logger.debug(f"Affiliate dashboard: {total_affiliates} affiliates, {total_referrals} referrals")
    return {
        "metrics": {
            "total_affiliates": growth_metric(total_affiliates, *affiliates),
            "total_referrals": growth_metric(total_referrals, *referrals),
            "total_earnings": growth_metric(total_earnings, *earnings),
            "conversion_rate": conversion_metric(*reward_counts, total_referrals),
        },
        "charts": {
            "monthly_earnings": await _monthly_earnings(db, now),
            "affiliate_status": [{"status": s, "count": c} for s, c in status_rows],
            "top_affiliates": await _top_affiliates(db, top),
        },
    }
