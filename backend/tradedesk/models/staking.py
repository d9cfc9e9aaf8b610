"""Staking ORM — pools, user positions, per-position earnings and admin-side records.

Invariants:
    - Only ACTIVE positions take part in an earnings distribution
    - Every distribution writes one StakingAdminEarning (PLATFORM_FEE) and one
      StakingAdminActivity, plus one StakingEarningRecord per paid position
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, utcnow
from tradedesk.models.user import User


class StakingPool(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "staking_pools"

    name: Mapped[str] = mapped_column(String(191), nullable=False)
    token: Mapped[str] = mapped_column(String(50), nullable=False)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    min_stake: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_stake: Mapped[float | None] = mapped_column(Float, nullable=True)
    apr: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    lock_period: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_fee_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="INACTIVE")


class StakingPosition(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "staking_positions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    pool_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staking_pools.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="ACTIVE")

    user: Mapped[User] = relationship(User, lazy="selectin")
    pool: Mapped[StakingPool] = relationship(StakingPool, lazy="selectin")


class StakingEarningRecord(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "staking_earning_records"

    position_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staking_positions.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="REGULAR")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class StakingAdminEarning(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "staking_admin_earnings"

    pool_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staking_pools.id", ondelete="CASCADE"), nullable=False,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[str] = mapped_column(String(30), nullable=False, default="PLATFORM_FEE")
    currency: Mapped[str] = mapped_column(String(20), nullable=False)
    is_claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class StakingAdminActivity(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "staking_admin_activities"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    related_id: Mapped[str] = mapped_column(String(191), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class StakingExternalPoolPerformance(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Admin-entered results of the external venue a pool stakes into."""

    __tablename__ = "staking_external_pool_performances"

    pool_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("staking_pools.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    apr: Mapped[float] = mapped_column(Float, nullable=False)
    total_staked: Mapped[float] = mapped_column(Float, nullable=False)
    profit: Mapped[float] = mapped_column(Float, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    pool: Mapped[StakingPool] = relationship(StakingPool, lazy="selectin")
