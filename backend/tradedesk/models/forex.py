"""Forex ORM — broker accounts, investment plans and user investments.

Invariants:
    - A user has at most one LIVE and one DEMO account
    - ForexInvestment.meta is cleared when an investment is recovered
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Float, Integer, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin
from tradedesk.models.user import User


class ForexAccount(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "forex_accounts"
    __table_args__ = (
        UniqueConstraint("user_id", "type", name="uq_forex_account_user_type"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    account_id: Mapped[str | None] = mapped_column(String(191), nullable=True)
    broker: Mapped[str | None] = mapped_column(String(191), nullable=True)
    mt: Mapped[int | None] = mapped_column(Integer, nullable=True)
    balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    leverage: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    type: Mapped[str] = mapped_column(String(10), nullable=False, default="DEMO")
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped[User] = relationship(User, lazy="selectin")


class ForexPlan(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "forex_plans"

    name: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    title: Mapped[str | None] = mapped_column(String(191), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    currency: Mapped[str] = mapped_column(String(20), nullable=False, default="USDT")
    wallet_type: Mapped[str] = mapped_column(String(20), nullable=False, default="SPOT")
    min_profit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_profit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    min_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    profit_percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    default_profit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    default_result: Mapped[str] = mapped_column(String(10), nullable=False, default="WIN")
    trending: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class ForexInvestment(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "forex_investments"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    plan_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forex_plans.id", ondelete="SET NULL"), nullable=True,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    profit: Mapped[float | None] = mapped_column(Float, nullable=True)
    result: Mapped[str | None] = mapped_column(String(10), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    meta: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)

    user: Mapped[User] = relationship(User, lazy="selectin")
    plan: Mapped[ForexPlan | None] = relationship(ForexPlan, lazy="selectin")
