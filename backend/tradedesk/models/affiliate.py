"""Affiliate ORM — referrals, MLM tree nodes, reward conditions and earned rewards.

Invariants:
    - A referral links referrer -> referred; a self-referral marks a tree root
    - Each referral owns at most one binary node and one unilevel node
    - Binary nodes have left/right child slots; unilevel nodes only a parent
    - Condition name is unique; rewards point at the condition that produced them
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Float, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, utcnow
from tradedesk.models.user import User


class MlmReferral(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "mlm_referrals"
    __table_args__ = (
        UniqueConstraint("referrer_id", "referred_id", name="uq_mlm_referral_pair"),
    )

    referrer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    referred_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")

    referrer: Mapped[User] = relationship(User, foreign_keys=[referrer_id], lazy="selectin")
    referred: Mapped[User] = relationship(User, foreign_keys=[referred_id], lazy="selectin")


class MlmBinaryNode(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "mlm_binary_nodes"

    referral_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_referrals.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_binary_nodes.id", ondelete="CASCADE"), nullable=True,
    )
    left_child_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_binary_nodes.id", ondelete="SET NULL"), nullable=True,
    )
    right_child_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_binary_nodes.id", ondelete="SET NULL"), nullable=True,
    )


class MlmUnilevelNode(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "mlm_unilevel_nodes"

    referral_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_referrals.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_unilevel_nodes.id", ondelete="CASCADE"), nullable=True,
    )


class MlmReferralCondition(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "mlm_referral_conditions"

    name: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(191), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    reward: Mapped[float] = mapped_column(Float, nullable=False)
    reward_type: Mapped[str] = mapped_column(String(20), nullable=False, default="PERCENTAGE")
    reward_wallet_type: Mapped[str] = mapped_column(String(20), nullable=False, default="SPOT")
    reward_currency: Mapped[str] = mapped_column(String(20), nullable=False, default="USDT")
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class MlmReferralReward(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "mlm_referral_rewards"

    referrer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    condition_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mlm_referral_conditions.id", ondelete="CASCADE"), nullable=False,
    )
    reward: Mapped[float] = mapped_column(Float, nullable=False)
    is_claimed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    referrer: Mapped[User] = relationship(User, lazy="selectin")
    condition: Mapped[MlmReferralCondition] = relationship(MlmReferralCondition, lazy="selectin")
