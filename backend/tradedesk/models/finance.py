"""Finance ORM — wallets and the transactions that move their balances.

Invariants:
    - One wallet per (user, currency, type)
    - balance never goes negative (enforced by core.wallet_balance before writes)
    - Transaction.meta holds per-type details (price for forex, note for rejections)

Design Decisions:
    - `meta` attribute maps to the `metadata` column: `metadata` is reserved on
      declarative classes
"""

import uuid

from sqlalchemy import String, Text, Float, Boolean, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin
from tradedesk.models.user import User


class Wallet(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "wallets"
    __table_args__ = (
        UniqueConstraint("user_id", "currency", "type", name="uq_wallet_user_currency_type"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="SPOT")
    currency: Mapped[str] = mapped_column(String(20), nullable=False)
    balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    in_order: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped[User] = relationship(User, lazy="selectin")


class Transaction(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "transactions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    wallet_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("wallets.id", ondelete="SET NULL"), nullable=True,
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_id: Mapped[str | None] = mapped_column(String(191), nullable=True, unique=True)
    meta: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)

    user: Mapped[User] = relationship(User, lazy="selectin")
    wallet: Mapped[Wallet | None] = relationship(Wallet, lazy="selectin")
