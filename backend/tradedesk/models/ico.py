"""ICO ORM — token offerings with their phases, team and roadmap, investor transactions
and the admin activity log.

Invariants:
    - Phases, team members and roadmap items belong to exactly one offering and go with it
    - Offerings are removed only by services/ico.py delete_offering (guarded delete)
    - IcoAdminActivity.offering_id is null for platform-wide changes (e.g. limits)
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, utcnow
from tradedesk.models.user import User


class IcoTokenOffering(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "ico_token_offerings"

    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    symbol: Mapped[str] = mapped_column(String(20), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    purchase_wallet_currency: Mapped[str] = mapped_column(String(20), nullable=False, default="USDT")
    target_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    start_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    phases: Mapped[list["IcoTokenOfferingPhase"]] = relationship(
        "IcoTokenOfferingPhase", cascade="all, delete-orphan", lazy="selectin",
    )
    team_members: Mapped[list["IcoTeamMember"]] = relationship(
        "IcoTeamMember", cascade="all, delete-orphan", lazy="selectin",
    )
    roadmap_items: Mapped[list["IcoRoadmapItem"]] = relationship(
        "IcoRoadmapItem", cascade="all, delete-orphan", lazy="selectin",
    )


class IcoTokenOfferingPhase(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ico_token_offering_phases"

    offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ico_token_offerings.id", ondelete="CASCADE"), nullable=False,
    )
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    token_price: Mapped[float] = mapped_column(Float, nullable=False)
    allocation: Mapped[float] = mapped_column(Float, nullable=False)
    remaining: Mapped[float] = mapped_column(Float, nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)


class IcoTeamMember(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ico_team_members"

    offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ico_token_offerings.id", ondelete="CASCADE"), nullable=False,
    )
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    role: Mapped[str] = mapped_column(String(191), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)


class IcoRoadmapItem(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ico_roadmap_items"

    offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ico_token_offerings.id", ondelete="CASCADE"), nullable=False,
    )
    title: Mapped[str] = mapped_column(String(191), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class IcoTransaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "ico_transactions"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    offering_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ico_token_offerings.id", ondelete="CASCADE"), nullable=False,
    )
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    release_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    wallet_address: Mapped[str | None] = mapped_column(String(191), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(User, lazy="selectin")
    offering: Mapped[IcoTokenOffering] = relationship(IcoTokenOffering, lazy="selectin")


class IcoAdminActivity(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ico_admin_activities"

    type: Mapped[str] = mapped_column(String(50), nullable=False)
    offering_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ico_token_offerings.id", ondelete="SET NULL"), nullable=True,
    )
    offering_name: Mapped[str] = mapped_column(String(191), nullable=False)
    admin_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
