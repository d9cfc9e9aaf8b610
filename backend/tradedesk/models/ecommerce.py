"""E-commerce ORM — catalog, orders, discount codes and their per-user usage."""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Float, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import (
    Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, utcnow,
)
from tradedesk.models.user import User


class EcommerceCategory(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "ecommerce_categories"

    name: Mapped[str] = mapped_column(String(191), nullable=False)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class EcommerceProduct(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "ecommerce_products"

    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_categories.id", ondelete="CASCADE"), nullable=False,
    )
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    short_description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="DOWNLOADABLE")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(20), nullable=False, default="USD")
    wallet_type: Mapped[str] = mapped_column(String(20), nullable=False, default="FIAT")
    inventory_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    category: Mapped[EcommerceCategory] = relationship(EcommerceCategory, lazy="selectin")


class EcommerceOrder(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "ecommerce_orders"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    shipping_address: Mapped[str | None] = mapped_column(Text, nullable=True)

    user: Mapped[User] = relationship(User, lazy="selectin")
    items: Mapped[list["EcommerceOrderItem"]] = relationship(
        "EcommerceOrderItem", back_populates="order",
        cascade="all, delete-orphan", lazy="selectin",
    )


class EcommerceOrderItem(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ecommerce_order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_orders.id", ondelete="CASCADE"), nullable=False,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_products.id", ondelete="CASCADE"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    key: Mapped[str | None] = mapped_column(String(191), nullable=True)

    order: Mapped[EcommerceOrder] = relationship(EcommerceOrder, back_populates="items")


class EcommerceDiscount(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "ecommerce_discounts"

    code: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="PERCENTAGE")
    percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    valid_from: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)
    product_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_products.id", ondelete="SET NULL"), nullable=True,
    )
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class EcommerceUserDiscount(UUIDPrimaryKeyMixin, Base):
    __tablename__ = "ecommerce_user_discounts"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
    )
    discount_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("ecommerce_discounts.id", ondelete="CASCADE"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
