"""Content ORM — blog categories, tags and posts, plus page-scoped FAQ entries.

Invariants:
    - Category, tag and post slugs are unique
    - FAQ `order` is dense (0..n-1) within a page_path after every reorder
"""

import uuid

from sqlalchemy import String, Text, Integer, Boolean, ForeignKey, JSON, Table, Column
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin
from tradedesk.models.user import User

post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", UUID(as_uuid=True), ForeignKey("blog_posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", UUID(as_uuid=True), ForeignKey("blog_tags.id", ondelete="CASCADE"), primary_key=True),
)


class BlogCategory(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "blog_categories"

    name: Mapped[str] = mapped_column(String(191), nullable=False)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class BlogTag(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "blog_tags"

    name: Mapped[str] = mapped_column(String(191), nullable=False)
    slug: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)


class BlogPost(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "blog_posts"

    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("blog_categories.id", ondelete="SET NULL"), nullable=True,
    )
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="DRAFT")
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped[BlogCategory | None] = relationship(BlogCategory, lazy="selectin")
    author: Mapped[User | None] = relationship(User, lazy="selectin")
    tags: Mapped[list[BlogTag]] = relationship(BlogTag, secondary=post_tags, lazy="selectin")


class Faq(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "faqs"

    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    page_path: Mapped[str] = mapped_column(String(191), nullable=False, index=True)
    related_faq_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
