"""Mailwizard ORM — email templates and the campaigns that send them.

Invariants:
    - targets is stored as JSON text and parsed by core.mailwizard_dispatch;
      malformed text must stay storable so one bad campaign never blocks the others
    - speed is the maximum number of targets sent per dispatch pass
"""

import uuid

from sqlalchemy import String, Text, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from tradedesk.db.base import Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin


class MailwizardTemplate(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "mailwizard_templates"

    name: Mapped[str] = mapped_column(String(191), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    design: Mapped[str | None] = mapped_column(Text, nullable=True)


class MailwizardCampaign(UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "mailwizard_campaigns"

    name: Mapped[str] = mapped_column(String(191), nullable=False)
    subject: Mapped[str] = mapped_column(String(191), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="PENDING")
    speed: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    targets: Mapped[str | None] = mapped_column(Text, nullable=True)
    template_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("mailwizard_templates.id", ondelete="CASCADE"), nullable=False,
    )

    template: Mapped[MailwizardTemplate] = relationship(MailwizardTemplate, lazy="selectin")
