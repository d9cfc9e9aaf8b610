"""ICO Schemas — offerings, transaction review, investment limits and platform settings."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from tradedesk.core.domain_types import IcoTransactionStatus, OfferingStatus


class OfferingCreate(BaseModel):
    user_id: UUID | None = None
    name: str = Field(..., min_length=1, max_length=191)
    symbol: str = Field(..., min_length=1, max_length=20)
    icon: str | None = None
    status: OfferingStatus = OfferingStatus.PENDING
    purchase_wallet_currency: str = Field("USDT", max_length=20)
    target_amount: float = Field(0.0, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None


class OfferingUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    symbol: str | None = Field(None, min_length=1, max_length=20)
    icon: str | None = None
    status: OfferingStatus | None = None
    purchase_wallet_currency: str | None = Field(None, max_length=20)
    target_amount: float | None = Field(None, ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None


class IcoTransactionUpdate(BaseModel):
    status: IcoTransactionStatus | None = None
    release_url: str | None = None
    notes: str | None = None


class IcoLimits(BaseModel):
    """Investment limits; every field optional on update, only sent fields are written."""
    min_investment: float | None = None
    max_investment: float | None = None
    max_per_user: float | None = None
    soft_cap_percentage: float | None = None
    refund_grace_period: int | None = None
    vesting_enabled: bool | None = None
    default_vesting_months: int | None = None


class IcoPlatformSettings(BaseModel):
    """Platform-wide ICO switches; partial updates, only sent fields are written."""
    min_investment_amount: float | None = None
    max_investment_amount: float | None = None
    platform_fee_percentage: float | None = None
    kyc_required: bool | None = None
    maintenance_mode: bool | None = None
    allow_public_offerings: bool | None = None
    announcement_message: str | None = Field(None, max_length=1000)
    announcement_active: bool | None = None
