"""Affiliate Schemas — referrals, reward conditions, rewards and reward processing."""

from uuid import UUID

from pydantic import BaseModel, Field

from tradedesk.core.domain_types import ReferralStatus, RewardType, WalletType


class ReferralCreate(BaseModel):
    referrer_id: UUID
    referred_id: UUID


class ReferralUpdate(BaseModel):
    referrer_id: UUID | None = None
    referred_id: UUID | None = None
    status: ReferralStatus | None = None


class ConditionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    title: str = Field(..., min_length=1, max_length=191)
    description: str | None = None
    type: str = Field(..., min_length=1, max_length=50)
    reward: float = Field(..., ge=0)
    reward_type: RewardType = RewardType.PERCENTAGE
    reward_wallet_type: WalletType = WalletType.SPOT
    reward_currency: str = Field("USDT", max_length=20)
    status: bool = True


class ConditionUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=191)
    description: str | None = None
    type: str | None = Field(None, min_length=1, max_length=50)
    reward: float | None = Field(None, ge=0)
    reward_type: RewardType | None = None
    reward_wallet_type: WalletType | None = None
    reward_currency: str | None = Field(None, max_length=20)
    status: bool | None = None


class RewardUpdate(BaseModel):
    reward: float | None = Field(None, gt=0)
    is_claimed: bool | None = None


class ProcessRewardsRequest(BaseModel):
    user_id: UUID
    amount: float
    condition_name: str = Field(..., min_length=1, max_length=191)
    currency: str = Field(..., min_length=1, max_length=20)
