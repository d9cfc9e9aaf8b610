"""Forex Schemas — accounts, plans, investments and transaction review."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from tradedesk.core.domain_types import (
    ForexAccountType, InvestmentResult, InvestmentStatus, TransactionStatus, WalletType,
)


class AccountCreate(BaseModel):
    user_id: UUID
    account_id: str | None = Field(None, max_length=191)
    broker: str | None = Field(None, max_length=191)
    mt: int | None = Field(None, ge=4, le=5)
    balance: float = Field(0.0, ge=0)
    leverage: int = Field(1, ge=1)
    type: ForexAccountType = ForexAccountType.DEMO
    status: bool = True


class AccountUpdate(BaseModel):
    account_id: str | None = Field(None, max_length=191)
    broker: str | None = Field(None, max_length=191)
    mt: int | None = Field(None, ge=4, le=5)
    balance: float | None = Field(None, ge=0)
    leverage: int | None = Field(None, ge=1)
    type: ForexAccountType | None = None
    status: bool | None = None


class PlanCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    title: str | None = Field(None, max_length=191)
    description: str | None = None
    image: str | None = None
    currency: str = Field("USDT", max_length=20)
    wallet_type: WalletType = WalletType.SPOT
    min_profit: float = 0.0
    max_profit: float = 0.0
    min_amount: float = Field(0.0, ge=0)
    max_amount: float | None = Field(None, ge=0)
    profit_percentage: float = 0.0
    default_profit: float = 0.0
    default_result: InvestmentResult = InvestmentResult.WIN
    trending: bool = False
    status: bool = True

    @model_validator(mode="after")
    def check_ranges(self) -> "PlanCreate":
        if self.max_amount is not None and self.max_amount < self.min_amount:
            raise ValueError("max_amount must be greater than min_amount")
        if self.max_profit < self.min_profit:
            raise ValueError("max_profit must be greater than min_profit")
        return self


class PlanUpdate(BaseModel):
    title: str | None = Field(None, max_length=191)
    description: str | None = None
    image: str | None = None
    currency: str | None = Field(None, max_length=20)
    wallet_type: WalletType | None = None
    min_profit: float | None = None
    max_profit: float | None = None
    min_amount: float | None = Field(None, ge=0)
    max_amount: float | None = Field(None, ge=0)
    profit_percentage: float | None = None
    default_profit: float | None = None
    default_result: InvestmentResult | None = None
    trending: bool | None = None
    status: bool | None = None


class InvestmentUpdate(BaseModel):
    amount: float | None = Field(None, gt=0)
    profit: float | None = None
    result: InvestmentResult | None = None
    status: InvestmentStatus | None = None
    end_date: datetime | None = None


class ForexTransactionReview(BaseModel):
    """Admin decision on a pending forex deposit or withdrawal."""
    status: TransactionStatus
    amount: float | None = Field(None, gt=0)
    fee: float | None = Field(None, ge=0)
    description: str | None = None
    reference_id: str | None = Field(None, max_length=191)
    message: str | None = None


class InvestmentRecoverRequest(BaseModel):
    investment_id: UUID
