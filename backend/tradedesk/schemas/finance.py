"""Finance Schemas — withdrawal review and deposit updates."""

from pydantic import BaseModel, Field

from tradedesk.core.domain_types import TransactionStatus


class WithdrawRejectRequest(BaseModel):
    message: str | None = Field(None, max_length=1000)


class DepositUpdate(BaseModel):
    status: TransactionStatus
    amount: float | None = Field(None, gt=0)
    fee: float | None = Field(None, ge=0)
    description: str | None = None
    reference_id: str | None = Field(None, max_length=191)
