"""Staking Schemas — pools, positions, earnings distribution and pool performance."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from tradedesk.core.domain_types import DistributionType, PoolStatus, PositionStatus


class PoolCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=191)
    token: str = Field(..., min_length=1, max_length=50)
    symbol: str = Field(..., min_length=1, max_length=20)
    description: str | None = None
    icon: str | None = None
    min_stake: float = Field(0.0, ge=0)
    max_stake: float | None = Field(None, ge=0)
    apr: float = Field(0.0, ge=0)
    lock_period: int = Field(0, ge=0)
    admin_fee_percentage: float = Field(0.0, ge=0, le=100)
    status: PoolStatus = PoolStatus.INACTIVE


class PoolUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=191)
    token: str | None = Field(None, min_length=1, max_length=50)
    symbol: str | None = Field(None, min_length=1, max_length=20)
    description: str | None = None
    icon: str | None = None
    min_stake: float | None = Field(None, ge=0)
    max_stake: float | None = Field(None, ge=0)
    apr: float | None = Field(None, ge=0)
    lock_period: int | None = Field(None, ge=0)
    admin_fee_percentage: float | None = Field(None, ge=0, le=100)
    status: PoolStatus | None = None


class PositionUpdate(BaseModel):
    amount: float | None = Field(None, gt=0)
    end_date: datetime | None = None
    status: PositionStatus | None = None


class DistributeEarningsRequest(BaseModel):
    pool_id: UUID
    amount: float = Field(..., gt=0)
    distribution_type: DistributionType


class PerformanceCreate(BaseModel):
    pool_id: UUID
    date: datetime
    apr: float = Field(..., ge=0)
    total_staked: float = Field(..., ge=0)
    profit: float
    notes: str = ""
