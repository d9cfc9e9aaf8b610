"""Staking Routes — pools, positions, earnings, earnings distribution and pool performance."""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import PoolStatus, PositionStatus, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, create_responses, list_responses, register_endpoint,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.staking import (
    DistributeEarningsRequest, PerformanceCreate, PoolCreate, PoolUpdate, PositionUpdate,
)
from tradedesk.services import staking

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/staking"

DISTRIBUTE_EARNINGS = register_endpoint(EndpointMetadata(
    summary="Distribute pool earnings to active positions",
    operation_id="distributeStakingEarnings",
    tags=("staking",),
    permission="create.staking.earning",
    log_module="staking",
    log_title="Distribute earnings",
    responses=create_responses("Staking Earning"),
))

LIST_PERFORMANCE = register_endpoint(EndpointMetadata(
    summary="List external pool performance records with a summary",
    operation_id="listStakingPoolPerformance",
    tags=("staking",),
    permission="view.staking.performance",
    log_module="staking",
    log_title="List pool performance",
    responses=list_responses("Pool Performance"),
))
RECORD_PERFORMANCE = register_endpoint(EndpointMetadata(
    summary="Record external pool performance",
    operation_id="createStakingPoolPerformance",
    tags=("staking",),
    permission="create.staking.performance",
    log_module="staking",
    log_title="Record pool performance",
    responses=create_responses("Pool Performance"),
))

custom = APIRouter(prefix=f"{PREFIX}/earning", tags=["staking"])
performance = APIRouter(prefix=f"{PREFIX}/performance", tags=["staking"])


@custom.post("/distribute", **DISTRIBUTE_EARNINGS.route_kwargs())
async def distribute_earnings(
    body: DistributeEarningsRequest,
    request: Request,
    principal: Principal = Depends(require_permission(DISTRIBUTE_EARNINGS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(DISTRIBUTE_EARNINGS, principal, request):
        return await staking.distribute_earnings(
            db, principal, body.pool_id, body.amount, body.distribution_type.value,
        )


@performance.get("", **LIST_PERFORMANCE.route_kwargs())
async def list_performance(
    request: Request,
    pool_id: UUID | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    principal: Principal = Depends(require_permission(LIST_PERFORMANCE.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(LIST_PERFORMANCE, principal, request):
        return await staking.list_performance(db, pool_id, start_date, end_date)


@performance.post("", **RECORD_PERFORMANCE.route_kwargs())
async def record_performance(
    body: PerformanceCreate,
    request: Request,
    principal: Principal = Depends(require_permission(RECORD_PERFORMANCE.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(RECORD_PERFORMANCE, principal, request):
        return await staking.record_performance(db, principal, body.model_dump())


POOLS = CrudResource(
    model="stakingPool",
    permission="staking.pool",
    name="StakingPool",
    tag="staking",
    log_module="staking",
    create_schema=PoolCreate,
    update_schema=PoolUpdate,
    operations=frozenset({"list", "get", "create", "update", "delete", "bulk_delete", "status"}),
    searchable=("name", "token", "symbol"),
    statuses=values(PoolStatus),
)

POSITIONS = CrudResource(
    model="stakingPosition",
    permission="staking.position",
    name="StakingPosition",
    tag="staking",
    log_module="staking",
    update_schema=PositionUpdate,
    operations=frozenset({"list", "get", "update", "status"}),
    includes=("user", "pool"),
    statuses=values(PositionStatus),
    demo_mask=("user.email",),
)

EARNINGS = CrudResource(
    model="stakingEarningRecord",
    permission="staking.earning",
    name="StakingEarning",
    tag="staking",
    log_module="staking",
    operations=frozenset({"list", "get"}),
)

router = APIRouter()
router.include_router(custom)
router.include_router(performance)
router.include_router(build_crud_router(f"{PREFIX}/pool", POOLS))
router.include_router(build_crud_router(f"{PREFIX}/position", POSITIONS))
router.include_router(build_crud_router(f"{PREFIX}/earning", EARNINGS))
