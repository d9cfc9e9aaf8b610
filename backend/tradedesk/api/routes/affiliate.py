"""Affiliate Routes — referrals, reward conditions, rewards, reward processing and the dashboard.

Invariants:
    - Referral create/update go through services.affiliate so MLM nodes follow the referral
    - Reward processing requires create.affiliate.reward
    - The dashboard requires access.affiliate
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import ReferralStatus, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, create_responses, register_endpoint, single_item_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.schemas.affiliate import (
    ConditionCreate, ConditionUpdate, ProcessRewardsRequest, ReferralCreate, ReferralUpdate,
    RewardUpdate,
)
from tradedesk.services import affiliate, affiliate_dashboard

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/affiliate"

PROCESS_REWARDS = register_endpoint(EndpointMetadata(
    summary="Process referral rewards for a transaction",
    operation_id="processAffiliateRewards",
    tags=("affiliate",),
    permission="create.affiliate.reward",
    log_module="affiliate",
    log_title="Process rewards",
    responses=create_responses("Referral Reward"),
))

AFFILIATE_DASHBOARD = register_endpoint(EndpointMetadata(
    summary="Get affiliate dashboard metrics and charts",
    operation_id="getAffiliateDashboard",
    tags=("affiliate",),
    permission="access.affiliate",
    log_module="affiliate",
    log_title="Get dashboard",
    responses=single_item_responses("Affiliate Dashboard"),
))

custom = APIRouter(prefix=PREFIX, tags=["affiliate"])


@custom.get("/dashboard", **AFFILIATE_DASHBOARD.route_kwargs())
async def get_dashboard(
    request: Request,
    principal: Principal = Depends(require_permission(AFFILIATE_DASHBOARD.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(AFFILIATE_DASHBOARD, principal, request):
        return await affiliate_dashboard.get_dashboard(db)


@custom.post("/reward/process", **PROCESS_REWARDS.route_kwargs())
async def process_rewards(
    body: ProcessRewardsRequest,
    request: Request,
    principal: Principal = Depends(require_permission(PROCESS_REWARDS.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(PROCESS_REWARDS, principal, request):
        return await affiliate.process_rewards(
            db, body.user_id, body.amount, body.condition_name, body.currency,
        )


async def _create_referral(db, principal, body: ReferralCreate) -> dict:
    return await affiliate.register_referral(db, body.referrer_id, body.referred_id)


async def _update_referral(db, principal, record_id, body: ReferralUpdate) -> dict:
    return await affiliate.update_referral(
        db, record_id, body.model_dump(mode="json", exclude_unset=True),
    )


REFERRALS = CrudResource(
    model="mlmReferral",
    permission="affiliate.referral",
    name="AffiliateReferral",
    tag="affiliate",
    log_module="affiliate",
    create_schema=ReferralCreate,
    update_schema=ReferralUpdate,
    includes=("referrer", "referred"),
    statuses=values(ReferralStatus),
    demo_mask=("referrer.email", "referred.email"),
    create_handler=_create_referral,
    update_handler=_update_referral,
)

CONDITIONS = CrudResource(
    model="mlmReferralCondition",
    permission="affiliate.condition",
    name="AffiliateCondition",
    tag="affiliate",
    log_module="affiliate",
    create_schema=ConditionCreate,
    update_schema=ConditionUpdate,
    searchable=("name", "title"),
    default_sort="name",
)

REWARDS = CrudResource(
    model="mlmReferralReward",
    permission="affiliate.reward",
    name="AffiliateReward",
    tag="affiliate",
    log_module="affiliate",
    update_schema=RewardUpdate,
    operations=frozenset({"list", "get", "update", "delete", "bulk_delete"}),
    includes=("referrer", "condition"),
    demo_mask=("referrer.email",),
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/referral", REFERRALS))
router.include_router(build_crud_router(f"{PREFIX}/condition", CONDITIONS))
router.include_router(build_crud_router(f"{PREFIX}/reward", REWARDS))
