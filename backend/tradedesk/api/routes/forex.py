"""Forex Routes — accounts, plans, investments, transaction review and investment recovery.

Invariants:
    - Deposit and withdrawal review need edit.forex.transaction
    - Recovery needs edit.forex.investment
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.domain_types import InvestmentStatus, TransactionType, values
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint, status_update_responses, update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.infrastructure.mail import MailSender, get_mail_sender
from tradedesk.models.finance import Transaction
from tradedesk.schemas.forex import (
    AccountCreate, AccountUpdate, ForexTransactionReview, InvestmentRecoverRequest,
    InvestmentUpdate, PlanCreate, PlanUpdate,
)
from tradedesk.services import forex

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/ext/forex"


def _review_metadata(kind: str) -> EndpointMetadata:
    return register_endpoint(EndpointMetadata(
        summary=f"Review a forex {kind}",
        operation_id=f"updateForex{kind.capitalize()}",
        tags=("forex",),
        permission="edit.forex.transaction",
        log_module="forex",
        log_title=f"Update forex {kind}",
        responses=status_update_responses("Transaction"),
    ))


REVIEW_DEPOSIT = _review_metadata("deposit")
REVIEW_WITHDRAW = _review_metadata("withdraw")
RECOVER_INVESTMENT = register_endpoint(EndpointMetadata(
    summary="Recover a cancelled forex investment",
    operation_id="recoverForexInvestment",
    tags=("forex",),
    permission="edit.forex.investment",
    log_module="forex",
    log_title="Recover investment",
    responses=update_responses("Forex Investment"),
))

custom = APIRouter(prefix=PREFIX, tags=["forex"])


@custom.put("/deposit/{transaction_id}", **REVIEW_DEPOSIT.route_kwargs())
async def review_deposit(
    transaction_id: UUID,
    body: ForexTransactionReview,
    request: Request,
    principal: Principal = Depends(require_permission(REVIEW_DEPOSIT.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(REVIEW_DEPOSIT, principal, request):
        return await forex.settle_transaction(
            db, sender, "deposit", transaction_id, body.status.value,
            body.model_dump(exclude={"status"}),
        )


@custom.put("/withdraw/{transaction_id}", **REVIEW_WITHDRAW.route_kwargs())
async def review_withdraw(
    transaction_id: UUID,
    body: ForexTransactionReview,
    request: Request,
    principal: Principal = Depends(require_permission(REVIEW_WITHDRAW.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(REVIEW_WITHDRAW, principal, request):
        return await forex.settle_transaction(
            db, sender, "withdraw", transaction_id, body.status.value,
            body.model_dump(exclude={"status"}),
        )


@custom.post("/investment/recover", **RECOVER_INVESTMENT.route_kwargs())
async def recover_investment(
    body: InvestmentRecoverRequest,
    request: Request,
    principal: Principal = Depends(require_permission(RECOVER_INVESTMENT.permission)),
    db: AsyncSession = Depends(get_db),
):
    async with operation(RECOVER_INVESTMENT, principal, request):
        return await forex.recover_investment(db, body.investment_id)


ACCOUNTS = CrudResource(
    model="forexAccount",
    permission="forex.account",
    name="ForexAccount",
    tag="forex",
    log_module="forex",
    create_schema=AccountCreate,
    update_schema=AccountUpdate,
    searchable=("account_id", "broker"),
    includes=("user",),
    demo_mask=("user.email", "account_id"),
)

PLANS = CrudResource(
    model="forexPlan",
    permission="forex.plan",
    name="ForexPlan",
    tag="forex",
    log_module="forex",
    create_schema=PlanCreate,
    update_schema=PlanUpdate,
    searchable=("name", "title"),
)

INVESTMENTS = CrudResource(
    model="forexInvestment",
    permission="forex.investment",
    name="ForexInvestment",
    tag="forex",
    log_module="forex",
    update_schema=InvestmentUpdate,
    operations=frozenset({"list", "get", "update", "delete", "bulk_delete", "restore", "status"}),
    includes=("user", "plan"),
    statuses=values(InvestmentStatus),
    demo_mask=("user.email",),
)

TRANSACTIONS = CrudResource(
    model="transaction",
    permission="forex.transaction",
    name="ForexTransaction",
    tag="forex",
    log_module="forex",
    operations=frozenset({"list", "get"}),
    includes=("user",),
    demo_mask=("user.email",),
    extra_where=lambda: (Transaction.type.in_((
        TransactionType.FOREX_DEPOSIT.value, TransactionType.FOREX_WITHDRAW.value,
    )),),
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/account", ACCOUNTS))
router.include_router(build_crud_router(f"{PREFIX}/plan", PLANS))
router.include_router(build_crud_router(f"{PREFIX}/investment", INVESTMENTS))
router.include_router(build_crud_router(f"{PREFIX}/transaction", TRANSACTIONS))
