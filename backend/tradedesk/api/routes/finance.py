"""Finance Routes — wallets, transactions, withdrawal review and deposit updates.

Invariants:
    - Withdrawal approve/reject and deposit updates need edit.transaction
    - Wallets and transactions are read-only tables apart from wallet status
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.api.auth import require_permission
from tradedesk.api.crud_router import CrudResource, build_crud_router, operation
from tradedesk.core.endpoint_metadata import (
    EndpointMetadata, register_endpoint, status_update_responses,
)
from tradedesk.core.permissions import Principal
from tradedesk.infrastructure.database import get_db
from tradedesk.infrastructure.mail import MailSender, get_mail_sender
from tradedesk.schemas.finance import DepositUpdate, WithdrawRejectRequest
from tradedesk.services import finance

logger = logging.getLogger(__name__)

PREFIX = "/api/admin/finance"


def _transaction_metadata(operation_id: str, summary: str) -> EndpointMetadata:
    return register_endpoint(EndpointMetadata(
        summary=summary,
        operation_id=operation_id,
        tags=("finance",),
        permission="edit.transaction",
        log_module="finance",
        responses=status_update_responses("Transaction"),
    ))


APPROVE_WITHDRAWAL = _transaction_metadata("approveWithdrawal", "Approve a withdrawal")
REJECT_WITHDRAWAL = _transaction_metadata("rejectWithdrawal", "Reject a withdrawal")
UPDATE_DEPOSIT = _transaction_metadata("updateDeposit", "Update a deposit")

custom = APIRouter(prefix=PREFIX, tags=["finance"])


@custom.post(
    "/wallet/withdraw/{transaction_id}/approve", **APPROVE_WITHDRAWAL.route_kwargs(),
)
async def approve_withdrawal(
    transaction_id: UUID,
    request: Request,
    principal: Principal = Depends(require_permission(APPROVE_WITHDRAWAL.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(APPROVE_WITHDRAWAL, principal, request):
        return await finance.approve_withdrawal(db, sender, transaction_id)


@custom.post(
    "/wallet/withdraw/{transaction_id}/reject", **REJECT_WITHDRAWAL.route_kwargs(),
)
async def reject_withdrawal(
    transaction_id: UUID,
    body: WithdrawRejectRequest,
    request: Request,
    principal: Principal = Depends(require_permission(REJECT_WITHDRAWAL.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(REJECT_WITHDRAWAL, principal, request):
        return await finance.reject_withdrawal(db, sender, transaction_id, body.message)


@custom.put("/deposit/{transaction_id}", **UPDATE_DEPOSIT.route_kwargs())
async def update_deposit(
    transaction_id: UUID,
    body: DepositUpdate,
    request: Request,
    principal: Principal = Depends(require_permission(UPDATE_DEPOSIT.permission)),
    db: AsyncSession = Depends(get_db),
    sender: MailSender = Depends(get_mail_sender),
):
    async with operation(UPDATE_DEPOSIT, principal, request):
        return await finance.update_deposit(
            db, sender, transaction_id, body.status.value, body.model_dump(exclude={"status"}),
        )


WALLETS = CrudResource(
    model="wallet",
    permission="wallet",
    name="Wallet",
    tag="finance",
    log_module="finance",
    operations=frozenset({"list", "get", "status"}),
    searchable=("currency",),
    includes=("user",),
    demo_mask=("user.email",),
)

TRANSACTIONS = CrudResource(
    model="transaction",
    permission="transaction",
    name="Transaction",
    tag="finance",
    log_module="finance",
    operations=frozenset({"list", "get"}),
    searchable=("reference_id", "description"),
    includes=("user", "wallet"),
    demo_mask=("user.email",),
)

router = APIRouter()
router.include_router(custom)
router.include_router(build_crud_router(f"{PREFIX}/wallet", WALLETS))
router.include_router(build_crud_router(f"{PREFIX}/transaction", TRANSACTIONS))
