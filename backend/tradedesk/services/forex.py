"""Forex Service — admin review of forex deposits/withdrawals and investment recovery.

Invariants:
    - Only PENDING transactions are reviewed; the new status is written in the same commit
      as the balance it moves
    - The settled amount is amount * meta["price"] (core.forex_settlement)
    - Recovery only applies to CANCELLED investments and clears their metadata
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.domain_types import (
    BalanceChange, ForexAccountType, InvestmentStatus, TransactionStatus, TransactionType,
)
from tradedesk.core.errors import BadRequestError, create_error
from tradedesk.core.forex_settlement import settlement_cost, settlement_target
from tradedesk.core.wallet_balance import apply_balance_change
from tradedesk.infrastructure.mail import MailSender
from tradedesk.models.finance import Transaction, Wallet
from tradedesk.models.forex import ForexAccount, ForexInvestment
from tradedesk.services.records import commit_or_conflict, serialize

logger = logging.getLogger(__name__)

_KIND_TYPES = {
    "deposit": TransactionType.FOREX_DEPOSIT.value,
    "withdraw": TransactionType.FOREX_WITHDRAW.value,
}


async def _pending_transaction(db: AsyncSession, kind: str, transaction_id: Any) -> Transaction:
    result = await db.execute(
        select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.type == _KIND_TYPES[kind],
            Transaction.deleted_at.is_(None),
        ),
    )
    transaction = result.scalar_one_or_none()
    if transaction is None:
        raise create_error(404, "Transaction not found")
    if transaction.status != TransactionStatus.PENDING.value:
        raise BadRequestError("Only pending transactions can be updated")
    return transaction


async def _live_account(db: AsyncSession, user_id: Any) -> ForexAccount:
    result = await db.execute(
        select(ForexAccount).where(
            ForexAccount.user_id == user_id,
            ForexAccount.type == ForexAccountType.LIVE.value,
            ForexAccount.deleted_at.is_(None),
        ),
    )
    account = result.scalar_one_or_none()
    if account is None:
        raise create_error(404, "Forex account not found")
    return account


async def _send_notice(
    sender: MailSender, transaction: Transaction, account: ForexAccount, currency: str,
) -> None:
    user = transaction.user
    if user is None:
        return
    kind = "Deposit" if transaction.type == TransactionType.FOREX_DEPOSIT.value else "Withdrawal"
    html = (
        f"<p>Hello {user.first_name or user.email},</p>"
        f"<p>Your forex {kind.lower()} of {transaction.amount} {currency} "
        f"for account {account.account_id or account.id} is now "
        f"<strong>{transaction.status}</strong>.</p>"
    )
    if (transaction.meta or {}).get("message"):
        html += f"<p>{transaction.meta['message']}</p>"
    try:
        await sender.send(user.email, f"Forex {kind} {transaction.status.title()}", html)
    except Exception as e:
        logger.warning(f"Forex notice for transaction {transaction.id} not sent: {e}")


async def settle_transaction(
    db: AsyncSession,
    sender: MailSender,
    kind: str,
    transaction_id: Any,
    status: str,
    updates: dict[str, Any],
) -> dict:
    """Review a PENDING forex deposit ("deposit") or withdrawal ("withdraw")."""
    transaction = await _pending_transaction(db, kind, transaction_id)
    for field in ("amount", "fee", "description", "reference_id"):
        if updates.get(field) is not None:
            setattr(transaction, field, updates[field])

    log_step(f"Settling forex {kind} {transaction.id} as {status}")
    account = await _live_account(db, transaction.user_id)
    wallet = await db.get(Wallet, transaction.wallet_id) if transaction.wallet_id else None
    if wallet is None:
        raise create_error(404, "Wallet not found")

    target = settlement_target(kind, status)
    if target is not None:
        cost = settlement_cost(transaction.amount, transaction.meta)
        if target == "account":
            account.balance = apply_balance_change(account.balance, cost, 0.0, BalanceChange.DEPOSIT)
            log_step(f"Credited {cost} to forex account {account.id}")
        else:
            wallet.balance = apply_balance_change(wallet.balance, cost, 0.0, BalanceChange.DEPOSIT)
            log_step(f"Credited {cost} to wallet {wallet.id}")

    meta = dict(transaction.meta or {})
    if updates.get("message"):
        meta["message"] = updates["message"]
    transaction.meta = meta
    transaction.status = status
    await commit_or_conflict(db, "transaction")
    await _send_notice(sender, transaction, account, wallet.currency)
    return {"message": "Transaction updated successfully"}


async def recover_investment(db: AsyncSession, investment_id: Any) -> dict:
    result = await db.execute(
        select(ForexInvestment).where(
            ForexInvestment.id == investment_id,
            ForexInvestment.status == InvestmentStatus.CANCELLED.value,
            ForexInvestment.deleted_at.is_(None),
        ),
    )
    investment = result.scalar_one_or_none()
    if investment is None:
        raise create_error(404, "Investment not found or not in CANCELLED status")
    investment.status = InvestmentStatus.ACTIVE.value
    investment.meta = None
    await commit_or_conflict(db, "forexInvestment")
    log_step(f"Investment {investment.id} reset to ACTIVE")
    return {
        "message": "Investment recovery initiated successfully",
        "investment": {"id": str(investment.id), "status": investment.status},
        "record": serialize(investment),
    }
