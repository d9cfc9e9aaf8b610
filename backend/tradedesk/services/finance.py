"""Finance Service — admin review of wallet withdrawals and deposits.

Invariants:
    - Only PENDING transactions are reviewed
    - Approving a withdrawal moves no money (the balance was held when it was requested)
    - Rejecting a withdrawal refunds amount + fee; completing a deposit credits amount - fee
    - The status change and the balance change share one commit; the email goes after it
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tradedesk.core.api_context import log_step
from tradedesk.core.domain_types import BalanceChange, TransactionStatus, TransactionType
from tradedesk.core.errors import BadRequestError, create_error
from tradedesk.core.wallet_balance import apply_balance_change
from tradedesk.infrastructure.mail import MailSender
from tradedesk.models.finance import Transaction, Wallet
from tradedesk.services.records import commit_or_conflict

logger = logging.getLogger(__name__)


async def _pending(db: AsyncSession, transaction_id: Any, type_: str) -> Transaction:
    result = await db.execute(
        select(Transaction).where(
            Transaction.id == transaction_id,
            Transaction.type == type_,
            Transaction.deleted_at.is_(None),
        ),
    )
    transaction = result.scalar_one_or_none()
    if transaction is None:
        raise create_error(404, "Transaction not found")
    if transaction.status != TransactionStatus.PENDING.value:
        raise BadRequestError("Transaction is not pending")
    return transaction


async def _wallet(db: AsyncSession, transaction: Transaction) -> Wallet:
    wallet = await db.get(Wallet, transaction.wallet_id) if transaction.wallet_id else None
    if wallet is None:
        raise create_error(404, "Wallet not found")
    return wallet


async def _send_status_email(
    sender: MailSender, transaction: Transaction, wallet: Wallet, note: str | None = None,
) -> None:
    user = transaction.user
    if user is None:
        return
    html = (
        f"<p>Hello {user.first_name or user.email},</p>"
        f"<p>Your {transaction.type.lower()} of {transaction.amount} {wallet.currency} "
        f"is now <strong>{transaction.status}</strong>. "
        f"Wallet balance: {wallet.balance} {wallet.currency}.</p>"
    )
    if note:
        html += f"<p>{note}</p>"
    try:
        await sender.send(user.email, f"Transaction {transaction.status.title()}", html)
    except Exception as e:
        logger.warning(f"Status email for transaction {transaction.id} not sent: {e}")


async def approve_withdrawal(db: AsyncSession, sender: MailSender, transaction_id: Any) -> dict:
    transaction = await _pending(db, transaction_id, TransactionType.WITHDRAW.value)
    wallet = await _wallet(db, transaction)
    transaction.status = TransactionStatus.COMPLETED.value
    await commit_or_conflict(db, "transaction")
    log_step(f"Withdrawal {transaction.id} approved")
    await _send_status_email(sender, transaction, wallet)
    return {"message": "Withdrawal approved successfully"}


async def reject_withdrawal(
    db: AsyncSession, sender: MailSender, transaction_id: Any, message: str | None,
) -> dict:
    transaction = await _pending(db, transaction_id, TransactionType.WITHDRAW.value)
    wallet = await _wallet(db, transaction)
    note = message or "Withdrawal request rejected"

    log_step("Refunding wallet balance")
    wallet.balance = apply_balance_change(
        wallet.balance, transaction.amount, transaction.fee, BalanceChange.REFUND_WITHDRAWAL,
    )
    transaction.status = TransactionStatus.REJECTED.value
    transaction.meta = {**(transaction.meta or {}), "note": note}
    await commit_or_conflict(db, "transaction")
    await _send_status_email(sender, transaction, wallet, note)
    return {"message": "Withdrawal rejected successfully"}


async def update_deposit(
    db: AsyncSession, sender: MailSender, transaction_id: Any, status: str, updates: dict[str, Any],
) -> dict:
    transaction = await _pending(db, transaction_id, TransactionType.DEPOSIT.value)
    for field in ("amount", "fee", "description", "reference_id"):
        if updates.get(field) is not None:
            setattr(transaction, field, updates[field])
    wallet = await _wallet(db, transaction)

    if status == TransactionStatus.COMPLETED.value:
        log_step("Crediting wallet")
        wallet.balance = apply_balance_change(
            wallet.balance, transaction.amount, transaction.fee, BalanceChange.DEPOSIT,
        )
    transaction.status = status
    await commit_or_conflict(db, "transaction")
    log_step(f"Deposit {transaction.id} set to {status}")
    await _send_status_email(sender, transaction, wallet)
    return {"message": "Transaction updated successfully"}
