"""Wallet Balance — how each kind of transaction moves a wallet balance.

Invariants:
    - WITHDRAWAL subtracts amount + fee
    - DEPOSIT adds amount - fee
    - REFUND_WITHDRAWAL adds amount + fee (gives back a rejected withdrawal in full)
    - A negative resulting balance is refused with BadRequestError("Insufficient balance")
"""

from tradedesk.core.domain_types import BalanceChange
from tradedesk.core.errors import BadRequestError


def apply_balance_change(
    balance: float, amount: float, fee: float, change: BalanceChange | str,
) -> float:
    change = BalanceChange(change)
    fee = fee or 0.0
    if change is BalanceChange.WITHDRAWAL:
        new_balance = balance - (amount + fee)
    elif change is BalanceChange.DEPOSIT:
        new_balance = balance + (amount - fee)
    else:
        new_balance = balance + (amount + fee)
    if new_balance < 0:
        raise BadRequestError("Insufficient balance")
    return new_balance
