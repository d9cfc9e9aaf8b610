"""Forex Settlement — which balance a reviewed forex deposit/withdrawal moves, and by how much.

Invariants:
    - Only PENDING transactions can be settled
    - cost = amount * meta["price"]; a missing or non-positive price is a bad request
    - Deposit COMPLETED credits the forex account, REJECTED refunds the wallet
    - Withdraw COMPLETED credits the wallet, REJECTED refunds the forex account
    - Any other target status moves no money
"""

from typing import Literal

from tradedesk.core.domain_types import TransactionStatus
from tradedesk.core.errors import BadRequestError

SettlementTarget = Literal["account", "wallet"]

_TARGETS: dict[tuple[str, str], SettlementTarget] = {
    ("deposit", TransactionStatus.COMPLETED.value): "account",
    ("deposit", TransactionStatus.REJECTED.value): "wallet",
    ("withdraw", TransactionStatus.COMPLETED.value): "wallet",
    ("withdraw", TransactionStatus.REJECTED.value): "account",
}


def settlement_cost(amount: float, meta: dict | None) -> float:
    price = (meta or {}).get("price")
    try:
        price = float(price)
    except (TypeError, ValueError):
        raise BadRequestError("Transaction metadata is missing a valid price")
    if price <= 0:
        raise BadRequestError("Transaction metadata is missing a valid price")
    return amount * price


def settlement_target(kind: str, status: str) -> SettlementTarget | None:
    return _TARGETS.get((kind, status))
