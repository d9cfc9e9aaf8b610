"""Wallet Balance — verifies balance arithmetic per change kind."""

import pytest

from tradedesk.core.domain_types import BalanceChange
from tradedesk.core.errors import BadRequestError
from tradedesk.core.wallet_balance import apply_balance_change


def test_withdrawal_subtracts_amount_and_fee():
    assert apply_balance_change(100, 50, 2, BalanceChange.WITHDRAWAL) == 48


def test_deposit_adds_amount_minus_fee():
    assert apply_balance_change(0, 50, 2, "DEPOSIT") == 48


def test_refund_gives_back_amount_and_fee():
    assert apply_balance_change(10, 50, 2, BalanceChange.REFUND_WITHDRAWAL) == 62


def test_missing_fee_counts_as_zero():
    assert apply_balance_change(10, 5, None, BalanceChange.WITHDRAWAL) == 5


def test_insufficient_balance():
    with pytest.raises(BadRequestError, match="Insufficient balance"):
        apply_balance_change(10, 10, 1, BalanceChange.WITHDRAWAL)


def test_unknown_change_rejected():
    with pytest.raises(ValueError):
        apply_balance_change(10, 1, 0, "TELEPORT")
