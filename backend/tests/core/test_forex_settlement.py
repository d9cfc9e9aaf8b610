"""Forex Settlement — verifies settlement cost and which balance moves per outcome."""

import pytest

from tradedesk.core.errors import BadRequestError
from tradedesk.core.forex_settlement import settlement_cost, settlement_target


def test_cost_uses_price():
    assert settlement_cost(100, {"price": 1.5}) == 150
    assert settlement_cost(10, {"price": "2"}) == 20


@pytest.mark.parametrize("meta", [None, {}, {"price": 0}, {"price": -1}, {"price": "abc"}])
def test_cost_needs_positive_price(meta):
    with pytest.raises(BadRequestError):
        settlement_cost(100, meta)


@pytest.mark.parametrize("kind, status, target", [
    ("deposit", "COMPLETED", "account"),
    ("deposit", "REJECTED", "wallet"),
    ("withdraw", "COMPLETED", "wallet"),
    ("withdraw", "REJECTED", "account"),
    ("deposit", "FAILED", None),
    ("withdraw", "PENDING", None),
])
def test_settlement_target(kind, status, target):
    assert settlement_target(kind, status) == target
