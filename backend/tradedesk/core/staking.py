"""Staking Rules — payout split into admin fee and pro-rata shares; external performance summary.

Invariants:
    - admin_fee = round4(amount * admin_fee_percentage / 100)
    - user_total = round4(amount - admin_fee)
    - Each position share = round4(user_total * position_amount / total_staked)
    - Zero shares are dropped; no active stake is a caller error (raises ValueError)
    - Performance averages use the same 4 dp half-up rounding

Design Decisions:
    - Half-up rounding through Decimal: matches how the payout is shown to users
      (4 fixed decimals) instead of banker's rounding from round()
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

_FOUR_PLACES = Decimal("0.0001")


def round4(value: float) -> float:
    return float(Decimal(str(value)).quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Distribution:
    admin_fee: float
    user_total: float
    shares: tuple[tuple[object, float], ...]


def split_earnings(
    amount: float,
    admin_fee_percentage: float,
    positions: Sequence[tuple[object, float]],
) -> Distribution:
    """positions are (position_id, staked_amount) pairs of ACTIVE positions."""
    admin_fee = round4(amount * admin_fee_percentage / 100)
    user_total = round4(amount - admin_fee)
    total_staked = sum(staked for _, staked in positions)
    if total_staked <= 0:
        raise ValueError("No active positions found for distribution")
    shares = []
    for position_id, staked in positions:
        share = round4(user_total * (staked / total_staked))
        if share > 0:
            shares.append((position_id, share))
    return Distribution(admin_fee=admin_fee, user_total=user_total, shares=tuple(shares))


@dataclass(frozen=True)
class PerformanceSummary:
    records: int
    average_apr: float
    total_profit: float
    latest_total_staked: float | None


def summarize_performance(entries: Sequence[tuple[float, float, float]]) -> PerformanceSummary:
    """entries are (apr, total_staked, profit) rows, newest first."""
    if not entries:
        return PerformanceSummary(records=0, average_apr=0.0, total_profit=0.0, latest_total_staked=None)
    return PerformanceSummary(
        records=len(entries),
        average_apr=round4(sum(apr for apr, _, _ in entries) / len(entries)),
        total_profit=round4(sum(profit for _, _, profit in entries)),
        latest_total_staked=entries[0][1],
    )
