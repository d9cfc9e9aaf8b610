"""Affiliate Metrics — month windows and growth figures for the affiliate dashboard.

Invariants:
    - Months are UTC calendar months labelled "YYYY-MM"
    - Percent changes round half-up to whole numbers
    - A change measured against an empty previous month is 0, trend "up"
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def month_start(moment: datetime, months_back: int = 0) -> datetime:
    index = moment.year * 12 + (moment.month - 1) - months_back
    return datetime(index // 12, index % 12 + 1, 1, tzinfo=timezone.utc)


def month_labels(now: datetime, count: int = 12) -> list[str]:
    """Oldest first, ending with the month of `now`."""
    return [month_start(now, back).strftime("%Y-%m") for back in range(count - 1, -1, -1)]


def percent_change(current: float, previous: float) -> int:
    if previous <= 0:
        return 0
    return _round_half_up((current - previous) / previous * 100)


def trend(current: float, previous: float) -> str:
    return "up" if current >= previous else "down"


def growth_metric(value: float, current: float, previous: float) -> dict:
    return {
        "value": value,
        "change": percent_change(current, previous),
        "trend": trend(current, previous),
    }


def conversion_rate(rewards: int, referrals: int) -> int:
    """Share of referrals that produced a reward, in whole percent."""
    if referrals <= 0:
        return 0
    return _round_half_up(rewards / referrals * 100)


def conversion_metric(current_rewards: int, previous_rewards: int, total_referrals: int) -> dict:
    current = conversion_rate(current_rewards, total_referrals)
    previous = conversion_rate(previous_rewards, total_referrals)
    return {
        "value": current,
        "change": current - previous if previous else 0,
        "trend": trend(current, previous),
    }
