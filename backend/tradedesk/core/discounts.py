"""Discount Rules — code normalization, validity window and usage limits for e-commerce discounts.

Invariants:
    - Codes are compared trimmed and upper-cased
    - Checks run in order: expired, not yet active, single-use already used, usage limit
    - The first failing check wins; None means the discount applies
"""

from datetime import datetime, timezone

from tradedesk.core.domain_types import DiscountType


def normalize_code(code: str) -> str:
    return code.strip().upper()


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes (SQLite round-trips) are taken as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def discount_rejection(
    now: datetime,
    valid_from: datetime | None,
    valid_until: datetime | None,
    max_uses: int | None,
    used_by_user: bool,
    usage_count: int,
) -> str | None:
    now = as_utc(now)
    valid_from, valid_until = as_utc(valid_from), as_utc(valid_until)
    if valid_until is not None and valid_until < now:
        return "This discount code has expired"
    if valid_from is not None and valid_from > now:
        return "This discount code is not yet active"
    if max_uses == 1 and used_by_user:
        return "You have already used this discount code"
    if max_uses and max_uses > 0 and usage_count >= max_uses:
        return "This discount code has reached its usage limit"
    return None


def discount_value(discount_type: str, percentage: float | None, amount: float | None) -> float | None:
    return percentage if discount_type == DiscountType.PERCENTAGE.value else amount


def _format_number(value: float | None) -> str:
    if value is None:
        return "0"
    return f"{value:g}"


def discount_message(discount_type: str, percentage: float | None, amount: float | None) -> str:
    if discount_type == DiscountType.PERCENTAGE.value:
        return f"{_format_number(percentage)}% discount applied!"
    if discount_type == DiscountType.FIXED.value:
        return f"${_format_number(amount)} discount applied!"
    if discount_type == DiscountType.FREE_SHIPPING.value:
        return "Free shipping applied!"
    return "Discount applied successfully!"
