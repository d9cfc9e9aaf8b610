"""User Blocks — rules for blocking and unblocking CRM users.

Invariants:
    - Temporary blocks carry a duration of 1–8760 hours; permanent blocks carry none
    - A block is in force while active and either permanent or not yet expired
    - Temporary blocks suspend the user, permanent blocks ban them
"""

from datetime import datetime, timedelta

from tradedesk.core.discounts import as_utc
from tradedesk.core.domain_types import UserStatus
from tradedesk.core.errors import BadRequestError

MIN_BLOCK_HOURS = 1
MAX_BLOCK_HOURS = 8760


def validate_block_request(is_temporary: bool, duration: int | None) -> None:
    if is_temporary and (not duration or not MIN_BLOCK_HOURS <= duration <= MAX_BLOCK_HOURS):
        raise BadRequestError(
            f"Duration must be between {MIN_BLOCK_HOURS} and {MAX_BLOCK_HOURS} hours for temporary blocks"
        )


def blocked_until(now: datetime, is_temporary: bool, duration: int | None) -> datetime | None:
    if not is_temporary or not duration:
        return None
    return now + timedelta(hours=duration)


def is_block_in_force(
    is_active: bool, is_temporary: bool, until: datetime | None, now: datetime,
) -> bool:
    if not is_active:
        return False
    if not is_temporary:
        return True
    return until is not None and as_utc(until) > as_utc(now)


def status_for_block(is_temporary: bool) -> UserStatus:
    return UserStatus.SUSPENDED if is_temporary else UserStatus.BANNED
