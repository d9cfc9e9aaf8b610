"""User Blocks — verifies block duration rules and block-in-force evaluation."""

from datetime import datetime, timedelta, timezone

import pytest

from tradedesk.core.domain_types import UserStatus
from tradedesk.core.errors import BadRequestError
from tradedesk.core.user_blocks import (
    blocked_until, is_block_in_force, status_for_block, validate_block_request,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize("duration", [None, 0, 8761])
def test_temporary_block_needs_valid_duration(duration):
    with pytest.raises(BadRequestError, match="between 1 and 8760 hours"):
        validate_block_request(True, duration)


def test_permanent_block_ignores_duration():
    validate_block_request(False, None)
    validate_block_request(True, 8760)


def test_blocked_until():
    assert blocked_until(NOW, True, 24) == NOW + timedelta(hours=24)
    assert blocked_until(NOW, False, 24) is None


def test_block_in_force():
    assert is_block_in_force(True, False, None, NOW)
    assert is_block_in_force(True, True, NOW + timedelta(hours=1), NOW)
    assert not is_block_in_force(True, True, NOW - timedelta(hours=1), NOW)
    assert not is_block_in_force(False, False, None, NOW)


def test_naive_until_is_treated_as_utc():
    assert is_block_in_force(True, True, datetime(2026, 3, 2), NOW)


def test_status_for_block():
    assert status_for_block(True) is UserStatus.SUSPENDED
    assert status_for_block(False) is UserStatus.BANNED
