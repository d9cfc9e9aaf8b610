"""ICO Limits — defaults, validation messages and settings-row encoding."""

import pytest

from tradedesk.core.errors import BadRequestError
from tradedesk.core.ico_limits import (
    LIMIT_DEFAULTS, PLATFORM_DEFAULTS, limits_to_settings, platform_settings_to_rows,
    read_limits, read_platform_settings, validate_limits, validate_platform_settings,
)


def test_empty_settings_read_as_defaults():
    assert read_limits({}) == {
        "min_investment": 10.0,
        "max_investment": 100000.0,
        "max_per_user": 50000.0,
        "soft_cap_percentage": 30.0,
        "refund_grace_period": 7,
        "vesting_enabled": False,
        "default_vesting_months": 12,
    }


def test_stored_values_are_decoded():
    limits = read_limits({
        "ico_min_investment": "25.5",
        "ico_refund_grace_period": "14",
        "ico_vesting_enabled": "true",
        "ico_max_per_user": "",
    })
    assert limits["min_investment"] == 25.5
    assert limits["refund_grace_period"] == 14
    assert limits["vesting_enabled"] is True
    assert limits["max_per_user"] == LIMIT_DEFAULTS["max_per_user"]


def test_garbage_values_fall_back_to_default():
    assert read_limits({"ico_max_investment": "lots"})["max_investment"] == 100000.0


@pytest.mark.parametrize("update, message", [
    ({"min_investment": -1}, "Minimum investment cannot be negative"),
    ({"min_investment": 50, "max_investment": 10},
     "Maximum investment must be greater than minimum investment"),
    ({"soft_cap_percentage": 120}, "Soft cap percentage must be between 0 and 100"),
])
def test_validation_messages(update, message):
    with pytest.raises(BadRequestError) as exc_info:
        validate_limits(update)
    assert exc_info.value.message == message


def test_valid_update_passes():
    validate_limits({"min_investment": 0, "max_investment": 0, "soft_cap_percentage": 100})


def test_only_provided_fields_written():
    rows = limits_to_settings({"min_investment": 5.0, "vesting_enabled": False, "max_per_user": None})
    assert rows == {"ico_min_investment": "5.0", "ico_vesting_enabled": "false"}


# ─── Platform settings ───────────────────────────────────────────

def test_platform_defaults():
    assert read_platform_settings({}) == PLATFORM_DEFAULTS
    assert PLATFORM_DEFAULTS["announcement_message"] == ""
    assert PLATFORM_DEFAULTS["kyc_required"] is False


def test_platform_values_decoded():
    settings = read_platform_settings({
        "ico_platform_fee_percentage": "2.5",
        "ico_platform_maintenance_mode": "true",
        "ico_platform_announcement_message": "Launch on Monday",
        "ico_platform_kyc_required": "yes",
    })
    assert settings["platform_fee_percentage"] == 2.5
    assert settings["maintenance_mode"] is True
    assert settings["announcement_message"] == "Launch on Monday"
    assert settings["kyc_required"] is False


@pytest.mark.parametrize("update, message", [
    ({"min_investment_amount": -5}, "Investment amounts cannot be negative"),
    ({"max_investment_amount": -1}, "Investment amounts cannot be negative"),
    ({"platform_fee_percentage": 101}, "Platform fee percentage must be between 0 and 100"),
])
def test_platform_validation_messages(update, message):
    with pytest.raises(BadRequestError) as exc_info:
        validate_platform_settings(update)
    assert exc_info.value.message == message


def test_platform_rows_keep_empty_announcement():
    rows = platform_settings_to_rows({"announcement_message": "", "announcement_active": False})
    assert rows == {
        "ico_platform_announcement_message": "",
        "ico_platform_announcement_active": "false",
    }
