"""Demo Mask — verifies per-field masking strategies for demo deployments."""

import pytest

from tradedesk.core.demo_mask import (
    apply_demo_mask, mask_default, mask_for_field, mask_secret, mask_value,
)


# ─── Strategies by field name ─────────────────────────────────────

def test_email_masks_local_part_and_domain():
    assert mask_value("john.smith@example.com", "email") == "j*****h@****.com"
    assert mask_value("jo@mail.example.org", "email") == "**@****.****.org"


def test_email_without_domain():
    assert mask_value("not-an-email", "email") == "***@***.***"


def test_phone_keeps_first_and_last_three():
    assert mask_value("+15551234567", "phone") == "+15******567"
    assert mask_value("12", "mobile") == "***"


def test_address_keeps_six_and_four():
    addr = "0x1234567890abcdef1234"
    assert mask_value(addr, "wallet_address") == "0x1234" + "*" * 12 + "1234"
    assert mask_value("short", "shipping_address") == "*****"


def test_tx_id_keeps_eight_and_four():
    tx = "abcdefgh12345678wxyz"
    assert mask_value(tx, "tx_id") == "abcdefgh" + "*" * 8 + "wxyz"
    assert mask_value(tx, "txHash") == "abcdefgh" + "*" * 8 + "wxyz"


@pytest.mark.parametrize("field", ["password", "webhookSecret", "api_key"])
def test_secrets_are_fully_starred(field):
    assert mask_value("supersecretvalue", field) == "*" * 12
    assert mask_value("abc", field) == "***"


def test_account_id_keeps_last_four():
    assert mask_value("ACC-987654", "account_id") == "******7654"
    assert mask_value("1234", "accountId") == "****"


def test_script_keeps_first_ten():
    assert mask_value("76a914deadbeefcafe88ac", "script") == "76a914dead..." + "*" * 8


def test_other_fields_use_default():
    assert mask_for_field("first_name") is mask_default
    assert mask_value("Someone", "first_name") == "S*****e"
    assert mask_value("Bob", "last_name") == "***"


def test_secret_checked_before_account_id():
    assert mask_for_field("account_key") is mask_secret


def test_non_strings_untouched():
    assert mask_value(42, "phone") == 42
    assert mask_value(None, "email") is None
    assert mask_value("", "email") == ""


# ─── Path walking ─────────────────────────────────────────────────

def test_apply_walks_lists_and_copies():
    data = {
        "items": [
            {"user": {"email": "ann@site.io", "first_name": "Annabel"}},
            {"user": {"email": "bob@site.io", "first_name": "Bob"}},
        ],
    }
    masked = apply_demo_mask(data, ("items.user.email",))
    assert [i["user"]["email"] for i in masked["items"]] == ["a*n@****.io", "b*b@****.io"]
    assert masked["items"][0]["user"]["first_name"] == "Annabel"
    assert data["items"][0]["user"]["email"] == "ann@site.io"


def test_leaf_name_picks_strategy():
    masked = apply_demo_mask(
        {"user": {"phone": "+15551234567"}, "webhook_secret": "whsec_123456"},
        ("user.phone", "webhook_secret"),
    )
    assert masked["user"]["phone"] == "+15******567"
    assert masked["webhook_secret"] == "*" * 12


def test_missing_path_is_ignored():
    assert apply_demo_mask({"a": 1}, ("b.c",)) == {"a": 1}


def test_no_paths_returns_same_object():
    data = {"email": "x@y.z"}
    assert apply_demo_mask(data, ()) is data
