"""Domain Types — verifies enum values match the strings stored in the database."""

from tradedesk.core.domain_types import (
    CampaignStatus, DiscountType, IcoTransactionStatus, MlmSystem, OfferingStatus,
    TransactionStatus, UserStatus,
)


def test_str_enums_compare_equal_to_db_strings():
    assert UserStatus.ACTIVE == "ACTIVE"
    assert TransactionStatus("REJECTED") is TransactionStatus.REJECTED


def test_mlm_systems():
    assert {s.value for s in MlmSystem} == {"DIRECT", "BINARY", "UNILEVEL"}


def test_discount_types():
    assert {d.value for d in DiscountType} == {"PERCENTAGE", "FIXED", "FREE_SHIPPING"}


def test_ico_and_campaign_states():
    assert OfferingStatus.SUCCESS.value == "SUCCESS"
    assert IcoTransactionStatus.RELEASED.value == "RELEASED"
    assert CampaignStatus.COMPLETED.value == "COMPLETED"
