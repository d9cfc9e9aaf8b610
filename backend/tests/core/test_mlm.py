"""MLM Rules — verifies level settings, transaction allow-list, rewards and binary placement.

Invariants:
    - levels within 2..7 and each percentage within 0..100
    - Percentages summing above 100 pay nobody
    - Binary nodes fill left before right
"""

import json

import pytest

from tradedesk.core.mlm import (
    LevelSettings, binary_placement_field, condition_reward, creates_cycle,
    is_valid_transaction, level_rewards, parse_mlm_settings, validate_level_settings,
)


def _settings(levels: int, *percentages: float) -> dict:
    return {
        "levels": levels,
        "levels_percentage": [
            {"level": i + 1, "value": value} for i, value in enumerate(percentages)
        ],
    }


# ─── Settings ────────────────────────────────────────────────────

def test_parse_unset_settings():
    assert parse_mlm_settings(None) is None
    assert parse_mlm_settings("") is None


def test_parse_rejects_bad_json_and_non_objects():
    with pytest.raises(ValueError, match="Invalid JSON"):
        parse_mlm_settings("{nope")
    with pytest.raises(ValueError, match="JSON object"):
        parse_mlm_settings("[]")


def test_parse_rejects_oversized_blob():
    with pytest.raises(ValueError, match="exceed"):
        parse_mlm_settings("x" * 10_001)


def test_validate_accepts_dict_and_json_string():
    raw = _settings(3, 10, 5, 2.5)
    parsed = validate_level_settings(raw, "BINARY")
    assert parsed.levels == 3
    assert parsed.percentage_for(3) == 2.5
    assert validate_level_settings(json.dumps(raw), "BINARY") == parsed


@pytest.mark.parametrize("levels", [1, 8, "3", True])
def test_validate_rejects_level_count(levels):
    with pytest.raises(ValueError, match="levels between 2 and 7"):
        validate_level_settings({"levels": levels, "levels_percentage": []}, "UNILEVEL")


def test_validate_rejects_out_of_range_percentage():
    with pytest.raises(ValueError, match="between 0-100"):
        validate_level_settings(_settings(2, 10, 101), "BINARY")


def test_validate_rejects_incomplete_entries():
    with pytest.raises(ValueError, match="level and value"):
        validate_level_settings({"levels": 2, "levels_percentage": [{"level": 1}]}, "BINARY")


# ─── Transactions ────────────────────────────────────────────────

@pytest.mark.parametrize("condition, amount, currency, expected", [
    ("WELCOME_BONUS", 100, "USDT", True),
    ("WELCOME_BONUS", 99.99, "USDT", False),
    ("WELCOME_BONUS", 500, "BTC", False),
    ("MONTHLY_TRADE_VOLUME", 1000, "USDT", False),
    ("MONTHLY_TRADE_VOLUME", 1000.01, "USDT", True),
    ("DEPOSIT", 1, "BTC", True),
    ("DEPOSIT", 0, "BTC", False),
    ("DEPOSIT", float("inf"), "BTC", False),
    ("UNKNOWN_CONDITION", 50, "USDT", False),
    ("", 50, "USDT", False),
])
def test_is_valid_transaction(condition, amount, currency, expected):
    assert is_valid_transaction(condition, amount, currency) is expected


def test_condition_reward():
    assert condition_reward("PERCENTAGE", 10, 500) == 50
    assert condition_reward("FIXED", 7, 500) == 7


# ─── Level Rewards ───────────────────────────────────────────────

def test_level_rewards_walk_from_farthest_upline():
    settings = validate_level_settings(_settings(3, 10, 20, 30), "UNILEVEL")
    payouts = level_rewards(["near", "mid", "far"], settings, "FIXED", 100, 0)
    assert payouts == [("far", 10.0), ("mid", 20.0), ("near", 30.0)]


def test_level_rewards_skip_unconfigured_levels():
    settings = LevelSettings(levels=2, levels_percentage=((2, 50.0),))
    assert level_rewards(["near", "far"], settings, "FIXED", 10, 0) == [("near", 5.0)]


def test_level_rewards_skip_zero_shares():
    settings = validate_level_settings(_settings(2, 0, 40), "BINARY")
    assert level_rewards(["near", "far"], settings, "FIXED", 10, 0) == [("near", 4.0)]


def test_level_rewards_over_100_percent_pays_nobody():
    settings = validate_level_settings(_settings(2, 60, 50), "BINARY")
    assert level_rewards(["near", "far"], settings, "FIXED", 10, 0) == []


# ─── Placement ───────────────────────────────────────────────────

def test_binary_placement_order():
    assert binary_placement_field(None, None) == "left_child_id"
    assert binary_placement_field("l", None) == "right_child_id"
    assert binary_placement_field(None, "r") == "left_child_id"
    assert binary_placement_field("l", "r") is None


def test_creates_cycle_compares_as_strings():
    assert creates_cycle(["a", "b"], "b")
    assert not creates_cycle(["a", "b"], "c")
    assert not creates_cycle([], "a")
