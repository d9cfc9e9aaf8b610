"""MLM Rules — pure reward, settings and placement rules for the affiliate program.

Invariants:
    - Level settings: 2 <= levels <= 7, every level percentage within 0–100
    - Level percentages summing above 100 produce no rewards at all
    - Only positive, finite rewards are ever emitted
    - Binary nodes fill left before right; a node with both children taken accepts none

Design Decisions:
    - Uplines arrive ordered nearest-first (level 1 = direct referrer). Level i (0-based)
      is paid the percentage configured for level `levels - i`, walking from the
      farthest upline inward, which is how payouts are configured in the admin UI
    - Transaction validation is a closed allow-list keyed by condition name
"""

import json
import math
from dataclasses import dataclass
from typing import Iterable

from tradedesk.core.domain_types import RewardType

MAX_SETTINGS_SIZE = 10_000
MIN_LEVELS = 2
MAX_LEVELS = 7

_POSITIVE_AMOUNT_CONDITIONS = frozenset({
    "TRADE_COMMISSION", "DEPOSIT", "TRADE", "INVESTMENT", "BINARY_WIN",
    "AI_INVESTMENT", "FOREX_INVESTMENT", "ICO_CONTRIBUTION", "STAKING",
    "STAKING_LOYALTY", "ECOMMERCE_PURCHASE", "P2P_TRADE",
})


@dataclass(frozen=True)
class LevelSettings:
    levels: int
    levels_percentage: tuple[tuple[int, float], ...]

    def percentage_for(self, level: int) -> float | None:
        for lvl, value in self.levels_percentage:
            if lvl == level:
                return value
        return None

    @property
    def total_percentage(self) -> float:
        return sum(value for _, value in self.levels_percentage)


def parse_mlm_settings(raw: str | None) -> dict | None:
    """Decode the stored mlm_settings JSON blob; None when unset."""
    if not raw:
        return None
    if len(raw) > MAX_SETTINGS_SIZE:
        raise ValueError(f"MLM settings exceed {MAX_SETTINGS_SIZE} bytes")
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in MLM settings: {e.msg}")
    if not isinstance(decoded, dict):
        raise ValueError("MLM settings must be a JSON object")
    return decoded


def validate_level_settings(settings: object, system: str) -> LevelSettings:
    label = system.lower()
    if isinstance(settings, str):
        settings = parse_mlm_settings(settings)
    if not isinstance(settings, dict):
        raise ValueError(f"{label} settings must be an object")
    levels = settings.get("levels")
    if isinstance(levels, bool) or not isinstance(levels, int) or not MIN_LEVELS <= levels <= MAX_LEVELS:
        raise ValueError(f"{label} settings must have levels between {MIN_LEVELS} and {MAX_LEVELS}")
    raw_levels = settings.get("levels_percentage")
    if not isinstance(raw_levels, list):
        raise ValueError(f"{label} settings must have a levels_percentage list")
    parsed = []
    for entry in raw_levels:
        if not isinstance(entry, dict):
            raise ValueError(f"{label} level percentages must have level and value")
        level, value = entry.get("level"), entry.get("value")
        if not isinstance(level, int) or not isinstance(value, (int, float)):
            raise ValueError(f"{label} level percentages must have level and value")
        if not 0 <= value <= 100:
            raise ValueError(f"{label} level percentage must be between 0-100, got: {value}")
        parsed.append((level, float(value)))
    return LevelSettings(levels=levels, levels_percentage=tuple(parsed))


def is_valid_transaction(condition_name: str, amount: float, currency: str) -> bool:
    if not condition_name or not currency:
        return False
    if not isinstance(amount, (int, float)) or not math.isfinite(amount) or amount <= 0:
        return False
    if condition_name == "WELCOME_BONUS":
        return currency == "USDT" and amount >= 100
    if condition_name == "MONTHLY_TRADE_VOLUME":
        return currency == "USDT" and amount > 1000
    return condition_name in _POSITIVE_AMOUNT_CONDITIONS


def condition_reward(reward_type: str, reward: float, amount: float) -> float:
    """Reward pool for one transaction: a share of the amount or a fixed sum."""
    if reward_type == RewardType.PERCENTAGE.value:
        return amount * (reward / 100)
    return reward


def level_rewards(
    uplines: list[str],
    settings: LevelSettings,
    reward_type: str,
    reward: float,
    amount: float,
) -> list[tuple[str, float]]:
    """(referrer_id, reward) pairs for a nearest-first upline chain."""
    if settings.total_percentage > 100:
        return []
    pool = condition_reward(reward_type, reward, amount)
    payouts = []
    for i in range(len(uplines) - 1, -1, -1):
        percentage = settings.percentage_for(settings.levels - i)
        if percentage is None:
            continue
        share = pool * (percentage / 100)
        if share > 0 and math.isfinite(share):
            payouts.append((uplines[i], share))
    return payouts


def binary_placement_field(
    left_child_id: object | None, right_child_id: object | None,
) -> str | None:
    if left_child_id is None:
        return "left_child_id"
    if right_child_id is None:
        return "right_child_id"
    return None


def creates_cycle(ancestor_user_ids: Iterable[str], referred_id: str) -> bool:
    return any(str(uid) == str(referred_id) for uid in ancestor_user_ids)
