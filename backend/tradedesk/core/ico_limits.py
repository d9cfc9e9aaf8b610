"""ICO Limits — defaults, validation and settings-row mapping for ICO settings.

Invariants:
    - Unset keys read back as LIMIT_DEFAULTS / PLATFORM_DEFAULTS
    - min_investment >= 0, max_investment >= min_investment (when both given),
      soft_cap_percentage within 0–100
    - Platform fee percentage within 0–100, platform amounts never negative
    - Only provided fields are written back; booleans persist as "true"/"false"
"""

from typing import Any, Mapping

from tradedesk.core.errors import BadRequestError

# field -> (settings key, default)
LIMIT_KEYS: dict[str, tuple[str, Any]] = {
    "min_investment": ("ico_min_investment", 10.0),
    "max_investment": ("ico_max_investment", 100_000.0),
    "max_per_user": ("ico_max_per_user", 50_000.0),
    "soft_cap_percentage": ("ico_soft_cap_percentage", 30.0),
    "refund_grace_period": ("ico_refund_grace_period", 7),
    "vesting_enabled": ("ico_vesting_enabled", False),
    "default_vesting_months": ("ico_default_vesting_months", 12),
}

PLATFORM_KEYS: dict[str, tuple[str, Any]] = {
    "min_investment_amount": ("ico_platform_min_investment_amount", 0.0),
    "max_investment_amount": ("ico_platform_max_investment_amount", 0.0),
    "platform_fee_percentage": ("ico_platform_fee_percentage", 0.0),
    "kyc_required": ("ico_platform_kyc_required", False),
    "maintenance_mode": ("ico_platform_maintenance_mode", False),
    "allow_public_offerings": ("ico_platform_allow_public_offerings", False),
    "announcement_message": ("ico_platform_announcement_message", ""),
    "announcement_active": ("ico_platform_announcement_active", False),
}

LIMIT_DEFAULTS = {name: default for name, (_, default) in LIMIT_KEYS.items()}
PLATFORM_DEFAULTS = {name: default for name, (_, default) in PLATFORM_KEYS.items()}


def _decode(raw: str, default: Any) -> Any:
    if isinstance(default, bool):
        return raw == "true"
    if isinstance(default, str):
        return raw
    try:
        return int(raw) if isinstance(default, int) else float(raw)
    except ValueError:
        return default


def _read(keys: Mapping[str, tuple[str, Any]], settings_map: Mapping[str, str]) -> dict[str, Any]:
    values = {}
    for name, (key, default) in keys.items():
        raw = settings_map.get(key)
        values[name] = default if raw in (None, "") else _decode(raw, default)
    return values


def _to_settings(keys: Mapping[str, tuple[str, Any]], update: Mapping[str, Any]) -> dict[str, str]:
    rows = {}
    for name, (key, _) in keys.items():
        value = update.get(name)
        if value is None:
            continue
        rows[key] = ("true" if value else "false") if isinstance(value, bool) else str(value)
    return rows


def read_limits(settings_map: Mapping[str, str]) -> dict[str, Any]:
    return _read(LIMIT_KEYS, settings_map)


def validate_limits(update: Mapping[str, Any]) -> None:
    min_investment = update.get("min_investment")
    max_investment = update.get("max_investment")
    soft_cap = update.get("soft_cap_percentage")
    if min_investment is not None and min_investment < 0:
        raise BadRequestError("Minimum investment cannot be negative")
    if (
        min_investment is not None and max_investment is not None
        and max_investment < min_investment
    ):
        raise BadRequestError("Maximum investment must be greater than minimum investment")
    if soft_cap is not None and not 0 <= soft_cap <= 100:
        raise BadRequestError("Soft cap percentage must be between 0 and 100")


def limits_to_settings(update: Mapping[str, Any]) -> dict[str, str]:
    return _to_settings(LIMIT_KEYS, update)


def read_platform_settings(settings_map: Mapping[str, str]) -> dict[str, Any]:
    return _read(PLATFORM_KEYS, settings_map)


def validate_platform_settings(update: Mapping[str, Any]) -> None:
    for name in ("min_investment_amount", "max_investment_amount"):
        value = update.get(name)
        if value is not None and value < 0:
            raise BadRequestError("Investment amounts cannot be negative")
    fee = update.get("platform_fee_percentage")
    if fee is not None and not 0 <= fee <= 100:
        raise BadRequestError("Platform fee percentage must be between 0 and 100")


def platform_settings_to_rows(update: Mapping[str, Any]) -> dict[str, str]:
    return _to_settings(PLATFORM_KEYS, update)
