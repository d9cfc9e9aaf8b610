"""Demo Mask — hides personal data in responses when the deployment runs in demo mode.

Invariants:
    - The masking strategy is chosen from the leaf field name of each path
    - Non-string values are returned unchanged
    - apply_demo_mask never mutates its input

Design Decisions:
    - Field names are matched lower-cased with underscores removed, so
      "tx_id", "txId" and "txid" pick the same strategy
"""

import copy
import re
from typing import Any, Callable

MASK = "****"


# ─── Strategies ───────────────────────────────────────────────────

def mask_email(value: str) -> str:
    local, sep, domain = value.partition("@")
    if not sep or not domain:
        return "***@***.***"
    if len(local) > 2:
        masked_local = local[0] + "*" * min(len(local) - 2, 5) + local[-1]
    else:
        masked_local = "**"
    parts = domain.split(".")
    masked_domain = ".".join(
        part if i == len(parts) - 1 else "*" * min(len(part), 4)
        for i, part in enumerate(parts)
    )
    return f"{masked_local}@{masked_domain}"


def mask_phone(value: str) -> str:
    if len(re.sub(r"\D", "", value)) < 4:
        return "***"
    return value[:3] + "*" * max(len(value) - 6, 3) + value[-3:]


def mask_address(value: str) -> str:
    """Wallet or postal address: first 6 and last 4 characters stay."""
    if len(value) <= 10:
        return "*" * len(value)
    return value[:6] + "*" * min(len(value) - 10, 12) + value[-4:]


def mask_tx_id(value: str) -> str:
    if len(value) <= 12:
        return "*" * len(value)
    return value[:8] + "*" * min(len(value) - 12, 16) + value[-4:]


def mask_secret(value: str) -> str:
    return "*" * min(len(value), 12)


def mask_account_id(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]


def mask_script(value: str) -> str:
    if len(value) <= 10:
        return "*" * len(value)
    return value[:10] + "..." + "*" * 8


def mask_default(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return value[0] + "*" * min(len(value) - 2, 8) + value[-1]


# Checked in order; first keyword hit wins
_STRATEGIES: list[tuple[tuple[str, ...], Callable[[str], str]]] = [
    (("email",), mask_email),
    (("phone", "mobile"), mask_phone),
    (("address",), mask_address),
    (("txid", "transactionid", "txhash"), mask_tx_id),
    (("password", "secret", "key"), mask_secret),
    (("accountid",), mask_account_id),
    (("script",), mask_script),
]


def mask_for_field(field_name: str) -> Callable[[str], str]:
    key = field_name.lower().replace("_", "")
    for keywords, strategy in _STRATEGIES:
        if any(word in key for word in keywords):
            return strategy
    return mask_default


def mask_value(value: Any, field_name: str = "") -> Any:
    if not isinstance(value, str) or not value:
        return value
    return mask_for_field(field_name)(value)


# ─── Path walking ─────────────────────────────────────────────────

def _mask_path(node: Any, parts: list[str], field_name: str) -> None:
    if isinstance(node, list):
        for item in node:
            _mask_path(item, parts, field_name)
        return
    if not isinstance(node, dict) or not parts:
        return
    head, rest = parts[0], parts[1:]
    if head not in node:
        return
    if rest:
        _mask_path(node[head], rest, field_name)
    elif isinstance(node[head], list):
        node[head] = [mask_value(v, field_name) for v in node[head]]
    else:
        node[head] = mask_value(node[head], field_name)


def apply_demo_mask(data: Any, paths: tuple[str, ...] | list[str]) -> Any:
    """Masked deep copy of data; "items.user.email" walks through lists."""
    if not paths:
        return data
    masked = copy.deepcopy(data)
    for path in paths:
        parts = path.split(".")
        _mask_path(masked, parts, parts[-1])
    return masked
