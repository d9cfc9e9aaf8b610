"""Mailwizard Dispatch — pure target bookkeeping for one campaign send pass.

Invariants:
    - targets is a JSON array of {"email", "status", ...} objects stored as text
    - A pass sends at most `speed` PENDING targets, in stored order
    - A campaign is complete once no PENDING target remains
"""

import json

from tradedesk.core.domain_types import TargetStatus


def parse_targets(raw: str | None) -> list[dict]:
    """Decode a campaign's targets; raises ValueError on malformed data."""
    if not raw:
        return []
    try:
        targets = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed targets: {e.msg}")
    if not isinstance(targets, list) or not all(isinstance(t, dict) for t in targets):
        raise ValueError("Malformed targets: expected a list of objects")
    return targets


def dump_targets(targets: list[dict]) -> str:
    return json.dumps(targets)


def select_batch(targets: list[dict], speed: int) -> list[int]:
    """Indexes of the next PENDING targets to send this pass."""
    if speed <= 0:
        return []
    pending = [
        i for i, target in enumerate(targets)
        if target.get("status", TargetStatus.PENDING.value) == TargetStatus.PENDING.value
    ]
    return pending[:speed]


def is_complete(targets: list[dict]) -> bool:
    return not any(
        t.get("status", TargetStatus.PENDING.value) == TargetStatus.PENDING.value
        for t in targets
    )
