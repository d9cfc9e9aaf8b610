"""Permissions — permission-string parsing and principal checks.

Invariants:
    - Permission names are "<action>.<resource>[.<sub>...]", lower-case segments
    - The "Super Admin" role passes every check
    - Everyone else needs exact membership; no wildcards

Design Decisions:
    - Principal is a frozen dataclass built once per request from the DB (api/auth.py),
      so route guards never touch the session
"""

import re
from dataclasses import dataclass, field
from typing import NamedTuple

SUPER_ADMIN_ROLE = "Super Admin"
ACTIONS = ("view", "create", "edit", "delete", "access")

_SEGMENT = re.compile(r"^[a-z][a-z0-9_]*$")


class PermissionName(NamedTuple):
    action: str
    resource: str


def parse_permission(name: str) -> PermissionName:
    parts = name.split(".") if name else []
    if len(parts) < 2:
        raise ValueError(f"Permission '{name}' must look like <action>.<resource>")
    action, *resource = parts
    if action not in ACTIONS:
        raise ValueError(f"Unknown permission action '{action}' in '{name}'")
    for segment in resource:
        if not _SEGMENT.match(segment):
            raise ValueError(f"Invalid permission segment '{segment}' in '{name}'")
    return PermissionName(action, ".".join(resource))


@dataclass(frozen=True)
class Principal:
    user_id: str
    role_name: str | None = None
    permissions: frozenset[str] = field(default_factory=frozenset)
    status: str = "ACTIVE"

    @property
    def is_super_admin(self) -> bool:
        return self.role_name == SUPER_ADMIN_ROLE


def has_permission(principal: Principal, required: str | None) -> bool:
    if not required:
        return True
    if principal.is_super_admin:
        return True
    return required in principal.permissions


def crud_permissions(resource: str) -> dict[str, str]:
    """view./create./edit./delete. names for one resource."""
    return {
        action: f"{action}.{resource}"
        for action in ("view", "create", "edit", "delete")
    }
