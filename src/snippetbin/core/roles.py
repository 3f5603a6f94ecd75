"""Role tiers and their fixed priority ordering.

Both the pin authorization check and the listing sort key read from this
table, so a role's rank is defined exactly once.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["Role", "ROLE_PRIORITY", "PIN_ROLES", "role_priority", "can_pin", "parse_role"]


class Role(str, Enum):
    """Closed set of account roles."""

    USER = "user"
    MANAGER = "manager"
    STAFF = "staff"
    FOUNDER = "founder"


ROLE_PRIORITY: dict[Role, int] = {
    Role.FOUNDER: 4,
    Role.STAFF: 3,
    Role.MANAGER: 2,
    Role.USER: 1,
}

# Roles allowed to pin and unpin pastes.
PIN_ROLES = frozenset({Role.FOUNDER, Role.STAFF, Role.MANAGER})


def parse_role(value: Role | str | None) -> Role | None:
    """Return the matching ``Role`` or ``None`` for unknown values."""
    if isinstance(value, Role):
        return value
    if not value:
        return None
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return None


def role_priority(value: Role | str | None) -> int:
    """Return the ranking weight of a role; unknown roles rank below ``user``."""
    role = parse_role(value)
    if role is None:
        return 0
    return ROLE_PRIORITY[role]


def can_pin(value: Role | str | None) -> bool:
    """Return True if the role may change a paste's pinned flag."""
    return parse_role(value) in PIN_ROLES
