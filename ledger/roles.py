"""
Identity & Role Registry

- A single owner identity fixed when the ledger is created.
- A grant table keyed by (Role, identity). Missing keys read as False.

Only the owner may write grants; the dispatcher enforces that before calling
set_grant().
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, List, Tuple


class Role(str, Enum):
    MINTER = "minter"
    BURNER = "burner"

    @classmethod
    def parse(cls, name: str) -> "Role":
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown role {name!r}; expected one of: minter, burner") from None


def _require_role_type(role: Role) -> None:
    # Role subclasses str, so "minter" must not slip through as an equal key
    if not isinstance(role, Role):
        raise TypeError(f"role must be a Role, got {role!r}; use Role.parse() for names")


class RoleRegistry:
    def __init__(self, owner: str) -> None:
        if not owner:
            raise ValueError("owner identity must be a non-empty string")
        self._owner = owner
        self._grants: Dict[Tuple[Role, str], bool] = {}

    @property
    def owner(self) -> str:
        return self._owner

    def is_owner(self, identity: str) -> bool:
        return identity == self._owner

    def has_role(self, role: Role, identity: str) -> bool:
        _require_role_type(role)
        return self._grants.get((role, identity), False)

    def set_grant(self, role: Role, identity: str, granted: bool) -> None:
        _require_role_type(role)
        self._grants[(role, identity)] = bool(granted)

    def holders(self, role: Role) -> List[str]:
        return sorted(ident for (r, ident), granted in self._grants.items() if r is role and granted)

    def snapshot(self) -> Dict[Tuple[Role, str], bool]:
        return dict(self._grants)
