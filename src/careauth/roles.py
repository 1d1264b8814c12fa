"""Role enumeration and the registry of declared roles."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import StrEnum
from typing import Any

from careauth.errors import InvalidRoleError


class Role(StrEnum):
    CLIENT = "client"
    PROVIDER = "provider"
    CASE_MANAGER = "case_manager"
    ADMINISTRATOR = "administrator"


class RoleRegistry:
    """The closed set of roles a policy declares."""

    def __init__(self, roles: Iterable[Role] = Role) -> None:
        self._ordered: tuple[Role, ...] = tuple(dict.fromkeys(Role(r) for r in roles))
        self._roles = frozenset(self._ordered)
        self._by_value = {r.value: r for r in self._ordered}

    @property
    def roles(self) -> frozenset[Role]:
        return self._roles

    def __iter__(self) -> Iterator[Role]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def is_valid_role(self, value: Any) -> bool:
        """Return True iff value exactly matches a declared role identifier."""
        return isinstance(value, str) and value in self._by_value

    def parse(self, value: Any) -> Role:
        """Return the Role for value, or raise InvalidRoleError."""
        if not self.is_valid_role(value):
            raise InvalidRoleError(value)
        return self._by_value[value]
