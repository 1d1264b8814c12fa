"""Role policy: hierarchy, per-role permissions and baseline permissions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from careauth.errors import ConfigurationError
from careauth.roles import Role, RoleRegistry


class RolePolicy(BaseModel):
    """Immutable authorization configuration, loaded once at startup."""

    model_config = ConfigDict(frozen=True)

    # Each role maps to the roles it directly inherits from, in order.
    hierarchy: dict[Role, tuple[Role, ...]]
    permissions: dict[Role, frozenset[str]]
    defaults: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("hierarchy", "permissions", mode="after")
    @classmethod
    def freeze_mappings(cls, value: dict[Role, Any]) -> MappingProxyType:
        return MappingProxyType(dict(value))

    @property
    def registry(self) -> RoleRegistry:
        return RoleRegistry(self.hierarchy)

    def ensure_consistent(self) -> RolePolicy:
        """Raise ConfigurationError unless the policy is complete and acyclic."""
        for role in self.hierarchy:
            if role not in self.permissions:
                raise ConfigurationError(f"No permission entry for role {role.value!r}")
        for role in self.permissions:
            if role not in self.hierarchy:
                raise ConfigurationError(
                    f"Permissions declared for undeclared role {role.value!r}"
                )
        for role, parents in self.hierarchy.items():
            for parent in parents:
                if parent not in self.hierarchy:
                    raise ConfigurationError(
                        f"Role {role.value!r} inherits from undeclared role {parent.value!r}"
                    )

        cycle = self.find_cycle()
        if cycle:
            path = " -> ".join(r.value for r in cycle)
            raise ConfigurationError(f"Role hierarchy contains a cycle: {path}")
        return self

    def find_cycle(self) -> list[Role] | None:
        """Return one inheritance cycle as a role path, or None."""
        done: set[Role] = set()

        def visit(role: Role, trail: list[Role]) -> list[Role] | None:
            if role in trail:
                return [*trail[trail.index(role) :], role]
            if role in done:
                return None
            for parent in self.hierarchy.get(role, ()):
                cycle = visit(parent, [*trail, role])
                if cycle:
                    return cycle
            done.add(role)
            return None

        for role in self.hierarchy:
            cycle = visit(role, [])
            if cycle:
                return cycle
        return None

    def to_storage(self) -> dict:
        return {
            "hierarchy": {
                role.value: [parent.value for parent in parents]
                for role, parents in self.hierarchy.items()
            },
            "permissions": {
                role.value: sorted(perms) for role, perms in self.permissions.items()
            },
            "defaults": sorted(self.defaults),
        }
