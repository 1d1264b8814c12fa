"""Permission resolver: effective permission sets over the role hierarchy."""

from __future__ import annotations

import threading
from typing import Any

from careauth.errors import ConfigurationError
from careauth.models.policy import RolePolicy
from careauth.roles import Role


class PermissionResolver:
    """Resolve a role's permissions through transitive inheritance.

    Results are memoized per role. The policy is snapshotted at construction
    and checked for consistency unless ``validate`` is False, in which case
    problems surface as ConfigurationError on first resolution instead.
    """

    def __init__(self, policy: RolePolicy, *, validate: bool = True) -> None:
        if validate:
            policy.ensure_consistent()
        self.policy = policy
        self.registry = policy.registry
        self._parents = {role: tuple(parents) for role, parents in policy.hierarchy.items()}
        self._granted = {role: frozenset(perms) for role, perms in policy.permissions.items()}
        self._defaults = frozenset(policy.defaults)

        self._permissions: dict[Role, frozenset[str]] = {}
        self._ancestors: dict[Role, frozenset[Role]] = {}
        self._lock = threading.Lock()

    def effective_permissions(self, role: Any) -> frozenset[str]:
        """Defaults, the role's own grants, and everything it inherits."""
        return self._resolve_permissions(self.registry.parse(role), ())

    def inherited_roles(self, role: Any) -> frozenset[Role]:
        """Every role that ``role`` transitively inherits from, excluding itself."""
        return self._resolve_ancestors(self.registry.parse(role), ())

    def clear_cache(self) -> None:
        with self._lock:
            self._permissions.clear()
            self._ancestors.clear()

    def _resolve_permissions(self, role: Role, trail: tuple[Role, ...]) -> frozenset[str]:
        self._check_trail(role, trail)
        cached = self._permissions.get(role)
        if cached is not None:
            return cached

        parents = self._parents_of(role)
        granted = set(self._defaults)
        granted |= self._explicit(role)
        for parent in parents:
            granted |= self._resolve_permissions(parent, (*trail, role))
        return self._remember(self._permissions, role, frozenset(granted))

    def _resolve_ancestors(self, role: Role, trail: tuple[Role, ...]) -> frozenset[Role]:
        self._check_trail(role, trail)
        cached = self._ancestors.get(role)
        if cached is not None:
            return cached

        found: set[Role] = set()
        for parent in self._parents_of(role):
            found.add(parent)
            found |= self._resolve_ancestors(parent, (*trail, role))
        return self._remember(self._ancestors, role, frozenset(found))

    def _parents_of(self, role: Role) -> tuple[Role, ...]:
        parents = self._parents.get(role)
        if parents is None:
            raise ConfigurationError(f"Role {role.value!r} is not declared in the hierarchy")
        return parents

    def _explicit(self, role: Role) -> frozenset[str]:
        granted = self._granted.get(role)
        if granted is None:
            raise ConfigurationError(f"No permission entry for role {role.value!r}")
        return granted

    @staticmethod
    def _check_trail(role: Role, trail: tuple[Role, ...]) -> None:
        if role in trail:
            path = " -> ".join(r.value for r in (*trail[trail.index(role) :], role))
            raise ConfigurationError(f"Role hierarchy contains a cycle: {path}")

    def _remember(self, cache: dict, role: Role, value: frozenset) -> frozenset:
        # First writer wins; a racing thread computed an equal value.
        with self._lock:
            return cache.setdefault(role, value)
