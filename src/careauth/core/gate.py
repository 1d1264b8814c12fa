"""Authorization gate: allow/deny decisions for a principal's role."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from careauth.core.resolver import PermissionResolver
from careauth.models.policy import RolePolicy


class AuthorizationGate:
    """Pure allow/deny decisions. Denial returns False; it never raises."""

    def __init__(self, resolver: PermissionResolver) -> None:
        self.resolver = resolver
        self.registry = resolver.registry

    @classmethod
    def from_policy(cls, policy: RolePolicy) -> AuthorizationGate:
        return cls(PermissionResolver(policy))

    def is_authorized(self, role: Any, required_permission: Any) -> bool:
        """Check a single permission against the role's effective set."""
        granted = self.resolver.effective_permissions(role)
        return isinstance(required_permission, str) and required_permission in granted

    def has_all_permissions(self, role: Any, required_permissions: Iterable[str]) -> bool:
        """Check that every listed permission is granted to the role."""
        granted = self.resolver.effective_permissions(role)
        if isinstance(required_permissions, str):
            required_permissions = [required_permissions]
        return all(isinstance(p, str) and p in granted for p in required_permissions)

    def is_authorized_for_any_role(self, role: Any, allowed_roles: Iterable[Any]) -> bool:
        """Check role-list authorization.

        A role passes when it is listed, or when it inherits from a listed
        role: administrators pass wherever case managers are allowed.
        """
        role = self.registry.parse(role)
        if isinstance(allowed_roles, str):
            allowed_roles = [allowed_roles]
        allowed = {self.registry.parse(r) for r in allowed_roles if self.registry.is_valid_role(r)}
        if role in allowed:
            return True
        return not allowed.isdisjoint(self.resolver.inherited_roles(role))
