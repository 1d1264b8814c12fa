"""Tests for RolePolicy consistency checks and the built-in policy."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from careauth.defaults import DEFAULT_PERMISSIONS, DEFAULT_POLICY, ROLE_PERMISSIONS
from careauth.errors import ConfigurationError
from careauth.models.policy import RolePolicy
from careauth.roles import Role


def _policy(hierarchy: dict, permissions: dict | None = None) -> RolePolicy:
    if permissions is None:
        permissions = {role: frozenset() for role in hierarchy}
    return RolePolicy(hierarchy=hierarchy, permissions=permissions)


def test_default_policy_is_consistent():
    assert DEFAULT_POLICY.ensure_consistent() is DEFAULT_POLICY
    assert DEFAULT_POLICY.find_cycle() is None


def test_default_policy_contents():
    assert DEFAULT_POLICY.hierarchy[Role.ADMINISTRATOR] == (
        Role.CASE_MANAGER,
        Role.PROVIDER,
        Role.CLIENT,
    )
    assert DEFAULT_POLICY.hierarchy[Role.CLIENT] == ()
    assert DEFAULT_POLICY.defaults == DEFAULT_PERMISSIONS
    assert "view:own-profile" in DEFAULT_POLICY.defaults
    assert len(ROLE_PERMISSIONS[Role.ADMINISTRATOR]) == 15


def test_policy_coerces_strings():
    policy = RolePolicy(
        hierarchy={"provider": ["client"], "client": []},
        permissions={"provider": ["manage:availability"], "client": []},
        defaults=["view:own-profile"],
    )
    assert policy.hierarchy[Role.PROVIDER] == (Role.CLIENT,)
    assert policy.permissions[Role.PROVIDER] == frozenset({"manage:availability"})
    assert policy.defaults == frozenset({"view:own-profile"})


def test_policy_is_frozen():
    with pytest.raises(ValidationError):
        DEFAULT_POLICY.defaults = frozenset()  # type: ignore[misc]


def test_missing_permission_entry():
    policy = _policy({Role.CLIENT: (), Role.PROVIDER: (Role.CLIENT,)}, {Role.CLIENT: frozenset()})
    with pytest.raises(ConfigurationError, match="No permission entry for role 'provider'"):
        policy.ensure_consistent()


def test_permissions_for_undeclared_role():
    policy = _policy(
        {Role.CLIENT: ()},
        {Role.CLIENT: frozenset(), Role.PROVIDER: frozenset({"manage:availability"})},
    )
    with pytest.raises(ConfigurationError, match="undeclared role 'provider'"):
        policy.ensure_consistent()


def test_undeclared_parent():
    policy = _policy({Role.PROVIDER: (Role.CLIENT,)})
    with pytest.raises(ConfigurationError, match="inherits from undeclared role 'client'"):
        policy.ensure_consistent()


def test_two_role_cycle():
    policy = _policy({Role.CLIENT: (Role.PROVIDER,), Role.PROVIDER: (Role.CLIENT,)})
    cycle = policy.find_cycle()
    assert cycle is not None
    assert cycle[0] == cycle[-1]
    with pytest.raises(ConfigurationError, match="cycle"):
        policy.ensure_consistent()


def test_self_cycle():
    policy = _policy({Role.CLIENT: (Role.CLIENT,)})
    assert policy.find_cycle() == [Role.CLIENT, Role.CLIENT]


def test_longer_cycle():
    policy = _policy(
        {
            Role.ADMINISTRATOR: (Role.CASE_MANAGER,),
            Role.CASE_MANAGER: (Role.PROVIDER,),
            Role.PROVIDER: (Role.ADMINISTRATOR,),
        }
    )
    with pytest.raises(ConfigurationError, match="administrator -> case_manager -> provider"):
        policy.ensure_consistent()


def test_diamond_is_not_a_cycle():
    policy = _policy(
        {
            Role.ADMINISTRATOR: (Role.CASE_MANAGER, Role.CLIENT),
            Role.CASE_MANAGER: (Role.CLIENT,),
            Role.CLIENT: (),
        }
    )
    assert policy.find_cycle() is None
    policy.ensure_consistent()


def test_to_storage():
    data = DEFAULT_POLICY.to_storage()
    assert data["hierarchy"]["provider"] == ["client"]
    assert data["hierarchy"]["client"] == []
    assert data["permissions"]["client"] == sorted(ROLE_PERMISSIONS[Role.CLIENT])
    assert data["defaults"] == sorted(DEFAULT_PERMISSIONS)


def test_default_policy_mappings_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_POLICY.hierarchy[Role.CLIENT] = (Role.ADMINISTRATOR,)  # type: ignore[index]
    with pytest.raises(TypeError):
        DEFAULT_POLICY.permissions[Role.CLIENT] = frozenset()  # type: ignore[index]
    with pytest.raises(TypeError):
        del DEFAULT_POLICY.hierarchy[Role.CLIENT]  # type: ignore[attr-defined]

    assert DEFAULT_POLICY.hierarchy[Role.CLIENT] == ()
    assert DEFAULT_POLICY.ensure_consistent() is DEFAULT_POLICY
