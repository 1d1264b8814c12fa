"""Shared test fixtures for careauth."""

from __future__ import annotations

from pathlib import Path

import pytest

from careauth.config import Config
from careauth.core.gate import AuthorizationGate
from careauth.core.resolver import PermissionResolver
from careauth.defaults import DEFAULT_POLICY
from careauth.models.policy import RolePolicy
from careauth.roles import Role


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CAREAUTH_HOME", str(tmp_path / "home"))
    for name in ("CAREAUTH_POLICY", "CAREAUTH_LOG_LEVEL", "CAREAUTH_JWT_SECRET"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def resolver() -> PermissionResolver:
    return PermissionResolver(DEFAULT_POLICY)


@pytest.fixture
def gate(resolver: PermissionResolver) -> AuthorizationGate:
    return AuthorizationGate(resolver)


@pytest.fixture
def small_policy() -> RolePolicy:
    return RolePolicy(
        hierarchy={Role.PROVIDER: (Role.CLIENT,), Role.CLIENT: ()},
        permissions={
            Role.CLIENT: frozenset({"request:services"}),
            Role.PROVIDER: frozenset({"manage:availability"}),
        },
        defaults=frozenset({"view:own-profile"}),
    )


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(config_path=tmp_path)
