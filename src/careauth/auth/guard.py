"""Guards that turn gate decisions into ForbiddenError for request handlers."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from careauth.core.gate import AuthorizationGate
from careauth.errors import ForbiddenError
from careauth.models.principal import Principal

logger = logging.getLogger(__name__)


def require_roles(
    gate: AuthorizationGate, principal: Principal, allowed_roles: Iterable[str]
) -> Principal:
    """Allow the principal if its role, or a role it inherits, is listed."""
    if isinstance(allowed_roles, str):
        allowed_roles = [allowed_roles]
    allowed = [str(r) for r in allowed_roles]
    if gate.is_authorized_for_any_role(principal.role, allowed):
        logger.debug(
            "Authorization successful: user=%s role=%s allowed=%s",
            principal.user_id,
            principal.role.value,
            allowed,
        )
        return principal

    logger.debug(
        "Authorization failed: user=%s role=%s allowed=%s",
        principal.user_id,
        principal.role.value,
        allowed,
    )
    raise ForbiddenError(
        principal.role.value,
        allowed,
        "You do not have permission to access this resource",
    )


def require_permissions(
    gate: AuthorizationGate, principal: Principal, required_permissions: Iterable[str]
) -> Principal:
    """Allow the principal only if its role holds every listed permission."""
    if isinstance(required_permissions, str):
        required_permissions = [required_permissions]
    required = list(required_permissions)
    if gate.has_all_permissions(principal.role, required):
        logger.debug(
            "Permission check successful: user=%s required=%s", principal.user_id, required
        )
        return principal

    missing = sorted(set(required) - gate.resolver.effective_permissions(principal.role))
    logger.debug(
        "Permission check failed: user=%s role=%s missing=%s",
        principal.user_id,
        principal.role.value,
        missing,
    )
    raise ForbiddenError(
        principal.role.value,
        required,
        "You do not have the required permissions to access this resource",
    )
