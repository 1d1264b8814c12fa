"""Load and dump role policies as YAML documents."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from careauth.errors import ConfigurationError
from careauth.models.policy import RolePolicy

logger = logging.getLogger(__name__)


def load_policy(path: Path) -> RolePolicy:
    """Read a policy file with ``hierarchy``, ``permissions`` and ``defaults`` keys."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigurationError(f"Policy file {path} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Malformed policy file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Policy file {path} must contain a mapping")

    # Roles without parents may be written as null.
    hierarchy = data.get("hierarchy") or {}
    permissions = data.get("permissions") or {}
    if isinstance(hierarchy, dict):
        hierarchy = {role: parents or [] for role, parents in hierarchy.items()}
    if isinstance(permissions, dict):
        permissions = {role: perms or [] for role, perms in permissions.items()}

    try:
        policy = RolePolicy(
            hierarchy=hierarchy,
            permissions=permissions,
            defaults=data.get("defaults") or [],
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid policy file {path}: {e}") from e

    logger.info("Loaded role policy from %s (%d roles)", path, len(policy.hierarchy))
    return policy


def dump_policy(policy: RolePolicy, path: Path) -> None:
    """Write a policy to YAML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(policy.to_storage(), f, default_flow_style=False, sort_keys=False)
