"""careauth data models."""

from careauth.models.policy import RolePolicy
from careauth.models.principal import Principal

__all__ = ["Principal", "RolePolicy"]
