"""Exceptions raised by the careauth authorization core."""

from __future__ import annotations

from typing import Any


class CareAuthError(Exception):
    """Base class for careauth errors."""


class InvalidRoleError(CareAuthError):
    """Raised when a value is not one of the declared roles."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Invalid role: {value!r}")


class ConfigurationError(CareAuthError):
    """Raised when the role policy is inconsistent or cannot be loaded."""


class ForbiddenError(CareAuthError):
    """Raised by guards when a principal fails an authorization check."""

    def __init__(self, role: str, required: list[str], message: str | None = None) -> None:
        self.role = role
        self.required = required
        super().__init__(message or f"Role {role!r} does not satisfy {required}")
