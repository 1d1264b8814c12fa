"""Authenticated principal model."""

from __future__ import annotations

from pydantic import BaseModel

from careauth.roles import Role


class Principal(BaseModel):
    """The authenticated actor making a request; carries exactly one role."""

    user_id: str
    email: str
    role: Role
    is_verified: bool = False

    def to_response(self) -> dict:
        return {
            "_v": "1.0",
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "is_verified": self.is_verified,
        }
