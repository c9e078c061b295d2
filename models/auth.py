"""Wire models for the authentication endpoint."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthMechanism(str, Enum):
    """Provider tag sent to the backend."""

    STANDARD = "Standard"
    GOOGLE = "Google"
    APPLE = "Apple"


class AuthRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str
    auth_mechanism: AuthMechanism = Field(alias="authMechanism")


class AuthUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Optional[str] = Field(default=None, alias="userId")


class AuthResponse(BaseModel):
    """Superset of the response shapes the auth endpoint has returned.

    A 2xx status is the source of truth, so ``success`` defaults to true and
    the body only adds detail.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = True
    message: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    token: Optional[str] = None
    user: Optional[AuthUser] = None

    @property
    def resolved_user_id(self) -> Optional[str]:
        if self.user and self.user.user_id:
            return self.user.user_id
        return self.user_id or None


class ErrorResponse(BaseModel):
    error: str


__all__ = ["AuthMechanism", "AuthRequest", "AuthUser", "AuthResponse", "ErrorResponse"]
