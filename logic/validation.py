"""Pydantic schemas validating the user input behind each Continue button."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from logic.navigation import AuthMethod


class EmailCredentials(BaseModel):
    """Email sign-in requires a non-blank email and a non-empty password."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _strip_email(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("email must not be blank")
        return stripped


class ProviderCredentials(BaseModel):
    """Apple or Google sign-in carries the provider's stable user id."""

    method: AuthMethod
    provider_user_id: str = Field(min_length=1)
    email: str = ""

    @field_validator("method")
    @classmethod
    def _provider_only(cls, value: AuthMethod) -> AuthMethod:
        if value not in (AuthMethod.APPLE, AuthMethod.GOOGLE):
            raise ValueError("provider sign-in supports apple or google only")
        return value


class BasicProfileInput(BaseModel):
    first_name: str
    username: Optional[str] = ""

    @field_validator("first_name")
    @classmethod
    def _require_first_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("first name is required")
        return stripped

    @field_validator("username")
    @classmethod
    def _normalise_username(cls, value: Optional[str]) -> str:
        return (value or "").strip()


class UploadInput(BaseModel):
    count: int = Field(ge=1, le=30)


__all__ = ["BasicProfileInput", "EmailCredentials", "ProviderCredentials", "UploadInput"]
