"""Pinterest board and OAuth token models."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PinterestBoard(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    description: Optional[str] = None
    pin_count: Optional[int] = None
    sample_images: Optional[List[str]] = None

    @property
    def pin_count_or_zero(self) -> int:
        return self.pin_count or 0

    @property
    def pin_images(self) -> List[str]:
        return list(self.sample_images or [])


class PinterestBoardsResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: str = ""
    boards: List[PinterestBoard] = Field(default_factory=list)
    bookmark: Optional[str] = None


class PinterestTokenResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    refresh_token: Optional[str] = None
    scope: Optional[str] = None


class PinterestAuthData(BaseModel):
    """Tokens obtained from a completed Pinterest authorization."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None


__all__ = [
    "PinterestBoard",
    "PinterestBoardsResponse",
    "PinterestTokenResponse",
    "PinterestAuthData",
]
