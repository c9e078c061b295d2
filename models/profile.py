"""Wire models for the profile endpoint and the feed images it returns."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedImage(BaseModel):
    """One image in the personalized feed; ``id`` is the remote pin id."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str
    url: str
    s3_path: Optional[str] = Field(default=None, alias="s3Path")


class MensSizesData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tops: Optional[str] = None
    bottoms: Optional[str] = None
    outerwear: Optional[str] = None
    footwear: Optional[str] = None
    tailoring: Optional[str] = None
    accessories: Optional[str] = None


class WomensSizesData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tops: Optional[str] = None
    bottoms: Optional[str] = None
    outerwear: Optional[str] = None
    dresses: Optional[str] = None


class ProfileData(BaseModel):
    """Profile document as stored remotely."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(alias="userId")
    email: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    username: Optional[str] = None
    profile_photo: Optional[str] = Field(default=None, alias="profilePhoto")
    selected_pinterest_boards: Optional[List[str]] = Field(
        default=None, alias="selectedPinterestBoards"
    )
    selected_brands: Optional[List[str]] = Field(default=None, alias="selectedBrands")
    sizing_gender: Optional[str] = Field(default=None, alias="sizingGender")
    mens_sizes: Optional[MensSizesData] = Field(default=None, alias="mensSizes")
    womens_sizes: Optional[WomensSizesData] = Field(default=None, alias="womensSizes")
    onboarding_complete: Optional[bool] = Field(default=None, alias="onboardingComplete")
    images: Optional[List[FeedImage]] = None


class ProfileResponse(BaseModel):
    """``{message, user}`` wrapper some deployments put around the profile."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    user: Optional[ProfileData] = None


__all__ = [
    "FeedImage",
    "MensSizesData",
    "WomensSizesData",
    "ProfileData",
    "ProfileResponse",
]
