"""Model package exports."""

from models.auth import AuthMechanism, AuthRequest, AuthResponse, AuthUser, ErrorResponse
from models.listings import Listing, ListingGroup, ListingsResponse
from models.pinterest import (
    PinterestAuthData,
    PinterestBoard,
    PinterestBoardsResponse,
    PinterestTokenResponse,
)
from models.profile import FeedImage, MensSizesData, ProfileData, ProfileResponse, WomensSizesData
from models.sizing import MensSizes, SizingGender, WomensSizes

__all__ = [
    "AuthMechanism",
    "AuthRequest",
    "AuthResponse",
    "AuthUser",
    "ErrorResponse",
    "FeedImage",
    "Listing",
    "ListingGroup",
    "ListingsResponse",
    "MensSizes",
    "MensSizesData",
    "PinterestAuthData",
    "PinterestBoard",
    "PinterestBoardsResponse",
    "PinterestTokenResponse",
    "ProfileData",
    "ProfileResponse",
    "SizingGender",
    "WomensSizes",
    "WomensSizesData",
]
