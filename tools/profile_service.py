"""Client for the profile endpoint: fetch and upsert the user's profile."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict, Iterable, Optional

import requests
from pydantic import ValidationError

from models.profile import ProfileData, ProfileResponse
from models.sizing import MensSizes, SizingGender, WomensSizes
from tools.errors import EncodingError, NetworkError, ServerError
from tools.http_utils import is_success, response_text, validate_endpoint
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


def encode_photo(photo: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(photo).decode("ascii")


def build_profile_payload(
    user_id: str,
    first_name: Optional[str] = None,
    username: Optional[str] = None,
    photo: Optional[bytes] = None,
    board_ids: Iterable[str] = (),
    brand_names: Iterable[str] = (),
    sizing_gender: SizingGender = SizingGender.MENS,
    mens_sizes: Optional[MensSizes] = None,
    womens_sizes: Optional[WomensSizes] = None,
    onboarding_complete: Optional[bool] = None,
) -> Dict[str, Any]:
    """Build the upsert body.

    Empty scalars and empty selections are left out so a partial save never
    blanks values already stored remotely. Size grids are always sent whole.
    """

    payload: Dict[str, Any] = {"userId": user_id}
    if first_name:
        payload["firstName"] = first_name
    if username:
        payload["username"] = username
    if photo:
        payload["profilePhoto"] = encode_photo(photo)
    boards = sorted(set(board_ids))
    if boards:
        payload["selectedPinterestBoards"] = boards
    brands = sorted(set(brand_names))
    if brands:
        payload["selectedBrands"] = brands
    payload["sizingGender"] = sizing_gender.value
    payload["mensSizes"] = (mens_sizes or MensSizes()).as_dict()
    payload["womensSizes"] = (womens_sizes or WomensSizes()).as_dict()
    if onboarding_complete is not None:
        payload["onboardingComplete"] = onboarding_complete
    return payload


def decode_profile(text: str) -> Optional[ProfileData]:
    """Decode either the ``{message, user}`` wrapper or a bare profile document."""

    try:
        raw = json.loads(text)
    except ValueError:
        return None
    if not isinstance(raw, dict):
        return None
    if isinstance(raw.get("user"), dict):
        try:
            return ProfileResponse.model_validate(raw).user
        except ValidationError:
            pass
    try:
        return ProfileData.model_validate(raw)
    except ValidationError:
        return None


def load_profile_image(photo: str, timeout_seconds: Optional[float] = None) -> Optional[bytes]:
    """Resolve a stored profile photo (http URL or base64 data URL) into bytes."""

    if photo.startswith("http"):
        try:
            response = requests.get(photo, timeout=timeout_seconds)
        except requests.RequestException as exc:
            LOGGER.warning("Failed to load profile image", extra={"error": str(exc)})
            return None
        if not is_success(response.status_code):
            LOGGER.warning("Profile image request failed", extra={"status_code": response.status_code})
            return None
        return response.content or None

    marker = "base64,"
    if marker in photo:
        encoded = photo.split(marker, 1)[1]
        try:
            return base64.b64decode(encoded, validate=True) or None
        except (binascii.Error, ValueError):
            LOGGER.warning("Profile photo is not valid base64")
            return None

    return None


class ProfileService:
    """Reads and upserts profile documents. Does no local caching."""

    def __init__(self, profile_url: str, timeout_seconds: Optional[float] = None) -> None:
        self.profile_url = profile_url
        self.timeout_seconds = timeout_seconds

    @instrument_call("fetch_profile")
    def fetch_profile(self, user_id: str) -> Optional[ProfileData]:
        """Return the stored profile, or ``None`` when absent or undecodable.

        Raises:
            ServerError: Any non-2xx status other than 404.
            NetworkError: Transport-level failure.
        """

        url = validate_endpoint(self.profile_url)
        try:
            response = requests.get(
                url,
                params={"userId": user_id},
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            LOGGER.error("Network error fetching profile", extra={"error": str(exc)})
            raise NetworkError(exc) from exc

        text = response_text(response)
        if is_success(response.status_code):
            profile = decode_profile(text)
            if profile is None:
                LOGGER.warning(
                    "Could not decode profile response",
                    extra={"status_code": response.status_code},
                )
            return profile
        if response.status_code == 404:
            LOGGER.info("Profile not found")
            return None
        LOGGER.warning("Profile fetch failed", extra={"status_code": response.status_code})
        raise ServerError(text or "Unknown error", status_code=response.status_code)

    @instrument_call("save_profile")
    def save_profile(
        self,
        user_id: str,
        first_name: Optional[str] = None,
        username: Optional[str] = None,
        photo: Optional[bytes] = None,
        board_ids: Iterable[str] = (),
        brand_names: Iterable[str] = (),
        sizing_gender: SizingGender = SizingGender.MENS,
        mens_sizes: Optional[MensSizes] = None,
        womens_sizes: Optional[WomensSizes] = None,
        onboarding_complete: Optional[bool] = None,
    ) -> None:
        """Upsert the profile.

        Raises:
            EncodingError: The payload cannot be serialized.
            ServerError: Non-2xx status, with the raw body as message.
            NetworkError: Transport-level failure.
        """

        url = validate_endpoint(self.profile_url)
        payload = build_profile_payload(
            user_id=user_id,
            first_name=first_name,
            username=username,
            photo=photo,
            board_ids=board_ids,
            brand_names=brand_names,
            sizing_gender=sizing_gender,
            mens_sizes=mens_sizes,
            womens_sizes=womens_sizes,
            onboarding_complete=onboarding_complete,
        )
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise EncodingError(str(exc)) from exc

        LOGGER.info(
            "Saving profile",
            extra={
                "brand_count": len(payload.get("selectedBrands", [])),
                "board_count": len(payload.get("selectedPinterestBoards", [])),
                "onboarding_complete": onboarding_complete,
            },
        )
        try:
            response = requests.post(
                url,
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            LOGGER.error("Network error saving profile", extra={"error": str(exc)})
            raise NetworkError(exc) from exc

        if not is_success(response.status_code):
            text = response_text(response)
            LOGGER.warning("Profile save failed", extra={"status_code": response.status_code})
            raise ServerError(text or "Unknown error", status_code=response.status_code)


__all__ = [
    "ProfileService",
    "build_profile_payload",
    "decode_profile",
    "encode_photo",
    "load_profile_image",
]
