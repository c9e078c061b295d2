"""Client for the backend endpoint listing a user's Pinterest boards."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from models.pinterest import PinterestBoard, PinterestBoardsResponse
from tools.errors import InvalidResponseError, NetworkError, ServerError
from tools.http_utils import response_text, validate_endpoint
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


class PinterestBoardsService:
    def __init__(self, endpoint: str, timeout_seconds: Optional[float] = None) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds

    @instrument_call("fetch_pinterest_boards")
    def fetch_boards(
        self,
        user_id: str,
        access_token: str,
        refresh_token: Optional[str] = None,
        expires_in: Optional[int] = None,
        access_token_expires_at: Optional[str] = None,
        refresh_token_expires_in: Optional[int] = None,
        refresh_token_expires_at: Optional[str] = None,
    ) -> List[PinterestBoard]:
        url = validate_endpoint(self.endpoint)
        body: Dict[str, Any] = {"userId": user_id, "access_token": access_token}
        optional = {
            "refresh_token": refresh_token,
            "expires_in": expires_in,
            "access_token_expires_at": access_token_expires_at,
            "refresh_token_expires_in": refresh_token_expires_in,
            "refresh_token_expires_at": refresh_token_expires_at,
        }
        body.update({key: value for key, value in optional.items() if value is not None})

        try:
            response = requests.post(url, json=body, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            LOGGER.error("Network error fetching Pinterest boards", extra={"error": str(exc)})
            raise NetworkError(exc) from exc

        text = response_text(response)
        if response.status_code != 200:
            raise ServerError(
                f"HTTP {response.status_code}: {text or 'Unknown error'}",
                status_code=response.status_code,
            )

        try:
            parsed = PinterestBoardsResponse.model_validate_json(text)
        except ValidationError as exc:
            LOGGER.warning("Pinterest boards payload failed validation", exc_info=exc)
            raise InvalidResponseError("Malformed Pinterest boards response") from exc

        LOGGER.info("Fetched Pinterest boards", extra={"board_count": len(parsed.boards)})
        return parsed.boards


__all__ = ["PinterestBoardsService"]
