"""Shoppable listings per feed image, and the post-onboarding listings finder."""

from __future__ import annotations

import logging
from typing import List, Optional

import requests
from pydantic import ValidationError

from models.listings import ListingGroup, ListingsResponse
from tools.errors import InvalidResponseError, NetworkError, ServerError, ServiceError
from tools.http_utils import is_success, response_text, validate_endpoint
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


class ListingsService:
    def __init__(
        self,
        listings_url: str,
        finder_url: str,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.listings_url = listings_url
        self.finder_url = finder_url
        self.timeout_seconds = timeout_seconds

    @instrument_call("fetch_listings")
    def fetch_listings(self, user_id: str, pin_id: str) -> List[ListingGroup]:
        url = validate_endpoint(self.listings_url)
        try:
            response = requests.get(
                url, params={"userId": user_id, "pinId": pin_id}, timeout=self.timeout_seconds
            )
        except requests.RequestException as exc:
            LOGGER.error("Network error fetching listings", extra={"error": str(exc)})
            raise NetworkError(exc) from exc

        text = response_text(response)
        if not is_success(response.status_code):
            raise ServerError(text or "Unknown error", status_code=response.status_code)
        try:
            return ListingsResponse.model_validate_json(text).items
        except ValidationError as exc:
            LOGGER.warning("Listings payload failed validation", exc_info=exc)
            raise InvalidResponseError("Malformed listings response") from exc

    def trigger_listings_finder(self, user_id: str) -> None:
        """Ask the backend to start matching listings for a new user.

        Fire-and-forget: failures are logged and never raised.
        """

        try:
            url = validate_endpoint(self.finder_url)
            response = requests.post(url, json={"user_id": user_id}, timeout=self.timeout_seconds)
        except ServiceError as exc:
            LOGGER.warning("Listings finder not configured", extra={"error": str(exc)})
            return
        except requests.RequestException as exc:
            LOGGER.warning("Listings finder unreachable", extra={"error": str(exc)})
            return
        LOGGER.info("Listings finder triggered", extra={"status_code": response.status_code})


__all__ = ["ListingsService"]
