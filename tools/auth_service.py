"""Client for the email / Apple / Google authentication endpoint."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from models.auth import AuthMechanism, AuthRequest, AuthResponse, ErrorResponse
from tools.errors import NetworkError, ServerError
from tools.http_utils import is_success, response_text, validate_endpoint
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


class AuthService:
    """Posts credentials to the auth endpoint and interprets the reply."""

    def __init__(self, endpoint: str, timeout_seconds: Optional[float] = None) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds

    @instrument_call("authenticate")
    def authenticate(self, email: str, password: str, mechanism: AuthMechanism) -> AuthResponse:
        """Authenticate a user.

        Any 2xx status counts as success. The body is decoded when possible and
        otherwise ignored.

        Raises:
            InvalidURLError: The endpoint is not configured.
            ServerError: Non-2xx status, carrying the most specific message found.
            NetworkError: Transport-level failure.
        """

        url = validate_endpoint(self.endpoint)
        body = AuthRequest(email=email, password=password, auth_mechanism=mechanism).model_dump(
            by_alias=True, mode="json"
        )
        LOGGER.info("Sending auth request", extra={"mechanism": mechanism.value})
        try:
            response = requests.post(url, json=body, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            LOGGER.error("Network error during authentication", extra={"error": str(exc)})
            raise NetworkError(exc) from exc

        text = response_text(response)
        LOGGER.debug("Auth response received", extra={"status_code": response.status_code})

        if is_success(response.status_code):
            try:
                return AuthResponse.model_validate_json(text)
            except ValidationError:
                LOGGER.info(
                    "Undecodable auth body on success status",
                    extra={"status_code": response.status_code},
                )
                return AuthResponse(success=True)

        raise ServerError(_error_message(text, response.status_code), status_code=response.status_code)


def _error_message(text: str, status_code: int) -> str:
    try:
        decoded = AuthResponse.model_validate_json(text)
        if decoded.message:
            return decoded.message
    except ValidationError:
        pass
    try:
        return ErrorResponse.model_validate_json(text).error
    except ValidationError:
        pass
    if text:
        return text
    return f"Authentication failed (HTTP {status_code})"


__all__ = ["AuthService", "AuthMechanism"]
