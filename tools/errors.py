"""Error taxonomy shared by the remote service clients and the onboarding flow."""

from __future__ import annotations


class ServiceError(RuntimeError):
    """Base class for failures surfaced inline on the initiating screen."""

    @property
    def user_message(self) -> str:
        return str(self) or "Something went wrong"


class InvalidURLError(ServiceError):
    """Raised when a configured endpoint is empty or not an HTTP(S) URL."""

    @property
    def user_message(self) -> str:
        return "Invalid server URL"


class InvalidResponseError(ServiceError):
    """Raised when a response cannot be interpreted as the expected payload."""

    @property
    def user_message(self) -> str:
        return "Invalid server response"


class ServerError(ServiceError):
    """Raised for non-success statuses; carries the decoded or raw error body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def user_message(self) -> str:
        return self.message


class NetworkError(ServiceError):
    """Wraps a transport failure (DNS, timeout, connection reset)."""

    def __init__(self, underlying: BaseException) -> None:
        super().__init__(str(underlying))
        self.underlying = underlying

    @property
    def user_message(self) -> str:
        return f"Network error: {self.underlying}"


class EncodingError(ServiceError):
    """Raised when a request body cannot be serialized."""

    @property
    def user_message(self) -> str:
        return "Could not encode request"


class NoMethodSelectedError(ServiceError):
    """Raised when authentication is attempted without picking a method."""

    @property
    def user_message(self) -> str:
        return "No authentication method selected"


class PinterestAuthError(ServiceError):
    """Pinterest authorization or token exchange failure."""

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message

    @property
    def user_message(self) -> str:
        return self.message


__all__ = [
    "ServiceError",
    "InvalidURLError",
    "InvalidResponseError",
    "ServerError",
    "NetworkError",
    "EncodingError",
    "NoMethodSelectedError",
    "PinterestAuthError",
]
