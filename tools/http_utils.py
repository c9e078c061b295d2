"""Small helpers shared by the HTTP service clients."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from tools.errors import InvalidURLError


def validate_endpoint(url: str) -> str:
    """Return ``url`` if it is an absolute HTTP(S) URL, else raise."""

    parsed = urlparse(url or "")
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidURLError(f"Unsupported or invalid URL: {url!r}")
    return url


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def response_text(response: Any) -> str:
    """Best-effort text of a response body, empty when absent."""

    text = getattr(response, "text", None)
    if text is None:
        return ""
    return str(text)


__all__ = ["validate_endpoint", "is_success", "response_text"]
