"""Best-effort local cache for image blobs such as the profile photo."""

import logging
from pathlib import Path
from typing import Optional

LOGGER = logging.getLogger(__name__)


def profile_photo_key(user_id: str) -> str:
    return f"profile_{user_id}"


class ImageCache:
    """File-backed blob cache keyed by an opaque string.

    Failures never reach the caller; a miss and an unreadable file look the
    same.
    """

    def __init__(self, base_dir: str | Path = "data/image_cache") -> None:
        self.base_dir = Path(base_dir)

    def _path(self, key: str) -> Path:
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self.base_dir / f"{safe_key}.jpg"

    def save_image(self, key: str, data: bytes) -> None:
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            self._path(key).write_bytes(data)
        except OSError as exc:
            LOGGER.warning("Failed to cache image", extra={"key": key, "error": str(exc)})

    def load_image(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes() if path.exists() else None
        except OSError as exc:
            LOGGER.warning("Failed to read cached image", extra={"key": key, "error": str(exc)})
            return None

    def remove_image(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("Failed to remove cached image", extra={"key": key, "error": str(exc)})


__all__ = ["ImageCache", "profile_photo_key"]
