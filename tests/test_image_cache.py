"""Unit tests for the local image cache."""

from pathlib import Path

from memory.image_cache import ImageCache, profile_photo_key


def test_profile_photo_key_format() -> None:
    assert profile_photo_key("abc") == "profile_abc"


def test_save_load_remove(tmp_path: Path) -> None:
    cache = ImageCache(tmp_path / "images")
    key = profile_photo_key("user-1")

    assert cache.load_image(key) is None
    cache.save_image(key, b"\xff\xd8jpeg")
    assert (tmp_path / "images" / "profile_user-1.jpg").exists()
    assert cache.load_image(key) == b"\xff\xd8jpeg"

    cache.remove_image(key)
    cache.remove_image(key)
    assert cache.load_image(key) is None


def test_keys_cannot_escape_cache_directory(tmp_path: Path) -> None:
    cache = ImageCache(tmp_path / "images")
    cache.save_image("../outside", b"data")

    assert not (tmp_path / "outside.jpg").exists()
    assert cache.load_image("../outside") == b"data"


def test_write_failures_are_swallowed(tmp_path: Path) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file")
    cache = ImageCache(blocker / "images")

    cache.save_image("k", b"data")
    assert cache.load_image("k") is None
