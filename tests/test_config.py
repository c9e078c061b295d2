"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from sourced_app.config import DEFAULT_CALLBACK_SCHEME, DEFAULT_PROFILE_URL, SourcedConfig

_ENV_KEYS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "SOURCED_CONFIG_DIR",
    "AUTH_ENDPOINT",
    "PROFILE_URL",
    "PINTEREST_APP_SECRET",
    "REQUEST_TIMEOUT",
    "AUTH_STORE_BACKEND",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = SourcedConfig.from_env()

    assert config.auth_endpoint == ""
    assert config.profile_url == DEFAULT_PROFILE_URL
    assert config.pinterest_callback_scheme == DEFAULT_CALLBACK_SCHEME
    assert config.auth_store_backend == "json"
    assert config.request_timeout is None
    assert config.environment is None


def test_yaml_file_merged_with_env_overrides(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env_dir = tmp_path / "environments"
    env_dir.mkdir()
    (env_dir / "staging.yaml").write_text(
        "# staging endpoints\n"
        'auth_endpoint: "https://staging.example.com/auth"\n'
        "profile_url: https://staging.example.com/profile\n"
        "auth_store_backend: sqlite\n"
        "request_timeout: 12.5\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("SOURCED_CONFIG_DIR", str(env_dir))
    monkeypatch.setenv("PROFILE_URL", "https://override.example.com/profile")
    monkeypatch.setenv("PINTEREST_APP_SECRET", "shh")

    config = SourcedConfig.from_env()

    assert config.environment == "staging"
    assert config.auth_endpoint == "https://staging.example.com/auth"
    assert config.profile_url == "https://override.example.com/profile"
    assert config.auth_store_backend == "sqlite"
    assert config.request_timeout == 12.5
    assert config.pinterest_app_secret == "shh"


def test_explicit_config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "custom.yaml"
    path.write_text("auth_endpoint: 'https://custom.example.com/auth'\n")
    monkeypatch.setenv("APP_CONFIG_PATH", str(path))

    assert SourcedConfig.from_env().auth_endpoint == "https://custom.example.com/auth"
