"""Configuration helpers for the Sourced onboarding client."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_PROFILE_URL = "https://k2nebib668.execute-api.us-east-1.amazonaws.com/prod/profile"
DEFAULT_PINTEREST_BOARDS_URL = (
    "https://k2nebib668.execute-api.us-east-1.amazonaws.com/prod/pinterest-boards"
)
DEFAULT_LISTINGS_FINDER_URL = (
    "https://p2g0jidnp9.execute-api.us-east-1.amazonaws.com/prod/listings-finder"
)
DEFAULT_PINTEREST_SCOPES = "boards:read,pins:read,user_accounts:read"
DEFAULT_CALLBACK_SCHEME = "com.ryankemmer.sourced"


@dataclass
class SourcedConfig:
    """Configuration values for the Sourced client.

    Endpoints left empty surface as ``InvalidURLError`` when the matching
    service is first used, so a partially configured client can still restore
    a session and walk the offline parts of onboarding.
    """

    auth_endpoint: str = ""
    profile_url: str = DEFAULT_PROFILE_URL
    pinterest_boards_url: str = DEFAULT_PINTEREST_BOARDS_URL
    listings_url: str = ""
    listings_finder_url: str = DEFAULT_LISTINGS_FINDER_URL
    pinterest_app_id: str = ""
    pinterest_app_secret: Optional[str] = None
    pinterest_redirect_uri: str = ""
    pinterest_scopes: str = DEFAULT_PINTEREST_SCOPES
    pinterest_callback_scheme: str = DEFAULT_CALLBACK_SCHEME
    auth_store_backend: str = "json"
    auth_store_path: Optional[str] = None
    image_cache_dir: Optional[str] = None
    request_timeout: Optional[float] = None
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "SourcedConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets such
        as the Pinterest app secret never have to be committed.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("SOURCED_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        raw_timeout = get_value("request_timeout")

        return cls(
            auth_endpoint=str(get_value("auth_endpoint", "") or ""),
            profile_url=str(get_value("profile_url", DEFAULT_PROFILE_URL) or ""),
            pinterest_boards_url=str(
                get_value("pinterest_boards_url", DEFAULT_PINTEREST_BOARDS_URL) or ""
            ),
            listings_url=str(get_value("listings_url", "") or ""),
            listings_finder_url=str(
                get_value("listings_finder_url", DEFAULT_LISTINGS_FINDER_URL) or ""
            ),
            pinterest_app_id=str(get_value("pinterest_app_id", "") or ""),
            pinterest_app_secret=get_value("pinterest_app_secret"),
            pinterest_redirect_uri=str(get_value("pinterest_redirect_uri", "") or ""),
            pinterest_scopes=str(
                get_value("pinterest_scopes", DEFAULT_PINTEREST_SCOPES) or DEFAULT_PINTEREST_SCOPES
            ),
            pinterest_callback_scheme=str(
                get_value("pinterest_callback_scheme", DEFAULT_CALLBACK_SCHEME)
                or DEFAULT_CALLBACK_SCHEME
            ),
            auth_store_backend=str(get_value("auth_store_backend", "json") or "json"),
            auth_store_path=get_value("auth_store_path"),
            image_cache_dir=get_value("image_cache_dir"),
            request_timeout=float(raw_timeout) if raw_timeout else None,
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config of flat ``key: value`` lines."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config
