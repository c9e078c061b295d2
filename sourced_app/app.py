"""Sourced client bootstrap."""

from __future__ import annotations

import logging

from logic.onboarding_flow import OnboardingFlow
from logic.navigation import OnboardingStep
from memory.auth_store import AuthStore, build_auth_store
from memory.image_cache import ImageCache
from sourced_app.config import SourcedConfig
from sourced_app.logging_config import configure_logging, get_logger, log_event, operation_context
from tools.auth_service import AuthService
from tools.listings_service import ListingsService
from tools.pinterest_auth import PinterestAuthService
from tools.pinterest_boards import PinterestBoardsService
from tools.profile_service import ProfileService

LOGGER = get_logger(__name__)


class SourcedApp:
    """Wires configuration, local stores and remote services into one flow."""

    def __init__(self, config: SourcedConfig | None = None, auth_store: AuthStore | None = None) -> None:
        self.config = config or SourcedConfig.from_env()
        configure_logging()

        timeout = self.config.request_timeout
        self.auth_store = auth_store or build_auth_store(
            self.config.auth_store_backend, self.config.auth_store_path
        )
        self.image_cache = ImageCache(self.config.image_cache_dir or "data/image_cache")
        self.auth_service = AuthService(self.config.auth_endpoint, timeout_seconds=timeout)
        self.profile_service = ProfileService(self.config.profile_url, timeout_seconds=timeout)
        self.pinterest_auth = PinterestAuthService(
            app_id=self.config.pinterest_app_id,
            redirect_uri=self.config.pinterest_redirect_uri,
            scopes=self.config.pinterest_scopes,
            callback_scheme=self.config.pinterest_callback_scheme,
            app_secret=self.config.pinterest_app_secret,
            timeout_seconds=timeout,
        )
        self.boards_service = PinterestBoardsService(
            self.config.pinterest_boards_url, timeout_seconds=timeout
        )
        self.listings_service = ListingsService(
            self.config.listings_url,
            self.config.listings_finder_url,
            timeout_seconds=timeout,
        )
        self.flow = OnboardingFlow(
            auth_store=self.auth_store,
            image_cache=self.image_cache,
            auth_service=self.auth_service,
            profile_service=self.profile_service,
            pinterest_auth=self.pinterest_auth,
            boards_service=self.boards_service,
            listings_service=self.listings_service,
            image_timeout_seconds=timeout,
        )

    async def start(self) -> OnboardingStep:
        """Restore the persisted session and return the first screen to show."""

        with operation_context("app:start"):
            step = await self.flow.restore()
            log_event(
                LOGGER,
                logging.INFO,
                "app_started",
                environment=self.config.environment or "local",
                step=step.value,
            )
            return step


__all__ = ["SourcedApp"]
