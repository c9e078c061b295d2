"""Onboarding and navigation state machine.

``OnboardingFlow`` owns the :class:`Session` and is the only thing that
mutates it. Public coroutines run on one asyncio event loop; blocking HTTP
calls go to worker threads through ``asyncio.to_thread`` and every mutation
happens back on the loop once the await returns.

Each logout bumps a generation counter. Work started under an older
generation, or for a different ``user_id``, is discarded on completion so a
background profile refresh can never repopulate a signed-out session.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Coroutine, Dict, List, Optional, Set, Tuple

from logic.navigation import (
    EDIT_STEPS,
    ONBOARDING_STEPS,
    AuthMethod,
    InvalidTransitionError,
    OnboardingStep,
    after_personalization,
    back_target,
)
from logic.validation import BasicProfileInput, EmailCredentials, ProviderCredentials, UploadInput
from memory.auth_store import AuthStore
from memory.image_cache import ImageCache, profile_photo_key
from models.auth import AuthMechanism
from models.listings import ListingGroup
from models.pinterest import PinterestBoard
from models.profile import FeedImage, ProfileData
from models.sizing import MensSizes, SizingGender, WomensSizes, validate_size
from sourced_app.logging_config import get_logger, log_event, operation_context
from tools.auth_service import AuthService
from tools.errors import NoMethodSelectedError, PinterestAuthError, ServiceError
from tools.listings_service import ListingsService
from tools.pinterest_auth import PinterestAuthService
from tools.pinterest_boards import PinterestBoardsService
from tools.profile_service import ProfileService, load_profile_image

LOGGER = get_logger(__name__)

_MECHANISMS = {
    AuthMethod.EMAIL: AuthMechanism.STANDARD,
    AuthMethod.GOOGLE: AuthMechanism.GOOGLE,
    AuthMethod.APPLE: AuthMechanism.APPLE,
}


@dataclass
class Session:
    """Everything collected across the onboarding wizard and the feed."""

    step: OnboardingStep = OnboardingStep.WELCOME

    # Auth
    auth_method: AuthMethod = AuthMethod.NONE
    email: str = ""
    password: str = ""
    apple_user_id: str = ""
    google_user_id: str = ""
    user_id: str = ""
    auth_token: str = ""
    is_authenticating: bool = False
    auth_error: Optional[str] = None
    is_restoring: bool = False

    # Profile
    first_name: str = ""
    username: str = ""
    profile_photo: Optional[bytes] = None

    # Personalization choices
    prefers_pinterest: bool = False
    prefers_upload: bool = False
    connected_pinterest: bool = False
    uploaded_image_count: int = 0
    is_editing_preferences: bool = False

    # Pinterest
    pinterest_access_token: str = ""
    pinterest_refresh_token: str = ""
    pinterest_token_expires_in: int = 0
    pinterest_scope: str = ""
    pinterest_boards: List[PinterestBoard] = field(default_factory=list)
    selected_pinterest_boards: Set[str] = field(default_factory=set)
    pinterest_error: Optional[str] = None

    # Style and sizing
    selected_brands: Set[str] = field(default_factory=set)
    sizing_gender: SizingGender = SizingGender.MENS
    mens_sizes: MensSizes = field(default_factory=MensSizes)
    womens_sizes: WomensSizes = field(default_factory=WomensSizes)

    # Feed
    feed_images: List[FeedImage] = field(default_factory=list)
    feed_error: Optional[str] = None
    listings_by_pin: Dict[str, List[ListingGroup]] = field(default_factory=dict)
    listings_error: Optional[str] = None

    is_saving: bool = False
    save_error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def active_sizes(self) -> MensSizes | WomensSizes:
        if self.sizing_gender is SizingGender.MENS:
            return self.mens_sizes
        return self.womens_sizes

    def snapshot(self) -> Dict[str, Any]:
        """JSON-safe view for a view layer; never includes secrets or image bytes."""

        return {
            "step": self.step.value,
            "in_onboarding": self.step in ONBOARDING_STEPS,
            "auth_method": self.auth_method.value,
            "email": self.email,
            "user_id": self.user_id,
            "is_authenticated": self.is_authenticated,
            "is_authenticating": self.is_authenticating,
            "is_restoring": self.is_restoring,
            "auth_error": self.auth_error,
            "first_name": self.first_name,
            "username": self.username,
            "has_profile_photo": self.profile_photo is not None,
            "prefers_pinterest": self.prefers_pinterest,
            "prefers_upload": self.prefers_upload,
            "connected_pinterest": self.connected_pinterest,
            "uploaded_image_count": self.uploaded_image_count,
            "is_editing_preferences": self.is_editing_preferences,
            "pinterest_boards": [board.model_dump() for board in self.pinterest_boards],
            "selected_pinterest_boards": sorted(self.selected_pinterest_boards),
            "pinterest_error": self.pinterest_error,
            "selected_brands": sorted(self.selected_brands),
            "sizing_gender": self.sizing_gender.value,
            "mens_sizes": self.mens_sizes.as_dict(),
            "womens_sizes": self.womens_sizes.as_dict(),
            "feed_images": [image.model_dump(by_alias=True) for image in self.feed_images],
            "feed_error": self.feed_error,
            "listings_error": self.listings_error,
            "is_saving": self.is_saving,
            "save_error": self.save_error,
        }


class OnboardingFlow:
    """Sole authority over ``Session.step`` and the remote calls that drive it."""

    def __init__(
        self,
        auth_store: AuthStore,
        image_cache: ImageCache,
        auth_service: AuthService,
        profile_service: ProfileService,
        pinterest_auth: PinterestAuthService | None = None,
        boards_service: PinterestBoardsService | None = None,
        listings_service: ListingsService | None = None,
        image_timeout_seconds: float | None = None,
    ) -> None:
        self.auth_store = auth_store
        self.image_cache = image_cache
        self.auth_service = auth_service
        self.profile_service = profile_service
        self.pinterest_auth = pinterest_auth
        self.boards_service = boards_service
        self.listings_service = listings_service
        self.image_timeout_seconds = image_timeout_seconds
        self.session = Session()
        self._generation = 0
        self._background: Set[asyncio.Task] = set()

    @property
    def step(self) -> OnboardingStep:
        return self.session.step

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _transition(self, step: OnboardingStep, reason: str) -> None:
        previous = self.session.step
        self.session.step = step
        log_event(
            LOGGER,
            logging.INFO,
            "step_transition",
            from_step=previous.value,
            to_step=step.value,
            reason=reason,
        )

    def _require_step(self, *allowed: OnboardingStep) -> None:
        if self.session.step not in allowed:
            raise InvalidTransitionError(
                f"Not available from {self.session.step.value}; "
                f"expected one of {[step.value for step in allowed]}"
            )

    def _is_current(self, user_id: str, generation: int) -> bool:
        return generation == self._generation and self.session.user_id == user_id

    def _spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log_event(
                LOGGER,
                logging.ERROR,
                "background_task_failed",
                task=task.get_name(),
                exc_info=exc,
            )

    async def drain_background(self) -> None:
        """Wait until every background task spawned so far has finished."""

        while True:
            pending = [task for task in self._background if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Startup restoration
    # ------------------------------------------------------------------
    async def restore(self) -> OnboardingStep:
        """Decide the first screen from persisted auth state and the remote profile."""

        with operation_context("restore"):
            state = self.auth_store.load()
            if not state.user_id:
                self._transition(OnboardingStep.WELCOME, reason="no_saved_user")
                return self.session.step

            session = self.session
            session.user_id = state.user_id
            session.auth_token = state.auth_token or ""
            cached_photo = self.image_cache.load_image(profile_photo_key(state.user_id))
            if cached_photo:
                session.profile_photo = cached_photo

            if state.onboarding_complete:
                self._transition(OnboardingStep.FEED, reason="cached_onboarding_complete")
                self._start_background_refresh()
                return session.step

            session.is_restoring = True
            try:
                await self._fetch_profile_and_route(state.user_id)
            finally:
                session.is_restoring = False
            return self.session.step

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def choose_email_auth(self) -> None:
        self._require_step(OnboardingStep.WELCOME)
        self.session.auth_method = AuthMethod.EMAIL
        self.session.auth_error = None
        self._transition(OnboardingStep.EMAIL_AUTH, reason="email_chosen")

    async def sign_in_with_email(self, email: str, password: str) -> None:
        self._require_step(OnboardingStep.EMAIL_AUTH)
        credentials = EmailCredentials(email=email, password=password)
        session = self.session
        session.auth_method = AuthMethod.EMAIL
        session.email = credentials.email
        session.password = credentials.password
        await self.authenticate()

    async def sign_in_with_provider(
        self, method: AuthMethod, provider_user_id: str, email: str = ""
    ) -> None:
        """Apple or Google sign-in after the platform SDK returned a user id."""

        self._require_step(OnboardingStep.WELCOME)
        credentials = ProviderCredentials(
            method=method, provider_user_id=provider_user_id, email=email
        )
        session = self.session
        session.auth_method = credentials.method
        session.email = credentials.email
        if credentials.method is AuthMethod.APPLE:
            session.apple_user_id = credentials.provider_user_id
        else:
            session.google_user_id = credentials.provider_user_id
        await self.authenticate()

    def _mechanism_and_credential(self) -> Tuple[AuthMechanism, str]:
        session = self.session
        if session.auth_method is AuthMethod.NONE:
            raise NoMethodSelectedError("No authentication method selected")
        credential = {
            AuthMethod.EMAIL: session.password,
            AuthMethod.GOOGLE: session.google_user_id,
            AuthMethod.APPLE: session.apple_user_id,
        }[session.auth_method]
        # Provider ids travel in the password slot of the single auth endpoint.
        return _MECHANISMS[session.auth_method], credential

    async def authenticate(self) -> None:
        """Authenticate with the selected method, then route to feed or onboarding.

        Failures leave ``step`` unchanged and surface as ``auth_error``.
        """

        with operation_context("authenticate"):
            session = self.session
            session.is_authenticating = True
            session.auth_error = None

            try:
                mechanism, credential = self._mechanism_and_credential()
            except NoMethodSelectedError as exc:
                session.auth_error = exc.user_message
                session.is_authenticating = False
                log_event(LOGGER, logging.WARNING, "auth_rejected", reason="no_method")
                return

            generation = self._generation
            try:
                response = await asyncio.to_thread(
                    self.auth_service.authenticate, session.email, credential, mechanism
                )
            except ServiceError as exc:
                if generation == self._generation:
                    session.auth_error = exc.user_message
                    session.is_authenticating = False
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "auth_failed",
                    mechanism=mechanism.value,
                    error_type=type(exc).__name__,
                )
                return

            if generation != self._generation:
                return

            user_id = response.resolved_user_id
            if not response.success or not user_id:
                session.auth_error = response.message or "Authentication failed"
                session.is_authenticating = False
                log_event(LOGGER, logging.WARNING, "auth_failed", reason="missing_user_id")
                return

            session.user_id = user_id
            session.auth_token = response.token or ""
            self.auth_store.save(user_id=user_id, auth_token=response.token)
            log_event(LOGGER, logging.INFO, "auth_succeeded", mechanism=mechanism.value)
            await self._fetch_profile_and_route(user_id)

    async def _fetch_profile_and_route(self, user_id: str) -> None:
        """Route to feed when the remote profile says onboarding is done.

        Any failure routes to the start of onboarding rather than leaving the
        user on a loading state.
        """

        generation = self._generation
        try:
            profile = await asyncio.to_thread(self.profile_service.fetch_profile, user_id)
        except ServiceError as exc:
            if not self._is_current(user_id, generation):
                return
            log_event(
                LOGGER,
                logging.WARNING,
                "profile_fetch_failed",
                error_type=type(exc).__name__,
            )
            self._finish_routing(OnboardingStep.BASIC_PROFILE, reason="profile_fetch_failed")
            return

        if not self._is_current(user_id, generation):
            return
        if profile is None:
            self._finish_routing(OnboardingStep.BASIC_PROFILE, reason="no_profile")
            return

        if not await self._apply_profile(profile, user_id, generation):
            return
        if profile.onboarding_complete:
            self.auth_store.save(onboarding_complete=True)
            self._finish_routing(OnboardingStep.FEED, reason="remote_onboarding_complete")
        else:
            self._finish_routing(OnboardingStep.BASIC_PROFILE, reason="onboarding_incomplete")

    def _finish_routing(self, step: OnboardingStep, reason: str) -> None:
        self.session.is_authenticating = False
        self._transition(step, reason=reason)

    async def _apply_profile(self, profile: ProfileData, user_id: str, generation: int) -> bool:
        """Copy remote profile fields into the session; False when the result is stale."""

        photo: Optional[bytes] = None
        if profile.profile_photo:
            photo = await asyncio.to_thread(
                load_profile_image, profile.profile_photo, self.image_timeout_seconds
            )
        if not self._is_current(user_id, generation):
            log_event(LOGGER, logging.INFO, "stale_profile_discarded")
            return False

        session = self.session
        if profile.first_name:
            session.first_name = profile.first_name
        if profile.username:
            session.username = profile.username
        if photo:
            session.profile_photo = photo
            self.image_cache.save_image(profile_photo_key(user_id), photo)
        if profile.selected_pinterest_boards is not None:
            session.selected_pinterest_boards = set(profile.selected_pinterest_boards)
        if profile.selected_brands is not None:
            session.selected_brands = set(profile.selected_brands)
        if profile.sizing_gender:
            session.sizing_gender = SizingGender.from_api(profile.sizing_gender)
        if profile.mens_sizes is not None:
            mens = profile.mens_sizes
            session.mens_sizes = MensSizes(
                tops=mens.tops or "",
                bottoms=mens.bottoms or "",
                outerwear=mens.outerwear or "",
                footwear=mens.footwear or "",
                tailoring=mens.tailoring or "",
                accessories=mens.accessories or "",
            )
        if profile.womens_sizes is not None:
            womens = profile.womens_sizes
            session.womens_sizes = WomensSizes(
                tops=womens.tops or "",
                bottoms=womens.bottoms or "",
                outerwear=womens.outerwear or "",
                dresses=womens.dresses or "",
            )
        if profile.images is not None:
            session.feed_images = list(profile.images)
        return True

    # ------------------------------------------------------------------
    # Background refresh
    # ------------------------------------------------------------------
    def _start_background_refresh(self) -> None:
        self._spawn(
            self._background_refresh(self.session.user_id, self._generation),
            name="profile-refresh",
        )

    async def _background_refresh(self, user_id: str, generation: int) -> None:
        try:
            profile = await asyncio.to_thread(self.profile_service.fetch_profile, user_id)
        except ServiceError as exc:
            log_event(
                LOGGER,
                logging.INFO,
                "background_refresh_failed",
                error_type=type(exc).__name__,
            )
            return
        if profile is None:
            return
        if not self._is_current(user_id, generation):
            log_event(LOGGER, logging.INFO, "stale_profile_discarded")
            return
        await self._apply_profile(profile, user_id, generation)

    async def refresh_feed(self) -> bool:
        """Foreground refresh of profile data and feed images."""

        with operation_context("refresh_feed"):
            session = self.session
            session.feed_error = None
            user_id = session.user_id
            generation = self._generation
            try:
                profile = await asyncio.to_thread(self.profile_service.fetch_profile, user_id)
            except ServiceError as exc:
                if self._is_current(user_id, generation):
                    session.feed_error = exc.user_message
                return False
            if profile is None:
                return False
            return await self._apply_profile(profile, user_id, generation)

    # ------------------------------------------------------------------
    # Profile and personalization choice
    # ------------------------------------------------------------------
    def submit_basic_profile(
        self, first_name: str, username: str = "", photo: Optional[bytes] = None
    ) -> None:
        self._require_step(OnboardingStep.BASIC_PROFILE)
        data = BasicProfileInput(first_name=first_name, username=username)
        session = self.session
        session.first_name = data.first_name
        session.username = data.username or ""
        if photo is not None:
            session.profile_photo = photo
        self._transition(OnboardingStep.PERSONALIZATION_CHOICE, reason="basic_profile_submitted")

    def choose_pinterest(self) -> None:
        self._require_step(OnboardingStep.PERSONALIZATION_CHOICE)
        self.session.prefers_pinterest = True
        self.session.prefers_upload = False
        self._transition(OnboardingStep.PINTEREST_OAUTH, reason="pinterest_chosen")

    def choose_upload(self) -> None:
        self._require_step(OnboardingStep.PERSONALIZATION_CHOICE)
        self.session.prefers_upload = True
        self.session.prefers_pinterest = False
        self._transition(OnboardingStep.UPLOAD_OUTFITS, reason="upload_chosen")

    def skip_personalization(self) -> None:
        self._require_step(OnboardingStep.PERSONALIZATION_CHOICE)
        self._leave_personalization(reason="personalization_skipped")

    def _leave_personalization(self, reason: str) -> None:
        target = after_personalization(self.session)
        if target is OnboardingStep.EDIT_PROFILE:
            self.session.is_editing_preferences = False
        self._transition(target, reason=reason)

    # ------------------------------------------------------------------
    # Pinterest
    # ------------------------------------------------------------------
    def pinterest_authorization_url(self) -> str:
        if self.pinterest_auth is None:
            raise RuntimeError("Pinterest authorization is not configured")
        url, _state = self.pinterest_auth.authorization_url()
        return url

    def skip_pinterest(self) -> None:
        self._require_step(OnboardingStep.PINTEREST_OAUTH)
        self._leave_personalization(reason="pinterest_skipped")

    async def handle_pinterest_callback(self, callback_url: str) -> bool:
        """Take tokens from the OAuth callback, load boards, move to board selection."""

        self._require_step(OnboardingStep.PINTEREST_OAUTH)
        if self.pinterest_auth is None:
            raise RuntimeError("Pinterest authorization is not configured")
        session = self.session
        session.pinterest_error = None
        user_id = session.user_id
        generation = self._generation
        try:
            auth_data = await asyncio.to_thread(self.pinterest_auth.complete_callback, callback_url)
        except PinterestAuthError as exc:
            if self._is_current(user_id, generation):
                session.pinterest_error = exc.user_message
            log_event(LOGGER, logging.WARNING, "pinterest_auth_failed", reason=exc.reason)
            return False
        if not self._is_current(user_id, generation):
            return False

        session.pinterest_access_token = auth_data.access_token
        session.pinterest_refresh_token = auth_data.refresh_token or ""
        session.pinterest_token_expires_in = auth_data.expires_in or 0
        session.pinterest_scope = auth_data.scope or ""
        session.connected_pinterest = True

        if not await self.load_pinterest_boards():
            return False
        self._transition(OnboardingStep.SELECT_PINTEREST_BOARD, reason="pinterest_connected")
        return True

    async def load_pinterest_boards(self) -> bool:
        """(Re)load the board catalog. Existing selections are kept as they are."""

        if self.boards_service is None:
            raise RuntimeError("Pinterest boards endpoint is not configured")
        session = self.session
        session.pinterest_error = None
        user_id = session.user_id
        generation = self._generation
        try:
            boards = await asyncio.to_thread(
                self.boards_service.fetch_boards,
                user_id,
                session.pinterest_access_token,
                session.pinterest_refresh_token or None,
                session.pinterest_token_expires_in or None,
            )
        except ServiceError as exc:
            if self._is_current(user_id, generation):
                session.pinterest_error = exc.user_message
            return False
        if not self._is_current(user_id, generation):
            return False
        session.pinterest_boards = list(boards)
        return True

    def select_board(self, board_id: str) -> None:
        self.session.selected_pinterest_boards.add(board_id)

    def deselect_board(self, board_id: str) -> None:
        self.session.selected_pinterest_boards.discard(board_id)

    def toggle_board(self, board_id: str) -> bool:
        """Flip membership of ``board_id``; returns whether it is now selected."""

        if board_id in self.session.selected_pinterest_boards:
            self.deselect_board(board_id)
            return False
        self.select_board(board_id)
        return True

    def confirm_board_selection(self) -> None:
        self._require_step(OnboardingStep.SELECT_PINTEREST_BOARD)
        self._leave_personalization(reason="boards_selected")

    # ------------------------------------------------------------------
    # Outfit upload
    # ------------------------------------------------------------------
    def record_uploads(self, count: int) -> None:
        self._require_step(OnboardingStep.UPLOAD_OUTFITS)
        self.session.uploaded_image_count = UploadInput(count=count).count
        self._leave_personalization(reason="outfits_uploaded")

    def skip_upload(self) -> None:
        self._require_step(OnboardingStep.UPLOAD_OUTFITS)
        self._leave_personalization(reason="upload_skipped")

    # ------------------------------------------------------------------
    # Style and sizing
    # ------------------------------------------------------------------
    def toggle_brand(self, brand: str) -> bool:
        brands = self.session.selected_brands
        if brand in brands:
            brands.discard(brand)
            return False
        brands.add(brand)
        return True

    def continue_from_style(self) -> None:
        self._require_step(OnboardingStep.STYLE_PROFILE)
        self._transition(OnboardingStep.SIZING_PROFILE, reason="style_submitted")

    def set_sizing_gender(self, gender: SizingGender) -> None:
        self.session.sizing_gender = SizingGender(gender)

    def set_size(self, category: str, value: str) -> None:
        """Set one size on the active grid; an empty value clears it."""

        session = self.session
        key = validate_size(session.sizing_gender, category, value)
        setattr(session.active_sizes, key, value)

    def continue_from_sizing(self) -> None:
        self._require_step(OnboardingStep.SIZING_PROFILE)
        self._transition(OnboardingStep.VIBE_LOADING, reason="sizing_submitted")

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------
    async def _save_profile(self, onboarding_complete: Optional[bool] = None) -> bool:
        session = self.session
        session.save_error = None
        if not session.user_id:
            session.save_error = "Sign in to save your profile"
            return False

        user_id = session.user_id
        generation = self._generation
        photo = session.profile_photo
        session.is_saving = True
        try:
            await asyncio.to_thread(
                self.profile_service.save_profile,
                user_id=user_id,
                first_name=session.first_name,
                username=session.username,
                photo=photo,
                board_ids=set(session.selected_pinterest_boards),
                brand_names=set(session.selected_brands),
                sizing_gender=session.sizing_gender,
                mens_sizes=dataclasses.replace(session.mens_sizes),
                womens_sizes=dataclasses.replace(session.womens_sizes),
                onboarding_complete=onboarding_complete,
            )
        except ServiceError as exc:
            if self._is_current(user_id, generation):
                session.save_error = exc.user_message
                session.is_saving = False
            log_event(LOGGER, logging.WARNING, "profile_save_failed", error_type=type(exc).__name__)
            return False

        if not self._is_current(user_id, generation):
            return False
        session.is_saving = False
        if photo:
            self.image_cache.save_image(profile_photo_key(user_id), photo)
        return True

    async def complete_onboarding(self) -> bool:
        """Persist the finished profile and land on the feed.

        On a failed save the session stays on the loading step with
        ``save_error`` set so the caller can retry.
        """

        self._require_step(OnboardingStep.VIBE_LOADING)
        if self.session.is_saving:
            return False
        with operation_context("complete_onboarding"):
            if not await self._save_profile(onboarding_complete=True):
                return False
            user_id = self.session.user_id
            self.auth_store.save(onboarding_complete=True)
            if self.listings_service is not None:
                self._spawn(
                    asyncio.to_thread(self.listings_service.trigger_listings_finder, user_id),
                    name="listings-finder",
                )
            self._transition(OnboardingStep.FEED, reason="onboarding_complete")
            self._start_background_refresh()
            return True

    # ------------------------------------------------------------------
    # Editing from the feed
    # ------------------------------------------------------------------
    def open_edit_profile(self) -> None:
        self._require_step(OnboardingStep.FEED)
        self._transition(OnboardingStep.EDIT_PROFILE, reason="edit_profile_opened")

    def open_edit_brands(self) -> None:
        self._require_step(OnboardingStep.EDIT_PROFILE)
        self._transition(OnboardingStep.EDIT_BRANDS, reason="edit_brands_opened")

    def open_edit_sizing(self) -> None:
        self._require_step(OnboardingStep.EDIT_PROFILE)
        self._transition(OnboardingStep.EDIT_SIZING, reason="edit_sizing_opened")

    def edit_preferences(self) -> None:
        """Re-enter the personalization choice; its exits lead back to editing."""

        self._require_step(OnboardingStep.EDIT_PROFILE)
        self.session.is_editing_preferences = True
        self._transition(OnboardingStep.PERSONALIZATION_CHOICE, reason="edit_preferences")

    def close_edit_profile(self) -> None:
        self._require_step(OnboardingStep.EDIT_PROFILE)
        self._transition(OnboardingStep.FEED, reason="edit_profile_closed")

    async def save_profile_edits(self) -> bool:
        self._require_step(*EDIT_STEPS)
        if self.session.is_saving:
            return False
        with operation_context("save_profile_edits"):
            if not await self._save_profile():
                return False
            if self.session.step is OnboardingStep.EDIT_PROFILE:
                self._transition(OnboardingStep.FEED, reason="profile_edits_saved")
            else:
                self._transition(OnboardingStep.EDIT_PROFILE, reason="profile_edits_saved")
            return True

    # ------------------------------------------------------------------
    # Feed listings
    # ------------------------------------------------------------------
    async def load_listings(self, pin_id: str) -> List[ListingGroup]:
        if self.listings_service is None:
            raise RuntimeError("Listings endpoint is not configured")
        session = self.session
        session.listings_error = None
        user_id = session.user_id
        generation = self._generation
        try:
            groups = await asyncio.to_thread(self.listings_service.fetch_listings, user_id, pin_id)
        except ServiceError as exc:
            if self._is_current(user_id, generation):
                session.listings_error = exc.user_message
            return []
        if self._is_current(user_id, generation):
            session.listings_by_pin[pin_id] = list(groups)
        return list(groups)

    # ------------------------------------------------------------------
    # Navigation and logout
    # ------------------------------------------------------------------
    def go_back(self) -> OnboardingStep:
        session = self.session
        target = back_target(session)
        if target is not session.step:
            if target is OnboardingStep.EDIT_PROFILE and session.is_editing_preferences:
                session.is_editing_preferences = False
            self._transition(target, reason="back")
        return session.step

    def logout(self) -> None:
        """Forget the signed-in user locally. Safe to call any number of times."""

        user_id = self.session.user_id
        self._generation += 1
        for task in list(self._background):
            task.cancel()
        if user_id:
            self.image_cache.remove_image(profile_photo_key(user_id))
        self.auth_store.clear()
        self.session = Session()
        log_event(LOGGER, logging.INFO, "logged_out")


__all__ = ["OnboardingFlow", "Session"]
