"""FastAPI server through which a view layer drives the onboarding flow."""

from __future__ import annotations

import base64
import binascii
import contextlib
from typing import Iterator, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from logic.navigation import AuthMethod, InvalidTransitionError
from models.sizing import (
    AESTHETIC_OPTIONS,
    BRAND_OPTIONS,
    FABRIC_OPTIONS,
    SizingGender,
    size_options,
)
from sourced_app.app import SourcedApp


class EmailSignInRequest(BaseModel):
    email: str
    password: str


class ProviderSignInRequest(BaseModel):
    """Result of a platform Apple/Google sign-in handed over by the view layer."""

    method: AuthMethod
    provider_user_id: str
    email: str = ""


class BasicProfileRequest(BaseModel):
    first_name: str
    username: str = ""
    photo_base64: Optional[str] = Field(None, description="JPEG bytes, base64 encoded")


class PinterestCallbackRequest(BaseModel):
    callback_url: str


class UploadRequest(BaseModel):
    count: int


class BrandToggleRequest(BaseModel):
    brand: str


class SizingGenderRequest(BaseModel):
    gender: SizingGender


class SizeRequest(BaseModel):
    category: str
    value: str = ""


@contextlib.contextmanager
def _intent_errors() -> Iterator[None]:
    """Translate rejected intents into HTTP 422 responses."""

    try:
        yield
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError subclass.
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


def _decode_photo(photo_base64: Optional[str]) -> Optional[bytes]:
    if not photo_base64:
        return None
    try:
        return base64.b64decode(photo_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=422, detail="photo_base64 is not valid base64") from exc


def create_app(sourced_app: SourcedApp | None = None) -> FastAPI:
    """Build the ASGI app around one ``SourcedApp`` and its single session."""

    client = sourced_app or SourcedApp()
    flow = client.flow
    api = FastAPI(title="Sourced", version="0.1.0")

    def snapshot() -> dict:
        return flow.session.snapshot()

    @api.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "sourced",
            "environment": client.config.environment or "local",
            "step": flow.step.value,
        }

    @api.get("/catalog")
    async def catalog() -> dict:
        """Option lists the style and sizing screens render."""

        return {
            "brands": BRAND_OPTIONS,
            "fabrics": FABRIC_OPTIONS,
            "aesthetics": AESTHETIC_OPTIONS,
            "sizes": {gender.value: size_options(gender) for gender in SizingGender},
        }

    @api.get("/session")
    async def get_session() -> dict:
        return snapshot()

    @api.post("/session/restore")
    async def restore_session() -> dict:
        await flow.restore()
        return snapshot()

    @api.post("/auth/email-screen")
    async def open_email_auth() -> dict:
        with _intent_errors():
            flow.choose_email_auth()
        return snapshot()

    @api.post("/auth/email")
    async def sign_in_with_email(request: EmailSignInRequest) -> dict:
        """Authenticate with email and password; failures show up as ``auth_error``."""

        with _intent_errors():
            await flow.sign_in_with_email(request.email, request.password)
        return snapshot()

    @api.post("/auth/provider")
    async def sign_in_with_provider(request: ProviderSignInRequest) -> dict:
        with _intent_errors():
            await flow.sign_in_with_provider(
                request.method, request.provider_user_id, email=request.email
            )
        return snapshot()

    @api.post("/profile/basic")
    async def submit_basic_profile(request: BasicProfileRequest) -> dict:
        photo = _decode_photo(request.photo_base64)
        with _intent_errors():
            flow.submit_basic_profile(request.first_name, request.username, photo=photo)
        return snapshot()

    @api.post("/personalization/{choice}")
    async def choose_personalization(choice: str) -> dict:
        """``choice`` is one of ``pinterest``, ``upload`` or ``skip``."""

        actions = {
            "pinterest": flow.choose_pinterest,
            "upload": flow.choose_upload,
            "skip": flow.skip_personalization,
        }
        if choice not in actions:
            raise HTTPException(status_code=422, detail=f"Unknown personalization choice: {choice}")
        with _intent_errors():
            actions[choice]()
        return snapshot()

    @api.get("/pinterest/authorize")
    async def pinterest_authorize() -> dict:
        with _intent_errors():
            url = flow.pinterest_authorization_url()
        return {"authorization_url": url}

    @api.post("/pinterest/callback")
    async def pinterest_callback(request: PinterestCallbackRequest) -> dict:
        with _intent_errors():
            await flow.handle_pinterest_callback(request.callback_url)
        return snapshot()

    @api.post("/pinterest/skip")
    async def skip_pinterest() -> dict:
        with _intent_errors():
            flow.skip_pinterest()
        return snapshot()

    @api.post("/pinterest/boards/reload")
    async def reload_pinterest_boards() -> dict:
        with _intent_errors():
            await flow.load_pinterest_boards()
        return snapshot()

    @api.post("/pinterest/boards/{board_id}/toggle")
    async def toggle_board(board_id: str) -> dict:
        flow.toggle_board(board_id)
        return snapshot()

    @api.post("/pinterest/boards/confirm")
    async def confirm_boards() -> dict:
        with _intent_errors():
            flow.confirm_board_selection()
        return snapshot()

    @api.post("/uploads")
    async def record_uploads(request: UploadRequest) -> dict:
        with _intent_errors():
            flow.record_uploads(request.count)
        return snapshot()

    @api.post("/uploads/skip")
    async def skip_upload() -> dict:
        with _intent_errors():
            flow.skip_upload()
        return snapshot()

    @api.post("/style/brands/toggle")
    async def toggle_brand(request: BrandToggleRequest) -> dict:
        flow.toggle_brand(request.brand)
        return snapshot()

    @api.post("/style/continue")
    async def continue_from_style() -> dict:
        with _intent_errors():
            flow.continue_from_style()
        return snapshot()

    @api.post("/sizing/gender")
    async def set_sizing_gender(request: SizingGenderRequest) -> dict:
        flow.set_sizing_gender(request.gender)
        return snapshot()

    @api.post("/sizing/size")
    async def set_size(request: SizeRequest) -> dict:
        with _intent_errors():
            flow.set_size(request.category, request.value)
        return snapshot()

    @api.post("/sizing/continue")
    async def continue_from_sizing() -> dict:
        with _intent_errors():
            flow.continue_from_sizing()
        return snapshot()

    @api.post("/onboarding/complete")
    async def complete_onboarding() -> dict:
        """Save the profile; on failure the snapshot carries ``save_error``."""

        with _intent_errors():
            await flow.complete_onboarding()
        return snapshot()

    @api.post("/navigation/back")
    async def go_back() -> dict:
        flow.go_back()
        return snapshot()

    @api.post("/profile/edit/{section}")
    async def edit_profile(section: str) -> dict:
        """Open or close an edit screen: ``open``, ``brands``, ``sizing``, ``preferences`` or ``close``."""

        actions = {
            "open": flow.open_edit_profile,
            "brands": flow.open_edit_brands,
            "sizing": flow.open_edit_sizing,
            "preferences": flow.edit_preferences,
            "close": flow.close_edit_profile,
        }
        if section not in actions:
            raise HTTPException(status_code=422, detail=f"Unknown edit section: {section}")
        with _intent_errors():
            actions[section]()
        return snapshot()

    @api.post("/profile/edits/save")
    async def save_profile_edits() -> dict:
        with _intent_errors():
            await flow.save_profile_edits()
        return snapshot()

    @api.post("/feed/refresh")
    async def refresh_feed() -> dict:
        await flow.refresh_feed()
        return snapshot()

    @api.get("/feed/{pin_id}/listings")
    async def listings_for_pin(pin_id: str) -> dict:
        with _intent_errors():
            groups = await flow.load_listings(pin_id)
        payload: List[dict] = [group.model_dump() for group in groups]
        return {"pin_id": pin_id, "items": payload, "error": flow.session.listings_error}

    @api.post("/logout")
    async def logout() -> dict:
        flow.logout()
        return snapshot()

    api.state.sourced_app = client
    return api


app = create_app()


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int("8080"), reload=False)
