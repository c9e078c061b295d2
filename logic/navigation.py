"""Onboarding steps and the back-navigation rules between them."""

from __future__ import annotations

from enum import Enum
from typing import Protocol


class OnboardingStep(str, Enum):
    WELCOME = "welcome"
    EMAIL_AUTH = "email_auth"
    BASIC_PROFILE = "basic_profile"
    PERSONALIZATION_CHOICE = "personalization_choice"
    PINTEREST_OAUTH = "pinterest_oauth"
    SELECT_PINTEREST_BOARD = "select_pinterest_board"
    UPLOAD_OUTFITS = "upload_outfits"
    STYLE_PROFILE = "style_profile"
    SIZING_PROFILE = "sizing_profile"
    VIBE_LOADING = "vibe_loading"
    FEED = "feed"
    EDIT_PROFILE = "edit_profile"
    EDIT_BRANDS = "edit_brands"
    EDIT_SIZING = "edit_sizing"


class InvalidTransitionError(ValueError):
    """Raised when an intent does not apply to the current step."""


class AuthMethod(str, Enum):
    NONE = "none"
    APPLE = "apple"
    GOOGLE = "google"
    EMAIL = "email"


ONBOARDING_STEPS = (
    OnboardingStep.BASIC_PROFILE,
    OnboardingStep.PERSONALIZATION_CHOICE,
    OnboardingStep.PINTEREST_OAUTH,
    OnboardingStep.SELECT_PINTEREST_BOARD,
    OnboardingStep.UPLOAD_OUTFITS,
    OnboardingStep.STYLE_PROFILE,
    OnboardingStep.SIZING_PROFILE,
    OnboardingStep.VIBE_LOADING,
)

EDIT_STEPS = (OnboardingStep.EDIT_PROFILE, OnboardingStep.EDIT_BRANDS, OnboardingStep.EDIT_SIZING)

_FIXED_BACK_TARGETS = {
    OnboardingStep.EMAIL_AUTH: OnboardingStep.WELCOME,
    OnboardingStep.PINTEREST_OAUTH: OnboardingStep.PERSONALIZATION_CHOICE,
    OnboardingStep.UPLOAD_OUTFITS: OnboardingStep.PERSONALIZATION_CHOICE,
    OnboardingStep.SELECT_PINTEREST_BOARD: OnboardingStep.PINTEREST_OAUTH,
    OnboardingStep.SIZING_PROFILE: OnboardingStep.STYLE_PROFILE,
    OnboardingStep.EDIT_PROFILE: OnboardingStep.FEED,
    OnboardingStep.EDIT_BRANDS: OnboardingStep.EDIT_PROFILE,
    OnboardingStep.EDIT_SIZING: OnboardingStep.EDIT_PROFILE,
}


class NavigationState(Protocol):
    step: OnboardingStep
    auth_method: AuthMethod
    prefers_pinterest: bool
    prefers_upload: bool
    connected_pinterest: bool
    is_editing_preferences: bool


def back_target(state: NavigationState) -> OnboardingStep:
    """Where the back action leads from the current step.

    Steps without a back action (welcome, vibe loading, feed) map to
    themselves.
    """

    step = state.step
    if step in _FIXED_BACK_TARGETS:
        return _FIXED_BACK_TARGETS[step]
    if step is OnboardingStep.BASIC_PROFILE:
        if state.auth_method is AuthMethod.EMAIL:
            return OnboardingStep.EMAIL_AUTH
        return OnboardingStep.WELCOME
    if step is OnboardingStep.PERSONALIZATION_CHOICE:
        if state.is_editing_preferences:
            return OnboardingStep.EDIT_PROFILE
        return OnboardingStep.BASIC_PROFILE
    if step is OnboardingStep.STYLE_PROFILE:
        if state.prefers_upload:
            return OnboardingStep.UPLOAD_OUTFITS
        if state.prefers_pinterest and state.connected_pinterest:
            return OnboardingStep.SELECT_PINTEREST_BOARD
        if state.prefers_pinterest:
            return OnboardingStep.PINTEREST_OAUTH
        return OnboardingStep.PERSONALIZATION_CHOICE
    return step


def after_personalization(state: NavigationState) -> OnboardingStep:
    """Step following Pinterest, upload or skip: style profile, or back to editing."""

    if state.is_editing_preferences:
        return OnboardingStep.EDIT_PROFILE
    return OnboardingStep.STYLE_PROFILE


__all__ = [
    "AuthMethod",
    "EDIT_STEPS",
    "InvalidTransitionError",
    "ONBOARDING_STEPS",
    "OnboardingStep",
    "after_personalization",
    "back_target",
]
