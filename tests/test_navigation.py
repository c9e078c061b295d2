"""Back-navigation rules for every step."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from logic.navigation import AuthMethod, OnboardingStep, after_personalization, back_target


@dataclass
class _State:
    step: OnboardingStep
    auth_method: AuthMethod = AuthMethod.NONE
    prefers_pinterest: bool = False
    prefers_upload: bool = False
    connected_pinterest: bool = False
    is_editing_preferences: bool = False


@pytest.mark.parametrize(
    "step, expected",
    [
        (OnboardingStep.WELCOME, OnboardingStep.WELCOME),
        (OnboardingStep.EMAIL_AUTH, OnboardingStep.WELCOME),
        (OnboardingStep.PINTEREST_OAUTH, OnboardingStep.PERSONALIZATION_CHOICE),
        (OnboardingStep.UPLOAD_OUTFITS, OnboardingStep.PERSONALIZATION_CHOICE),
        (OnboardingStep.SELECT_PINTEREST_BOARD, OnboardingStep.PINTEREST_OAUTH),
        (OnboardingStep.SIZING_PROFILE, OnboardingStep.STYLE_PROFILE),
        (OnboardingStep.VIBE_LOADING, OnboardingStep.VIBE_LOADING),
        (OnboardingStep.FEED, OnboardingStep.FEED),
        (OnboardingStep.EDIT_PROFILE, OnboardingStep.FEED),
        (OnboardingStep.EDIT_BRANDS, OnboardingStep.EDIT_PROFILE),
        (OnboardingStep.EDIT_SIZING, OnboardingStep.EDIT_PROFILE),
    ],
)
def test_fixed_back_targets(step: OnboardingStep, expected: OnboardingStep) -> None:
    assert back_target(_State(step=step)) is expected


def test_basic_profile_back_depends_on_auth_method() -> None:
    email = _State(step=OnboardingStep.BASIC_PROFILE, auth_method=AuthMethod.EMAIL)
    apple = _State(step=OnboardingStep.BASIC_PROFILE, auth_method=AuthMethod.APPLE)

    assert back_target(email) is OnboardingStep.EMAIL_AUTH
    assert back_target(apple) is OnboardingStep.WELCOME


def test_personalization_back_depends_on_editing() -> None:
    onboarding = _State(step=OnboardingStep.PERSONALIZATION_CHOICE)
    editing = _State(step=OnboardingStep.PERSONALIZATION_CHOICE, is_editing_preferences=True)

    assert back_target(onboarding) is OnboardingStep.BASIC_PROFILE
    assert back_target(editing) is OnboardingStep.EDIT_PROFILE


@pytest.mark.parametrize(
    "prefers_upload, prefers_pinterest, connected, expected",
    [
        (True, False, False, OnboardingStep.UPLOAD_OUTFITS),
        (False, True, True, OnboardingStep.SELECT_PINTEREST_BOARD),
        (False, True, False, OnboardingStep.PINTEREST_OAUTH),
        (False, False, False, OnboardingStep.PERSONALIZATION_CHOICE),
    ],
)
def test_style_profile_back_follows_chosen_path(
    prefers_upload: bool, prefers_pinterest: bool, connected: bool, expected: OnboardingStep
) -> None:
    state = _State(
        step=OnboardingStep.STYLE_PROFILE,
        prefers_upload=prefers_upload,
        prefers_pinterest=prefers_pinterest,
        connected_pinterest=connected,
    )
    assert back_target(state) is expected


def test_after_personalization() -> None:
    assert after_personalization(_State(step=OnboardingStep.PINTEREST_OAUTH)) is (
        OnboardingStep.STYLE_PROFILE
    )
    assert after_personalization(
        _State(step=OnboardingStep.UPLOAD_OUTFITS, is_editing_preferences=True)
    ) is OnboardingStep.EDIT_PROFILE
