"""Unit tests for the persisted auth store backends."""

import json
import sqlite3
from pathlib import Path

import pytest

from memory.auth_store import (
    AuthState,
    JSONAuthStore,
    SQLiteAuthStore,
    build_auth_store,
)


@pytest.fixture(params=["json", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "json":
        return JSONAuthStore(tmp_path / "auth.json")
    return SQLiteAuthStore(tmp_path / "auth.db")


def test_empty_store_loads_signed_out(store) -> None:
    assert store.load() == AuthState()


def test_save_roundtrip(store) -> None:
    store.save(user_id="user-1", auth_token="tok")
    store.save(onboarding_complete=True)

    state = store.load()
    assert state.user_id == "user-1"
    assert state.auth_token == "tok"
    assert state.onboarding_complete is True


def test_save_with_none_never_clobbers(store) -> None:
    store.save(user_id="user-1", auth_token="tok", onboarding_complete=True)
    store.save(user_id=None, auth_token=None, onboarding_complete=None)
    store.save(auth_token="tok-2")

    state = store.load()
    assert state.user_id == "user-1"
    assert state.auth_token == "tok-2"
    assert state.onboarding_complete is True


def test_clear_is_idempotent(store) -> None:
    store.save(user_id="user-1", onboarding_complete=True)
    store.clear()
    store.clear()

    assert store.load() == AuthState()


def test_json_store_treats_corrupt_file_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "auth.json"
    path.write_text("{not json")

    store = JSONAuthStore(path)
    assert store.load() == AuthState()

    store.save(user_id="user-2")
    assert store.load().user_id == "user-2"


def test_sqlite_store_treats_corrupt_row_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "auth.db"
    store = SQLiteAuthStore(path)
    store.save(user_id="u-1", onboarding_complete=True)

    conn = sqlite3.connect(path)
    with conn:
        conn.execute("UPDATE auth_state SET value = 'not-json' WHERE key = 'userId'")
    conn.close()

    assert store.load() == AuthState()


def test_onboarding_flag_must_be_a_real_boolean(tmp_path: Path) -> None:
    path = tmp_path / "auth.json"
    path.write_text(json.dumps({"userId": "u-1", "onboardingComplete": "false"}))

    state = JSONAuthStore(path).load()
    assert state.user_id == "u-1"
    assert state.onboarding_complete is False


def test_json_store_creates_parent_directories_lazily(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "dir" / "auth.json"
    store = JSONAuthStore(path)
    assert not path.parent.exists()

    store.save(user_id="user-3")
    assert path.exists()


def test_build_auth_store_selects_backend(tmp_path: Path) -> None:
    assert isinstance(build_auth_store("json", str(tmp_path / "a.json")), JSONAuthStore)
    assert isinstance(build_auth_store("sqlite", str(tmp_path / "a.db")), SQLiteAuthStore)
    with pytest.raises(ValueError):
        build_auth_store("redis")
