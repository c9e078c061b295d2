"""Persisted auth state: who is signed in and whether onboarding finished.

Persistence here is fire-and-forget. Reads of a missing or unreadable store
come back empty and failed writes are logged, never raised, because the remote
profile stays the source of truth.
"""
from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)

USER_ID_KEY = "userId"
AUTH_TOKEN_KEY = "authToken"
ONBOARDING_COMPLETE_KEY = "onboardingComplete"


@dataclass
class AuthState:
    """Snapshot of the persisted keys."""

    user_id: Optional[str] = None
    auth_token: Optional[str] = None
    onboarding_complete: bool = False


def _updates(
    user_id: Optional[str], auth_token: Optional[str], onboarding_complete: Optional[bool]
) -> Dict[str, Any]:
    updates: Dict[str, Any] = {}
    if user_id is not None:
        updates[USER_ID_KEY] = user_id
    if auth_token is not None:
        updates[AUTH_TOKEN_KEY] = auth_token
    if onboarding_complete is not None:
        updates[ONBOARDING_COMPLETE_KEY] = bool(onboarding_complete)
    return updates


def _state_from_mapping(values: Dict[str, Any]) -> AuthState:
    user_id = values.get(USER_ID_KEY) or None
    token = values.get(AUTH_TOKEN_KEY) or None
    return AuthState(
        user_id=str(user_id) if user_id else None,
        auth_token=str(token) if token else None,
        onboarding_complete=values.get(ONBOARDING_COMPLETE_KEY) is True,
    )


class AuthStore:
    """Interface for the persisted auth store."""

    def load(self) -> AuthState:
        raise NotImplementedError

    def save(
        self,
        user_id: Optional[str] = None,
        auth_token: Optional[str] = None,
        onboarding_complete: Optional[bool] = None,
    ) -> None:
        """Persist every argument that is not ``None``; ``None`` leaves the key as is."""

        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class JSONAuthStore(AuthStore):
    """Single JSON document on disk, suitable for local runs."""

    def __init__(self, path: str | Path = "data/auth_state.json") -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as exc:
            LOGGER.warning("Unreadable auth store, treating as empty", extra={"error": str(exc)})
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> AuthState:
        return _state_from_mapping(self._read())

    def save(
        self,
        user_id: Optional[str] = None,
        auth_token: Optional[str] = None,
        onboarding_complete: Optional[bool] = None,
    ) -> None:
        updates = _updates(user_id, auth_token, onboarding_complete)
        if not updates:
            return
        record = self._read()
        record.update(updates)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(record, indent=2))
        except OSError as exc:
            LOGGER.warning("Failed to persist auth state", extra={"error": str(exc)})

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("Failed to clear auth state", extra={"error": str(exc)})


class SQLiteAuthStore(AuthStore):
    """SQLite key/value table for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/auth_state.db") -> None:
        self.db_path = Path(db_path)
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        if not self._schema_ready:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS auth_state (key TEXT PRIMARY KEY, value TEXT)"
            )
            self._schema_ready = True
        return conn

    def load(self) -> AuthState:
        if not self.db_path.exists():
            return AuthState()
        try:
            conn = self._connect()
            try:
                rows = conn.execute("SELECT key, value FROM auth_state").fetchall()
            finally:
                conn.close()
            values = {row["key"]: json.loads(row["value"]) for row in rows}
        except (OSError, sqlite3.Error, ValueError) as exc:
            LOGGER.warning("Unreadable auth store, treating as empty", extra={"error": str(exc)})
            return AuthState()
        return _state_from_mapping(values)

    def save(
        self,
        user_id: Optional[str] = None,
        auth_token: Optional[str] = None,
        onboarding_complete: Optional[bool] = None,
    ) -> None:
        updates = _updates(user_id, auth_token, onboarding_complete)
        if not updates:
            return
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.executemany(
                        "INSERT INTO auth_state(key, value) VALUES (?, ?)\n"
                        "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                        [(key, json.dumps(value)) for key, value in updates.items()],
                    )
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as exc:
            LOGGER.warning("Failed to persist auth state", extra={"error": str(exc)})

    def clear(self) -> None:
        if not self.db_path.exists():
            return
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute("DELETE FROM auth_state")
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as exc:
            LOGGER.warning("Failed to clear auth state", extra={"error": str(exc)})


def build_auth_store(backend: str, path: str | None = None) -> AuthStore:
    """Select an auth store backend by name (``json`` or ``sqlite``)."""

    if backend == "sqlite":
        return SQLiteAuthStore(path or "data/auth_state.db")
    if backend == "json":
        return JSONAuthStore(path or "data/auth_state.json")
    raise ValueError(f"Unsupported auth store backend: {backend}")


__all__ = [
    "AuthState",
    "AuthStore",
    "JSONAuthStore",
    "SQLiteAuthStore",
    "build_auth_store",
]
