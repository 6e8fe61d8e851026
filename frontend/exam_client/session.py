"""
session.py: token lifecycle for one browser tab (or one script run).

A Session wraps a mutable mapping. In the Streamlit app that mapping is
``st.session_state``; anywhere else a plain dict does. The mapping holds the
keys listed in ``config.SESSION_KEYS`` and nothing else is read from it.

    ANONYMOUS --start()--> USER | ADMIN --clear_auth()--> ANONYMOUS
"""
from __future__ import annotations

import enum
import logging
import time
from collections.abc import MutableMapping
from typing import Callable

import jwt

from exam_client import config

log = logging.getLogger(__name__)


class SessionState(enum.Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"


def decode_expiration(token: str) -> float | None:
    """Return the ``exp`` claim of a JWT in epoch seconds, without verifying it."""
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        log.debug("token is not a decodable JWT: %s", exc)
        return None

    exp = payload.get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return float(exp)
    return None


class Session:
    def __init__(
        self,
        store: MutableMapping | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else {}
        self.clock = clock

    # ── Role ─────────────────────────────────────────────────────────────────

    def is_admin(self) -> bool:
        return self.store.get(config.IS_ADMIN) is True

    def set_user_type(self, is_admin: bool) -> None:
        self.store[config.IS_ADMIN] = bool(is_admin)

    def _profile_key(self) -> str:
        return config.ADMIN_DATA if self.is_admin() else config.USER_DATA

    def login_route(self) -> str:
        return config.ADMIN_LOGIN_ROUTE if self.is_admin() else config.LOGIN_ROUTE

    @property
    def state(self) -> SessionState:
        if self.get_token() is None:
            return SessionState.ANONYMOUS
        return SessionState.ADMIN if self.is_admin() else SessionState.USER

    # ── Profile ──────────────────────────────────────────────────────────────

    @property
    def user(self) -> dict | None:
        return self.store.get(config.USER_DATA)

    @property
    def admin(self) -> dict | None:
        return self.store.get(config.ADMIN_DATA)

    @property
    def profile(self) -> dict | None:
        return self.store.get(self._profile_key())

    def set_profile(self, profile: dict) -> None:
        record = dict(profile)
        token = self.store.get(config.AUTH_TOKEN)
        if token and "token" not in record:
            record["token"] = token
        self.store[self._profile_key()] = record

    # ── Token ────────────────────────────────────────────────────────────────

    def get_token(self) -> str | None:
        token = self.store.get(config.AUTH_TOKEN)
        if token:
            return token

        profile = self.store.get(self._profile_key())
        if isinstance(profile, dict) and profile.get("token"):
            return profile["token"]
        return None

    def set_token(self, token: str) -> None:
        self.store[config.AUTH_TOKEN] = token

        exp = decode_expiration(token)
        if exp is not None:
            self.store[config.TOKEN_EXPIRATION] = exp
        else:
            self.store.pop(config.TOKEN_EXPIRATION, None)

        key = self._profile_key()
        profile = self.store.get(key)
        if isinstance(profile, dict):
            self.store[key] = {**profile, "token": token}

    def expiration(self) -> float | None:
        exp = self.store.get(config.TOKEN_EXPIRATION)
        if exp is not None:
            return float(exp)

        token = self.get_token()
        if not token:
            return None
        exp = decode_expiration(token)
        if exp is not None:
            self.store[config.TOKEN_EXPIRATION] = exp
        return exp

    def is_token_expired(self) -> bool:
        if not self.get_token():
            return True
        exp = self.expiration()
        if exp is None:
            # Unknown expiry: let the backend decide with a 401.
            return False
        return self.clock() > exp

    # ── CSRF ─────────────────────────────────────────────────────────────────

    @property
    def csrf_token(self) -> str | None:
        return self.store.get(config.CSRF_TOKEN)

    @csrf_token.setter
    def csrf_token(self, value: str | None) -> None:
        if value:
            self.store[config.CSRF_TOKEN] = value
        else:
            self.store.pop(config.CSRF_TOKEN, None)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self, profile: dict | None, token: str | None, is_admin: bool = False) -> None:
        """Enter the authenticated state as a user or an admin."""
        self.set_user_type(is_admin)
        if profile is not None:
            self.store[self._profile_key()] = dict(profile)
        if token:
            self.set_token(token)
        else:
            log.warning("no token found in %s login response", "admin" if is_admin else "user")
        log.info("session started (%s)", self.state.value)

    def clear_auth(self) -> None:
        for key in config.SESSION_KEYS:
            self.store.pop(key, None)
        log.info("session cleared")
