"""
api_client.py: single HTTP client for all frontend -> backend communication.

Every request goes through ApiClient.request, which
  * refuses to send an authenticated request once the session has expired,
  * attaches the bearer token and, on mutating verbs, the CSRF token,
  * clears the session on 401,
  * retries exactly once after a CSRF rejection with a fresh CSRF token,
  * turns every failure into an APIError.
"""
from __future__ import annotations

import enum
import logging
from typing import Callable

import requests

from exam_client import errors
from exam_client.config import Config
from exam_client.errors import APIError, SessionExpiredError
from exam_client.normalize import dig
from exam_client.session import Session

log = logging.getLogger(__name__)

_READ_METHODS = {"GET", "HEAD", "OPTIONS"}


class RetryState(enum.Enum):
    FRESH = "fresh"
    RETRIED = "retried"


def _short(token: str | None) -> str:
    return f"{token[:10]}..." if token else "<none>"


class ApiClient:
    def __init__(
        self,
        session: Session | None = None,
        base_url: str = Config.API_BASE_URL,
        http: requests.Session | None = None,
        redirect: Callable[[str], None] | None = None,
        timeout: float = Config.API_TIMEOUT,
    ):
        self.session = session or Session()
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api"
        self.http = http or requests.Session()
        self.redirect = redirect or (lambda route: log.info("redirect to %s", route))
        self.timeout = timeout

    # ── Headers ──────────────────────────────────────────────────────────────

    def _headers(self, method: str) -> dict:
        h = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.session.get_token()
        if token and not self.session.is_token_expired():
            h["Authorization"] = f"Bearer {token}"
        csrf = self.session.csrf_token
        if method not in _READ_METHODS and csrf:
            h["X-CSRF-Token"] = csrf
        return h

    # ── Session transitions ──────────────────────────────────────────────────

    def _end_session(self) -> str:
        # Role must be read before the store is wiped.
        route = self.session.login_route()
        self.session.clear_auth()
        self.redirect(route)
        return route

    # ── CSRF ─────────────────────────────────────────────────────────────────

    def fetch_csrf_token(self) -> str:
        try:
            resp = self.http.get(
                f"{self.api_url}/csrf-token",
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            body = resp.json()
            token = dig(body, "data.csrfToken") or dig(body, "csrfToken")
            if not isinstance(token, str):
                raise APIError("CSRF token not found in response", resp.status_code, errors.CSRF_ERROR)
        except (requests.RequestException, ValueError, APIError) as exc:
            log.error("failed to fetch CSRF token: %s", exc)
            stored = self.session.csrf_token
            if stored:
                log.info("using stored CSRF token as fallback")
                return stored
            raise

        self.session.csrf_token = token
        return token

    def _ensure_csrf(self) -> None:
        if self.session.csrf_token:
            return
        try:
            self.fetch_csrf_token()
        except (requests.RequestException, ValueError, APIError) as exc:
            # TODO: decide with the backend team whether a missing CSRF token
            # should block mutating requests instead of sending them bare.
            log.warning("failed to fetch CSRF token, attempting request anyway: %s", exc)

    # ── Core request ─────────────────────────────────────────────────────────

    def _send(self, method: str, path: str, params=None, json=None, auth: bool = True):
        url = f"{self.api_url}{path}"
        headers = self._headers(method)
        log.debug(
            "%s %s auth=%s csrf=%s",
            method, url, _short(self.session.get_token()), "X-CSRF-Token" in headers,
        )
        try:
            resp = self.http.request(
                method, url, params=params, json=json, headers=headers, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            log.error("%s %s failed: %s", method, url, exc)
            raise errors.network_error(exc) from exc
        except requests.RequestException as exc:
            raise errors.unknown_error(exc) from exc

        log.debug("%s %s -> %s", method, url, resp.status_code)

        if resp.ok:
            if not resp.content:
                return None
            try:
                return resp.json()
            except ValueError:
                return resp.text

        if resp.status_code == 401:
            if auth or self.session.get_token():
                log.error("unauthorized %s %s, clearing session", method, url)
                self._end_session()
            else:
                # Rejected credentials on a public call: no session to end
                log.info("unauthorized %s %s without a session", method, url)
        raise errors.from_response(resp)

    def request(self, method: str, path: str, *, params=None, json=None, auth: bool = True):
        method = method.upper()

        if auth and self.session.is_token_expired():
            log.info("token has expired, clearing auth data")
            route = self._end_session()
            raise SessionExpiredError(route)

        if method not in _READ_METHODS:
            self._ensure_csrf()

        state = RetryState.FRESH
        while True:
            try:
                return self._send(method, path, params=params, json=json, auth=auth)
            except APIError as err:
                if state is RetryState.RETRIED:
                    log.error("retry after CSRF refresh failed: %s", err)
                    raise original from err
                if not errors.is_csrf_error(err):
                    raise
                original = err

            log.error("CSRF validation failed, refreshing token and retrying %s %s", method, path)
            state = RetryState.RETRIED
            self.session.csrf_token = None
            try:
                self.fetch_csrf_token()
            except (APIError, requests.RequestException, ValueError) as exc:
                raise original from exc

    # ── Convenience ──────────────────────────────────────────────────────────

    def get(self, path: str, params: dict | None = None, auth: bool = True):
        return self.request("GET", path, params=params, auth=auth)

    def post(self, path: str, payload=None, auth: bool = True):
        return self.request("POST", path, json=payload, auth=auth)

    def put(self, path: str, payload=None, auth: bool = True):
        return self.request("PUT", path, json=payload, auth=auth)

    def delete(self, path: str, auth: bool = True):
        return self.request("DELETE", path, auth=auth)

    @staticmethod
    def build_url(template: str, **params) -> str:
        url = template
        for key, value in params.items():
            url = url.replace(f":{key}", str(value))
        return url
