"""
auth.py: login, registration, logout and token refresh.

Login responses come in several shapes; both the token and the profile are
located with the normalizer and then handed to the Session in one step.
"""
from __future__ import annotations

import logging

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.errors import APIError
from exam_client.normalize import extract_profile, extract_token
from exam_client.schemas import AdminLoginRequest, LoginRequest, RegisterRequest, validate

log = logging.getLogger(__name__)


# ── Register ─────────────────────────────────────────────────────────────────

def register(
    client: ApiClient,
    full_name: str,
    phone: str,
    password: str,
    date_of_birth: str,
    email: str | None = None,
) -> dict:
    payload = validate(
        RegisterRequest,
        full_name=full_name,
        phone=phone,
        password=password,
        date_of_birth=date_of_birth,
        email=email or None,
    ).dump()

    body = client.post(ENDPOINTS["register"], payload, auth=False)
    user = extract_profile(body, "user")
    if not user:
        raise APIError("Could not extract user data from register response")

    client.session.start(user, extract_token(body), is_admin=False)
    return user


# ── Login ────────────────────────────────────────────────────────────────────

def login(client: ApiClient, phone: str, password: str) -> dict:
    payload = validate(LoginRequest, phone=phone.strip(), password=password).dump()
    log.info("login request for %s (password length %d)", payload["phone"], len(password))

    body = client.post(ENDPOINTS["login"], payload, auth=False)
    user = extract_profile(body, "user")
    if not user:
        log.error("could not extract user data from login response: %r", body)
        raise APIError("Could not extract user data from login response")

    client.session.start(user, extract_token(body), is_admin=False)
    return user


def admin_login(client: ApiClient, username: str, password: str) -> dict:
    payload = validate(AdminLoginRequest, username=username.strip(), password=password).dump()
    log.info("admin login request for %s", payload["username"])

    body = client.post(ENDPOINTS["admin_login"], payload, auth=False)
    token = extract_token(body)
    admin = extract_profile(body, "admin")

    if not admin:
        if not token or not isinstance(body, dict):
            log.error("could not extract admin data from login response: %r", body)
            raise APIError("Could not extract admin data from login response")
        # Token-only response: keep a minimal record so the UI has a name.
        data = body.get("data") if isinstance(body.get("data"), dict) else {}
        admin = {
            "id": data.get("userId") or body.get("userId") or "admin",
            "username": payload["username"],
            "isAdmin": True,
        }

    admin = {k: v for k, v in admin.items() if k != "token"}
    client.session.start(admin, token, is_admin=True)
    return admin


# ── Logout ───────────────────────────────────────────────────────────────────

def logout(client: ApiClient) -> None:
    path = ENDPOINTS["admin_logout"] if client.session.is_admin() else ENDPOINTS["logout"]
    try:
        client.post(path)
    except APIError as exc:
        log.error("logout failed: %s", exc)
    finally:
        client.session.clear_auth()


# ── Refresh ──────────────────────────────────────────────────────────────────

def _refresh(client: ApiClient, path: str, is_admin: bool) -> bool:
    try:
        body = client.post(path)
    except APIError as exc:
        if "SQLITE_ERROR" in exc.message or "database" in exc.message:
            log.error("database error during token refresh: %s", exc)
        log.error("token refresh failed: %s", exc)
        return False

    token = extract_token(body)
    if not token:
        return False
    client.session.set_token(token)
    client.session.set_user_type(is_admin)
    return True


def refresh_token(client: ApiClient) -> bool:
    return _refresh(client, ENDPOINTS["refresh"], is_admin=False)


def refresh_admin_token(client: ApiClient) -> bool:
    return _refresh(client, ENDPOINTS["admin_refresh"], is_admin=True)


# ── Helpers ──────────────────────────────────────────────────────────────────

def get_csrf_token(client: ApiClient) -> str:
    return client.fetch_csrf_token()


def is_authenticated(client: ApiClient) -> bool:
    return client.session.get_token() is not None


def is_admin(client: ApiClient) -> bool:
    return is_authenticated(client) and client.session.is_admin()
