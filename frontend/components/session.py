"""
session.py: wires the exam client to Streamlit.

One ApiClient per browser tab, backed by st.session_state. Pages call
require_auth() at the top and run_call() around anything that talks to the
backend.
"""
import logging

import streamlit as st

from exam_client import ApiClient, APIError, Session, SessionExpiredError
from exam_client.config import ADMIN_LOGIN_ROUTE, Config
from exam_client.errors import format_validation_errors, get_error_message

PAGES = {
    "/login": "pages/0_Login.py",
    ADMIN_LOGIN_ROUTE: "pages/1_Admin_Login.py",
}

_CLIENT_KEY = "_exam_client"
_REDIRECT_KEY = "_redirect_to"


def configure_logging() -> None:
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _remember_redirect(route: str) -> None:
    st.session_state[_REDIRECT_KEY] = route


def get_client() -> ApiClient:
    client = st.session_state.get(_CLIENT_KEY)
    if client is None:
        client = ApiClient(Session(st.session_state), redirect=_remember_redirect)
        st.session_state[_CLIENT_KEY] = client
    return client


def go_to_login(route: str | None = None) -> None:
    route = route or st.session_state.pop(_REDIRECT_KEY, None) or get_client().session.login_route()
    st.switch_page(PAGES.get(route, PAGES["/login"]))


# ── Auth guard ───────────────────────────────────────────────────────────────

def require_auth(admin: bool = False) -> ApiClient:
    client = get_client()
    session = client.session
    if session.is_token_expired():
        route = ADMIN_LOGIN_ROUTE if admin else session.login_route()
        session.clear_auth()
        st.warning("Please sign in to continue.")
        st.page_link(PAGES.get(route, PAGES["/login"]), label="👉 Go to Login")
        st.stop()
    if admin and not session.is_admin():
        # Signed in, wrong role: keep the session
        st.warning("This page is for administrators only.")
        st.page_link("Home.py", label="Back to Dashboard →")
        st.stop()
    return client


def run_call(fn, *args, **kwargs):
    """Call a service; render its error and return None on failure."""
    try:
        return fn(*args, **kwargs)
    except SessionExpiredError as exc:
        go_to_login(exc.redirect_to)
    except APIError as exc:
        st.error(get_error_message(exc))
        if exc.field_errors:
            st.caption(format_validation_errors(exc.field_errors))
        if st.session_state.get(_REDIRECT_KEY):
            go_to_login()
    return None
