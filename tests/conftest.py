"""Pytest configuration and shared fixtures."""

import time
from urllib.parse import urlsplit

import jwt
import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from exam_client import ApiClient, Session
from exam_client.services import auth
from fake_backend import create_app

BASE_URL = "http://testserver"
PHONE = "+213912345678"
PASSWORD = "secret1"


class FlaskAdapter(BaseAdapter):
    """Route requests into a Flask test client and remember what was sent."""

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()
        self.sent = []

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.sent.append(request)
        url = urlsplit(request.url)
        resp = self.client.open(
            url.path,
            method=request.method,
            query_string=url.query,
            headers=dict(request.headers),
            data=request.body,
        )

        out = requests.Response()
        out.status_code = resp.status_code
        out.reason = resp.status.partition(" ")[2]
        out._content = resp.get_data()
        out.headers = CaseInsensitiveDict(resp.headers)
        out.encoding = "utf-8"
        out.url = request.url
        out.request = request
        return out

    def close(self):
        pass

    def paths(self, method: str | None = None) -> list[str]:
        return [
            urlsplit(r.url).path
            for r in self.sent
            if method is None or r.method == method
        ]


def make_token(exp_offset: float, sub: str = PHONE) -> str:
    """JWT expiring ``exp_offset`` seconds from now, signed with a key the client never sees."""
    payload = {"sub": sub, "exp": int(time.time() + exp_offset)}
    return jwt.encode(payload, "a-different-signing-key-the-client-never-sees", algorithm="HS256")


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def adapter(app):
    return FlaskAdapter(app)


@pytest.fixture
def redirects():
    return []


@pytest.fixture
def session():
    return Session({})


@pytest.fixture
def client(adapter, redirects, session):
    http = requests.Session()
    http.mount(BASE_URL, adapter)
    return ApiClient(session, base_url=BASE_URL, http=http, redirect=redirects.append, timeout=5)


@pytest.fixture
def expired_token():
    return make_token(-60)


@pytest.fixture
def valid_token():
    return make_token(3600)


@pytest.fixture
def logged_in(client):
    """Client holding a real user session issued by the fake backend."""
    auth.login(client, PHONE, PASSWORD)
    return client


@pytest.fixture
def admin_client(client):
    auth.admin_login(client, "root", "adminpass")
    return client
