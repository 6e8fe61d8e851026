"""Tests for APIError construction and classification helpers."""

import json

import pytest
import requests

from exam_client import errors
from exam_client.errors import APIError, SessionExpiredError


def _response(status: int, body=None, text: str | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    if text is not None:
        resp._content = text.encode()
    else:
        resp._content = json.dumps(body).encode() if body is not None else b""
    resp.encoding = "utf-8"
    return resp


class TestCodeForStatus:
    @pytest.mark.parametrize(
        "status, code",
        [
            (400, errors.VALIDATION_ERROR),
            (422, errors.VALIDATION_ERROR),
            (401, errors.UNAUTHORIZED),
            (403, errors.FORBIDDEN),
            (404, errors.NOT_FOUND),
            (500, errors.INTERNAL_SERVER_ERROR),
            (503, errors.INTERNAL_SERVER_ERROR),
            (409, errors.UNKNOWN_ERROR),
        ],
    )
    def test_mapping(self, status, code):
        assert errors.code_for_status(status) == code


class TestFromResponse:
    def test_backend_code_and_message_win(self):
        err = errors.from_response(_response(403, {"code": "CSRF_ERROR", "message": "Invalid CSRF token"}))
        assert err.status_code == 403
        assert err.code == errors.CSRF_ERROR
        assert err.message == "Invalid CSRF token"

    def test_error_field_used_as_message(self):
        err = errors.from_response(_response(500, {"error": "db down"}))
        assert err.code == errors.INTERNAL_SERVER_ERROR
        assert err.message == "db down"

    def test_default_message_for_code(self):
        err = errors.from_response(_response(404, {"success": False}))
        assert err.message == errors.DEFAULT_ERROR_MESSAGES[errors.NOT_FOUND]

    def test_non_json_body(self):
        err = errors.from_response(_response(502, text="<html>Bad gateway</html>"))
        assert err.code == errors.INTERNAL_SERVER_ERROR
        assert err.message == errors.DEFAULT_ERROR_MESSAGES[errors.INTERNAL_SERVER_ERROR]

    def test_field_errors_from_details(self):
        body = {
            "code": "VALIDATION_ERROR",
            "message": "Validation failed",
            "details": [
                {"field": "phone", "message": "taken"},
                {"field": "phone", "message": "too short"},
                {"message": "no field"},
            ],
        }
        err = errors.from_response(_response(400, body))
        assert err.field_errors == {"phone": ["taken", "too short"]}
        assert err.details == body["details"]

    def test_field_errors_dict(self):
        err = errors.from_response(_response(422, {"fieldErrors": {"email": "invalid"}}))
        assert err.field_errors == {"email": ["invalid"]}


class TestClassification:
    def test_csrf_by_code(self):
        assert errors.is_csrf_error(APIError("x", 403, errors.CSRF_ERROR))

    def test_csrf_by_message(self):
        assert errors.is_csrf_error(APIError("Missing CSRF token", 403, errors.FORBIDDEN))

    def test_csrf_needs_403(self):
        assert not errors.is_csrf_error(APIError("CSRF", 400, errors.CSRF_ERROR))
        assert not errors.is_csrf_error(ValueError("CSRF"))

    def test_plain_forbidden_is_not_csrf(self):
        assert not errors.is_csrf_error(APIError("admins only", 403, errors.FORBIDDEN))

    def test_unauthorized_and_validation(self):
        assert errors.is_unauthorized_error(APIError("x", 401, errors.UNAUTHORIZED))
        assert errors.is_validation_error(APIError("x", 400, errors.VALIDATION_ERROR))
        assert not errors.is_validation_error("VALIDATION_ERROR")


class TestDisplayHelpers:
    def test_format_validation_errors(self):
        text = errors.format_validation_errors({"phone": ["taken"], "password": ["short", "weak"]})
        assert text.splitlines() == ["phone: taken", "password: short", "password: weak"]

    def test_get_field_errors(self):
        assert errors.get_field_errors(APIError("x", field_errors={"a": ["b"]})) == {"a": ["b"]}
        assert errors.get_field_errors(RuntimeError()) == {}

    @pytest.mark.parametrize(
        "err, expected",
        [
            (APIError("boom"), "boom"),
            ("plain text", "plain text"),
            (RuntimeError("runtime"), "runtime"),
            (None, errors.DEFAULT_ERROR_MESSAGES[errors.UNKNOWN_ERROR]),
            (42, errors.DEFAULT_ERROR_MESSAGES[errors.UNKNOWN_ERROR]),
        ],
    )
    def test_get_error_message(self, err, expected):
        assert errors.get_error_message(err) == expected

    def test_to_dict(self):
        err = APIError("Validation failed", 400, errors.VALIDATION_ERROR, field_errors={"a": ["b"]})
        assert err.to_dict() == {
            "success": False,
            "message": "Validation failed",
            "code": errors.VALIDATION_ERROR,
            "fieldErrors": {"a": ["b"]},
        }

    def test_session_expired(self):
        err = SessionExpiredError("/admin/login")
        assert err.code == errors.TOKEN_EXPIRED
        assert err.redirect_to == "/admin/login"
        assert isinstance(err, APIError)

    def test_network_error(self):
        err = errors.network_error(requests.ConnectionError("refused"))
        assert err.code == errors.NETWORK_ERROR
        assert err.status_code == 0
        assert err.message == "Network error or server unavailable"
