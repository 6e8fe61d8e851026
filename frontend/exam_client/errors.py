"""
errors.py: the single error type every client call raises, plus the helpers
pages use to turn one into something displayable.

Codes
-----
NETWORK_ERROR          no response at all (DNS, refused, timeout)
UNAUTHORIZED           401, session is cleared before this is raised
FORBIDDEN              403
CSRF_ERROR             403 tagged by the backend as a CSRF rejection
NOT_FOUND              404
VALIDATION_ERROR       400/422, or a request model that failed locally
INTERNAL_SERVER_ERROR  5xx
TOKEN_EXPIRED          request short-circuited before the network
UNKNOWN_ERROR          anything else
"""
from __future__ import annotations

import requests

NETWORK_ERROR = "NETWORK_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
FORBIDDEN = "FORBIDDEN"
CSRF_ERROR = "CSRF_ERROR"
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

DEFAULT_ERROR_MESSAGES = {
    NETWORK_ERROR: "فشل الاتصال بالخادم. يرجى التحقق من اتصالك بالإنترنت.",
    UNAUTHORIZED: "يجب تسجيل الدخول للوصول إلى هذه الصفحة.",
    FORBIDDEN: "ليس لديك صلاحية للوصول إلى هذا المورد.",
    CSRF_ERROR: "ليس لديك صلاحية للوصول إلى هذا المورد.",
    NOT_FOUND: "المورد المطلوب غير موجود.",
    VALIDATION_ERROR: "هناك خطأ في البيانات المدخلة. يرجى التحقق منها وإعادة المحاولة.",
    INTERNAL_SERVER_ERROR: "حدث خطأ في الخادم. يرجى المحاولة مرة أخرى لاحقًا.",
    TOKEN_EXPIRED: "انتهت صلاحية الجلسة. يرجى تسجيل الدخول مرة أخرى.",
    UNKNOWN_ERROR: "حدث خطأ غير معروف. يرجى المحاولة مرة أخرى.",
}


class APIError(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 0,
        code: str = UNKNOWN_ERROR,
        field_errors: dict[str, list[str]] | None = None,
        details=None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.field_errors = field_errors or {}
        self.details = details

    def to_dict(self) -> dict:
        d = {"success": False, "message": self.message, "code": self.code}
        if self.field_errors:
            d["fieldErrors"] = self.field_errors
        if self.details is not None:
            d["details"] = self.details
        return d

    def __repr__(self):
        return f"<APIError {self.code} status={self.status_code} {self.message!r}>"


class SessionExpiredError(APIError):
    """Raised instead of sending a request whose session is gone."""

    def __init__(self, redirect_to: str, message: str | None = None):
        super().__init__(
            message or DEFAULT_ERROR_MESSAGES[TOKEN_EXPIRED],
            code=TOKEN_EXPIRED,
        )
        self.redirect_to = redirect_to


# ── Building errors from responses ───────────────────────────────────────────

def code_for_status(status: int) -> str:
    if status in (400, 422):
        return VALIDATION_ERROR
    if status == 401:
        return UNAUTHORIZED
    if status == 403:
        return FORBIDDEN
    if status == 404:
        return NOT_FOUND
    if status >= 500:
        return INTERNAL_SERVER_ERROR
    return UNKNOWN_ERROR


def _body(resp: requests.Response) -> dict | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _field_errors(body: dict) -> dict[str, list[str]]:
    raw = body.get("fieldErrors")
    if isinstance(raw, dict):
        return {
            str(field): [str(m) for m in msgs] if isinstance(msgs, (list, tuple)) else [str(msgs)]
            for field, msgs in raw.items()
        }

    # Some endpoints report validation as details=[{field, message}, ...]
    details = body.get("details")
    errors: dict[str, list[str]] = {}
    if isinstance(details, list):
        for detail in details:
            if isinstance(detail, dict) and detail.get("field"):
                errors.setdefault(str(detail["field"]), []).append(
                    str(detail.get("message") or "Validation error")
                )
    return errors


def from_response(resp: requests.Response) -> APIError:
    body = _body(resp)
    if body is None:
        code = code_for_status(resp.status_code)
        return APIError(DEFAULT_ERROR_MESSAGES[code], resp.status_code, code)

    code = body.get("code") or code_for_status(resp.status_code)
    message = body.get("message") or body.get("error") or DEFAULT_ERROR_MESSAGES.get(
        code, DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR]
    )
    return APIError(
        str(message),
        resp.status_code,
        str(code),
        field_errors=_field_errors(body),
        details=body.get("details"),
    )


def network_error(exc: Exception) -> APIError:
    return APIError("Network error or server unavailable", 0, NETWORK_ERROR, details=str(exc))


def unknown_error(exc: Exception) -> APIError:
    return APIError(str(exc) or DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR], 0, UNKNOWN_ERROR)


# ── Classification helpers ───────────────────────────────────────────────────

def is_csrf_error(err) -> bool:
    if not isinstance(err, APIError) or err.status_code != 403:
        return False
    return err.code == CSRF_ERROR or "CSRF" in (err.message or "")


def is_unauthorized_error(err) -> bool:
    return isinstance(err, APIError) and err.code == UNAUTHORIZED


def is_validation_error(err) -> bool:
    return isinstance(err, APIError) and err.code == VALIDATION_ERROR


def get_field_errors(err) -> dict[str, list[str]]:
    if isinstance(err, APIError):
        return err.field_errors
    return {}


def format_validation_errors(field_errors: dict[str, list[str]]) -> str:
    lines = []
    for field, messages in field_errors.items():
        for message in messages:
            lines.append(f"{field}: {message}")
    return "\n".join(lines)


def get_error_message(err) -> str:
    """Best displayable text for anything a page may have caught."""
    if not err:
        return DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR]
    if isinstance(err, APIError):
        return err.message or DEFAULT_ERROR_MESSAGES.get(err.code, DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR])
    if isinstance(err, str):
        return err
    if isinstance(err, Exception):
        return str(err) or DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR]
    return DEFAULT_ERROR_MESSAGES[UNKNOWN_ERROR]
