import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # Backend
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000").rstrip("/")
    API_TIMEOUT = float(os.getenv("API_TIMEOUT", "20"))

    # Admin token refresh lives outside the regular auth routes on the backend
    ADMIN_REFRESH_PATH = os.getenv("ADMIN_REFRESH_PATH", "/auth/q0z3x-management/refresh")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# ── Storage keys ─────────────────────────────────────────────────────────────

AUTH_TOKEN = "qozex_auth_token"
TOKEN_EXPIRATION = "qozex_token_expiration"
IS_ADMIN = "qozex_is_admin"
CSRF_TOKEN = "qozex_csrf_token"
USER_DATA = "qozex_user_data"
ADMIN_DATA = "qozex_admin_data"

SESSION_KEYS = (AUTH_TOKEN, USER_DATA, CSRF_TOKEN, IS_ADMIN, TOKEN_EXPIRATION, ADMIN_DATA)


# ── Client routes ────────────────────────────────────────────────────────────

LOGIN_ROUTE = "/login"
ADMIN_LOGIN_ROUTE = "/admin/login"


# ── Backend endpoints (relative to <base>/api) ───────────────────────────────

ENDPOINTS = {
    "register": "/auth/register",
    "login": "/auth/login",
    "admin_login": "/auth/admin/login",
    "logout": "/auth/logout",
    "admin_logout": "/auth/admin/logout",
    "refresh": "/auth/refresh",
    "admin_refresh": Config.ADMIN_REFRESH_PATH,
    "csrf_token": "/csrf-token",
    "profile": "/user/profile",
    "password": "/user/password",
    "user_results": "/user/results",
    "user_result": "/user/results/:resultId",
    "exams": "/exams",
    "exam": "/exams/:examId",
    "exam_submit": "/exams/:examId/submit",
    "results": "/results",
    "result": "/results/:resultId",
    "result_share": "/results/:resultId/share",
    "sections": "/sections",
    "admin_users": "/admin/users",
    "admin_user": "/admin/users/:userId",
    "admin_exams": "/admin/exams",
    "admin_exam": "/admin/exams/:examId",
    "admin_sections": "/admin/sections",
    "admin_section": "/admin/sections/:sectionId",
    "admin_question": "/admin/questions/:questionId",
    "admin_stats": "/admin/stats",
}
