"""
In-process stand-in for the exam backend.

Implements just enough of the REST contract for the client tests: JWT login
via flask-jwt-extended, a CSRF token endpoint and CSRF enforcement on
mutating verbs, plus a few resources returned in the inconsistent envelopes
the real service uses.

Knobs (app.config):
    BLOCKLIST        jti values answered with 401 (logout adds to it)
    CSRF_REJECT      number of upcoming mutating requests to reject as CSRF
    CSRF_AVAILABLE   False makes /api/csrf-token answer 500
"""
import copy
from datetime import timedelta

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_jwt_extended import JWTManager, create_access_token, get_jwt, get_jwt_identity, jwt_required

USERS = {
    "+213912345678": {
        "id": "u1",
        "fullName": "Amina Benali",
        "phone": "+213912345678",
        "email": "amina@example.com",
        "password": "secret1",
    },
}

ADMINS = {"root": "adminpass"}

EXAMS = [
    {
        "id": "e1",
        "title": "Arithmetic",
        "questionsCount": 2,
        "duration": 10,
        "difficulty": "2",
        "createdAt": "2024-01-01T00:00:00Z",
        "questions": [
            {"id": "q1", "text": "1 + 1", "options": ["1", "2", "3"]},
            {"id": "q2", "text": "2 * 3", "options": [{"id": "a", "text": "5"}, {"id": "b", "text": "6"}]},
        ],
    },
]

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _public(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "password"}


def _users() -> dict:
    return current_app.config["USERS"]


def _counter(name: str) -> None:
    hits = current_app.config["HITS"]
    hits[name] = hits.get(name, 0) + 1


# ── CSRF ─────────────────────────────────────────────────────────────────────

@api_bp.get("/csrf-token")
def csrf_token():
    _counter("csrf")
    if not current_app.config["CSRF_AVAILABLE"]:
        return jsonify({"success": False, "message": "csrf store down"}), 500
    token = f"csrf-{current_app.config['HITS']['csrf']}"
    current_app.config["CSRF_TOKENS"].add(token)
    return jsonify({"success": True, "data": {"csrfToken": token}}), 200


@api_bp.before_request
def check_csrf():
    if request.method in ("GET", "HEAD", "OPTIONS"):
        return None
    cfg = current_app.config
    if cfg["CSRF_REJECT"] > 0:
        cfg["CSRF_REJECT"] -= 1
        return jsonify({"success": False, "code": "CSRF_ERROR", "message": "Invalid CSRF token"}), 403
    if request.headers.get("X-CSRF-Token") not in cfg["CSRF_TOKENS"]:
        return jsonify({"success": False, "code": "CSRF_ERROR", "message": "Missing CSRF token"}), 403
    return None


# ── Auth ─────────────────────────────────────────────────────────────────────

@api_bp.post("/auth/login")
def login():
    _counter("login")
    data = request.get_json(silent=True) or {}
    user = _users().get(data.get("phone", ""))
    if not user or user["password"] != data.get("password"):
        return jsonify({"success": False, "code": "INVALID_CREDENTIALS", "message": "invalid credentials"}), 400

    token = create_access_token(identity=user["phone"])
    return jsonify({"success": True, "data": {"user": _public(user), "token": token}}), 200


@api_bp.post("/auth/register")
def register():
    data = request.get_json(silent=True) or {}
    phone = data.get("phone", "")
    if phone in _users():
        return jsonify({
            "success": False,
            "code": "VALIDATION_ERROR",
            "message": "Validation failed",
            "details": [{"field": "phone", "message": "phone already registered"}],
        }), 400

    user = {"id": f"u{len(_users()) + 1}", **data}
    _users()[phone] = user
    token = create_access_token(identity=phone)
    # Flat shape on purpose: user and token at the root
    return jsonify({"user": _public(user), "accessToken": token}), 201


@api_bp.post("/auth/admin/login")
def admin_login():
    data = request.get_json(silent=True) or {}
    if ADMINS.get(data.get("username")) != data.get("password"):
        return jsonify({"success": False, "message": "invalid credentials"}), 401
    token = create_access_token(identity=f"admin:{data['username']}")
    # Token-only shape: no admin record in the body
    return jsonify({"success": True, "data": {"token": token, "userId": "a1"}}), 200


@api_bp.post("/auth/logout")
@api_bp.post("/auth/admin/logout")
@jwt_required()
def logout():
    _counter("logout")
    current_app.config["BLOCKLIST"].add(get_jwt()["jti"])
    return jsonify({"success": True, "message": "logged out"}), 200


@api_bp.post("/auth/refresh")
@jwt_required()
def refresh():
    token = create_access_token(identity=get_jwt_identity())
    return jsonify({"success": True, "data": {"access_token": token}}), 200


# ── User ─────────────────────────────────────────────────────────────────────

@api_bp.get("/user/profile")
@jwt_required()
def profile():
    _counter("profile")
    user = _users().get(get_jwt_identity())
    if not user:
        return jsonify({"success": False, "code": "NOT_FOUND", "message": "user not found"}), 404
    return jsonify({"success": True, "data": {"user": _public(user)}}), 200


@api_bp.put("/user/profile")
@jwt_required()
def update_profile():
    user = _users()[get_jwt_identity()]
    user.update(request.get_json(silent=True) or {})
    return jsonify({"success": True, "data": _public(user)}), 200


# ── Exams ────────────────────────────────────────────────────────────────────

@api_bp.get("/exams")
@jwt_required()
def list_exams():
    _counter("exams")
    summaries = [{k: v for k, v in e.items() if k != "questions"} for e in EXAMS]
    return jsonify({"success": True, "data": {"data": {"exams": summaries}}}), 200


@api_bp.get("/exams/<exam_id>")
@jwt_required()
def get_exam(exam_id):
    exam = next((e for e in EXAMS if e["id"] == exam_id), None)
    if exam is None:
        return jsonify({"success": False, "code": "NOT_FOUND", "message": "exam not found"}), 404
    return jsonify({"success": True, "data": {"exam": exam}}), 200


@api_bp.post("/exams/<exam_id>/submit")
@jwt_required()
def submit_exam(exam_id):
    data = request.get_json(silent=True) or {}
    answers = data.get("answers", [])
    score = sum(1 for a in answers if (a["questionId"], a.get("selectedOption")) in (("q1", 1), ("q2", 1)))
    result = {
        "examId": exam_id,
        "examTitle": "Arithmetic",
        "score": score,
        "totalQuestions": 2,
        "percentage": score * 50,
        "timeSpent": data.get("timeSpent", 0),
    }
    return jsonify({"success": True, "data": {"result": result, "resultId": "r1"}}), 201


# ── Sections & admin ─────────────────────────────────────────────────────────

@api_bp.get("/sections")
def list_sections():
    return jsonify([{"id": 1, "name": "Math"}, {"id": 2, "name": "Science", "isActive": False}]), 200


@api_bp.delete("/admin/sections/<section_id>")
@jwt_required()
def delete_section(section_id):
    if not get_jwt_identity().startswith("admin:"):
        return jsonify({"success": False, "code": "FORBIDDEN", "message": "admins only"}), 403
    return "", 204


@api_bp.get("/admin/stats")
@jwt_required()
def stats():
    if not get_jwt_identity().startswith("admin:"):
        return jsonify({"success": False, "code": "FORBIDDEN", "message": "admins only"}), 403
    return jsonify({
        "success": True,
        "data": {
            "usersCount": len(_users()),
            "examsCount": len(EXAMS),
            "resultsCount": 0,
            "recentResults": [],
            "topExams": [{"id": "e1", "title": "Arithmetic", "attempts": 3}],
        },
    }), 200


# ── App factory ──────────────────────────────────────────────────────────────

def create_app() -> Flask:
    app = Flask(__name__)
    app.config.update(
        TESTING=True,
        JWT_SECRET_KEY="test-jwt-secret-that-is-long-enough-for-hs256",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(hours=1),
        USERS=copy.deepcopy(USERS),
        HITS={},
        CSRF_TOKENS=set(),
        CSRF_REJECT=0,
        CSRF_AVAILABLE=True,
        BLOCKLIST=set(),
    )
    jwt = JWTManager(app)

    @jwt.token_in_blocklist_loader
    def _revoked(jwt_header, jwt_payload):
        return jwt_payload["jti"] in app.config["BLOCKLIST"]

    app.register_blueprint(api_bp)
    return app
