"""
admin.py: management endpoints. Every call here needs an admin session; the
backend answers 401/403 otherwise and the pipeline handles it.
"""
from __future__ import annotations

import logging

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.normalize import dig, extract, extract_data, extract_list
from exam_client.schemas import AdminStats, Exam, Section, User, parse

log = logging.getLogger(__name__)


def _page_params(**params) -> dict | None:
    params = {k: v for k, v in params.items() if v not in (None, "")}
    return params or None


# ── Stats ────────────────────────────────────────────────────────────────────

def get_stats(client: ApiClient) -> AdminStats:
    body = client.get(ENDPOINTS["admin_stats"])
    return parse(AdminStats, extract_data(body, "stats"))


# ── Users ────────────────────────────────────────────────────────────────────

def list_users(
    client: ApiClient,
    page: int | None = None,
    limit: int | None = None,
    search: str | None = None,
) -> tuple[list[User], dict]:
    body = client.get(ENDPOINTS["admin_users"], params=_page_params(page=page, limit=limit, search=search))
    users = [parse(User, u) for u in extract_list(body, "users")]
    pagination = extract(body, "pagination") or {}
    return users, pagination


def get_user(client: ApiClient, user_id) -> User:
    body = client.get(client.build_url(ENDPOINTS["admin_user"], userId=user_id))
    return parse(User, extract_data(body, "user"))


def update_user(client: ApiClient, user_id, changes: dict) -> User:
    body = client.put(client.build_url(ENDPOINTS["admin_user"], userId=user_id), changes)
    return parse(User, extract_data(body, "user"))


def delete_user(client: ApiClient, user_id) -> None:
    client.delete(client.build_url(ENDPOINTS["admin_user"], userId=user_id))


# ── Exams ────────────────────────────────────────────────────────────────────

def list_exams(
    client: ApiClient,
    page: int | None = None,
    limit: int | None = None,
    section_id: str | int | None = None,
    search: str | None = None,
) -> tuple[list[Exam], dict]:
    params = _page_params(page=page, limit=limit, sectionId=section_id, search=search)
    body = client.get(ENDPOINTS["admin_exams"], params=params)
    exams = [parse(Exam, e) for e in extract_list(body, "exams")]
    pagination = extract(body, "pagination") or {}
    return exams, pagination


def get_exam(client: ApiClient, exam_id) -> Exam:
    body = client.get(client.build_url(ENDPOINTS["admin_exam"], examId=exam_id))
    return parse(Exam, extract(body, "exam") or extract_data(body))


def create_exam(client: ApiClient, exam: dict) -> Exam:
    log.debug("creating exam %r", exam.get("title"))
    body = client.post(ENDPOINTS["admin_exams"], exam)
    return parse(Exam, extract(body, "exam") or extract_data(body))


def update_exam(client: ApiClient, exam_id, changes: dict) -> Exam:
    body = client.put(client.build_url(ENDPOINTS["admin_exam"], examId=exam_id), changes)
    return parse(Exam, extract(body, "exam") or extract_data(body))


def delete_exam(client: ApiClient, exam_id) -> None:
    client.delete(client.build_url(ENDPOINTS["admin_exam"], examId=exam_id))


def delete_question(client: ApiClient, question_id) -> None:
    client.delete(client.build_url(ENDPOINTS["admin_question"], questionId=question_id))


# ── Sections ─────────────────────────────────────────────────────────────────

def list_sections(client: ApiClient) -> list[Section]:
    body = client.get(ENDPOINTS["admin_sections"])
    return [parse(Section, s) for s in extract_list(body, "sections")]


def create_section(client: ApiClient, name: str, description: str | None = None) -> Section:
    payload = {"name": name}
    if description:
        payload["description"] = description
    body = client.post(ENDPOINTS["admin_sections"], payload)
    return parse(Section, extract_data(body, "section"))


def update_section(client: ApiClient, section_id, **changes) -> Section:
    payload = {
        {"is_active": "isActive"}.get(k, k): v
        for k, v in changes.items()
        if v is not None
    }
    body = client.put(client.build_url(ENDPOINTS["admin_section"], sectionId=section_id), payload)
    section = extract_data(body, "section")
    if not dig(section, "id"):
        # Backend answered with a bare success message
        known = section if isinstance(section, dict) else {}
        section = {"id": str(section_id), "name": "", **known, **payload}
    return parse(Section, section)


def delete_section(client: ApiClient, section_id) -> None:
    client.delete(client.build_url(ENDPOINTS["admin_section"], sectionId=section_id))
