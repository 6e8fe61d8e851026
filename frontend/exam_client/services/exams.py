"""
exams.py: the exams a user can take, and submitting answers.
"""
from __future__ import annotations

import logging

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.errors import APIError, NOT_FOUND
from exam_client.normalize import dig, extract, extract_list
from exam_client.schemas import Exam, ExamResult, SubmitExamRequest, parse, validate

log = logging.getLogger(__name__)


def list_exams(
    client: ApiClient,
    section: str | int | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> list[Exam]:
    params = {k: v for k, v in {"section": section, "page": page, "limit": limit}.items() if v is not None}
    body = client.get(ENDPOINTS["exams"], params=params or None)
    return [parse(Exam, e) for e in extract_list(body, "exams")]


def get_exam(client: ApiClient, exam_id) -> Exam:
    exam_id = str(exam_id).strip()
    body = client.get(client.build_url(ENDPOINTS["exam"], examId=exam_id))
    exam = extract(body, "exam")
    if not exam:
        log.warning("could not find exam data for id %s in response", exam_id)
        raise APIError("Exam not found", 404, NOT_FOUND)
    return parse(Exam, exam)


def submit_exam(client: ApiClient, exam_id, answers: list[dict], time_spent: float) -> tuple[ExamResult, str]:
    """Send answers; return the graded result and its id."""
    payload = validate(SubmitExamRequest, answers=answers, time_spent=time_spent).dump()
    body = client.post(client.build_url(ENDPOINTS["exam_submit"], examId=exam_id), payload)

    result = extract(body, "result")
    result_id = (
        dig(body, "resultId")
        or dig(body, "data.resultId")
        or (result.get("id") if isinstance(result, dict) else None)
    )
    if not result or not result_id:
        log.error("failed to extract result data from submit response: %r", body)
        raise APIError("Failed to process exam submission")

    return parse(ExamResult, {"id": result_id, **result}), str(result_id)
