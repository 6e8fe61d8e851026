from __future__ import annotations

from datetime import datetime, timezone

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.normalize import dig, extract, extract_list
from exam_client.schemas import ExamResult, ResultDetails, parse

_GRADES = (
    (90, "ممتاز"),
    (80, "جيد جدًا"),
    (70, "جيد"),
    (60, "مقبول"),
)


def list_results(client: ApiClient) -> list[ExamResult]:
    body = client.get(ENDPOINTS["results"])
    return [parse(ExamResult, r) for r in extract_list(body, "results")]


def get_result(client: ApiClient, result_id) -> ResultDetails:
    body = client.get(client.build_url(ENDPOINTS["result"], resultId=result_id))
    return parse(ResultDetails, extract(body, "result"))


def share_result(client: ApiClient, result_id) -> str | None:
    body = client.post(client.build_url(ENDPOINTS["result_share"], resultId=result_id))
    return dig(body, "shareUrl") or dig(body, "data.shareUrl")


# ── Display helpers ──────────────────────────────────────────────────────────

def _number(value, default: float = 0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def normalize_result(data: dict | None, result_id: str | None = None) -> dict | None:
    """Coerce a raw result record into the fields the result pages display."""
    if not data:
        return None

    score = _number(data.get("score"))
    # 1 keeps the percentage computation away from a zero division
    total = _number(data.get("totalQuestions")) or 1
    percentage = _number(data.get("percentage"), default=-1)
    if percentage < 0:
        percentage = round(score / total * 100)
    percentage = max(0, min(100, percentage))

    stamp = data.get("completedAt") or data.get("createdAt")
    try:
        when = datetime.fromisoformat(str(stamp).replace("Z", "+00:00"))
    except ValueError:
        when = datetime.now(timezone.utc)

    return {
        "id": str(data.get("id") or result_id or ""),
        "score": score,
        "totalQuestions": total,
        "percentage": percentage,
        "timeSpent": _number(data.get("timeSpent")),
        "mistakes": _number(data.get("mistakes")),
        "examTitle": data.get("examTitle") or "",
        "examId": str(data.get("examId") or ""),
        "date": f"{when.year}/{when.month}/{when.day}",
        "answers": [
            {
                "questionId": str(a.get("questionId") or ""),
                "questionText": a.get("questionText") or "",
                "selectedOptionText": a.get("selectedOptionText") or "",
                "correctOptionText": a.get("correctOptionText") or "",
                "isCorrect": bool(a.get("isCorrect")),
            }
            for a in data.get("answers") or []
            if isinstance(a, dict)
        ],
    }


def grade_for(percentage: float) -> str:
    percentage = max(0, min(100, _number(percentage)))
    for threshold, grade in _GRADES:
        if percentage >= threshold:
            return grade
    return "ضعيف"
