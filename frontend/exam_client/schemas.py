from __future__ import annotations

import logging
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from exam_client.errors import APIError, UNKNOWN_ERROR, VALIDATION_ERROR

log = logging.getLogger(__name__)

_DATE = r"^\d{4}-\d{2}-\d{2}$"


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="allow",
    )

    def dump(self) -> dict:
        """Wire form: camelCase keys, unset optionals left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ── Requests ─────────────────────────────────────────────────────────────────

class RegisterRequest(_Model):
    full_name: str = Field(min_length=2)
    phone: str = Field(min_length=10)
    email: Optional[str] = None
    date_of_birth: str = Field(pattern=_DATE)
    password: str = Field(min_length=6)


class LoginRequest(_Model):
    phone: str = Field(min_length=10)
    password: str = Field(min_length=6)


class AdminLoginRequest(_Model):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class UpdateProfileRequest(_Model):
    full_name: Optional[str] = Field(default=None, min_length=2)
    email: Optional[str] = None
    date_of_birth: Optional[str] = Field(default=None, pattern=_DATE)


class ChangePasswordRequest(_Model):
    current_password: str = Field(min_length=6)
    new_password: str = Field(min_length=6)


class SubmittedAnswer(_Model):
    question_id: str
    selected_option_id: Optional[str] = None
    selected_option: Optional[int] = None
    answer_text: Optional[str] = None


class SubmitExamRequest(_Model):
    answers: list[SubmittedAnswer]
    time_spent: float = Field(ge=0)


def validate(model: type[_Model], **data) -> _Model:
    """Build a request model, raising the same error a backend 400 would."""
    try:
        return model(**data)
    except ValidationError as exc:
        field_errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__root__"
            field_errors.setdefault(field, []).append(error["msg"])
        raise APIError(
            "Validation failed",
            status_code=0,
            code=VALIDATION_ERROR,
            field_errors=field_errors,
        ) from exc


def parse(model: type[_Model], record: Any) -> _Model:
    """Validate a backend record; a shape we cannot read is an UNKNOWN_ERROR."""
    try:
        return model.model_validate(record)
    except ValidationError as exc:
        log.error("unexpected %s payload: %s", model.__name__, exc)
        raise APIError(
            "Unexpected response from server",
            code=UNKNOWN_ERROR,
            details=exc.errors(include_url=False),
        ) from exc


# ── Entities ─────────────────────────────────────────────────────────────────

class User(_Model):
    id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    date_of_birth: Optional[str] = None
    age: Optional[int] = None
    last_login_at: Optional[str] = None
    created_at: Optional[str] = None
    is_admin: bool = False
    completed_exams: list[str] = []


class SectionRef(_Model):
    id: str
    name: str


class Section(_Model):
    id: str
    name: str
    description: Optional[str] = None
    is_active: bool = True


class ExamQuestion(_Model):
    id: str
    text: str
    options: list[Union[str, dict[str, Any]]] = []
    correct_option: Optional[str] = None
    correct_option_id: Optional[str] = None
    explanation: Optional[str] = None
    image_url: Optional[str] = None
    order_index: int = 0


class Exam(_Model):
    id: str
    title: str
    description: Optional[str] = None
    questions_count: Optional[int] = None
    duration: Optional[float] = None
    section_id: Optional[str] = None
    section: Optional[SectionRef] = None
    difficulty: Optional[int] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    is_public: bool = False
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    questions: list[ExamQuestion] = []

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty_as_int(cls, value):
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                return None
        return value


class ExamResult(_Model):
    id: str
    exam_id: Optional[str] = None
    exam_title: Optional[str] = None
    score: float = 0
    total_questions: int = 0
    percentage: Optional[float] = None
    time_spent: float = 0
    created_at: Optional[str] = None
    completed_at: Optional[str] = None
    section: Optional[SectionRef] = None


class AnswerDetail(_Model):
    question_id: str
    question_text: Optional[str] = None
    options: list[str] = []
    selected_option: Optional[int] = None
    correct_option: Optional[int] = None
    is_correct: bool = False
    explanation: Optional[str] = None


class ResultDetails(ExamResult):
    answers: list[AnswerDetail] = []


class TopExam(_Model):
    id: str
    title: str
    attempts: int = 0


class AdminStats(_Model):
    users_count: int = 0
    exams_count: int = 0
    results_count: int = 0
    recent_results: list[ExamResult] = []
    top_exams: list[TopExam] = []
