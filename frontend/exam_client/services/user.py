from __future__ import annotations

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.normalize import extract, extract_data, extract_list
from exam_client.schemas import (
    ChangePasswordRequest,
    ExamResult,
    ResultDetails,
    UpdateProfileRequest,
    User,
    parse,
    validate,
)


def get_profile(client: ApiClient) -> User:
    body = client.get(ENDPOINTS["profile"])
    user = parse(User, extract_data(body, "user"))
    client.session.set_profile(user.dump())
    return user


def update_profile(client: ApiClient, **changes) -> User:
    payload = validate(UpdateProfileRequest, **changes).dump()
    body = client.put(ENDPOINTS["profile"], payload)
    user = parse(User, extract_data(body, "user"))
    client.session.set_profile(user.dump())
    return user


def change_password(client: ApiClient, current_password: str, new_password: str) -> bool:
    payload = validate(
        ChangePasswordRequest,
        current_password=current_password,
        new_password=new_password,
    ).dump()
    client.put(ENDPOINTS["password"], payload)
    return True


def get_results(client: ApiClient) -> list[ExamResult]:
    body = client.get(ENDPOINTS["user_results"])
    return [parse(ExamResult, r) for r in extract_list(body, "results")]


def get_result(client: ApiClient, result_id) -> ResultDetails:
    path = client.build_url(ENDPOINTS["user_result"], resultId=result_id)
    body = client.get(path)
    return parse(ResultDetails, extract(body, "result"))
