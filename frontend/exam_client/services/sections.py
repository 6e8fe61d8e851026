from __future__ import annotations

from exam_client.api_client import ApiClient
from exam_client.config import ENDPOINTS
from exam_client.normalize import extract_list
from exam_client.schemas import Section, parse


def list_sections(client: ApiClient) -> list[Section]:
    body = client.get(ENDPOINTS["sections"], auth=False)
    return [parse(Section, s) for s in extract_list(body, "sections")]
