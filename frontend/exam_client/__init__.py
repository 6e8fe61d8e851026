from exam_client.api_client import ApiClient
from exam_client.errors import APIError, SessionExpiredError
from exam_client.session import Session, SessionState

__all__ = ["ApiClient", "APIError", "Session", "SessionExpiredError", "SessionState"]
