from exam_client.services import admin, auth, exams, results, sections, user

__all__ = ["admin", "auth", "exams", "results", "sections", "user"]
