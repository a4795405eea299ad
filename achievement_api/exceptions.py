from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AchievementAPIException(HTTPException):
    """Base error rendered as {"error": detail, **extra}."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=self.status_code, detail=detail)
        self.extra = extra or {}


class ValidationException(AchievementAPIException):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(AchievementAPIException):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(AchievementAPIException):
    status_code = status.HTTP_409_CONFLICT


def error_body(detail: Any, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body = {"error": detail if isinstance(detail, str) else str(detail)}
    if extra:
        body.update(extra)
    return body
