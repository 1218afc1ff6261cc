"""
Error taxonomy shared by services, repositories and the auth dependency.

Every error is an HTTPException subclass, so FastAPI renders it as
`{"detail": ...}` with the mapped status code and no extra handler.
"""

from typing import Any, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: Any = None, headers: Optional[dict[str, str]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail if detail is not None else self.default_detail,
            headers=headers,
        )


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized access"

    def __init__(self, detail: Any = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InfrastructureError(AppError):
    """Hashing, persistence or transaction failure. Never retried here."""


class PersistenceTimeout(InfrastructureError):
    default_detail = "Database operation timed out"
