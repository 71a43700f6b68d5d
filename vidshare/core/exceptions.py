# File: vidshare/core/exceptions.py

"""
Domain errors for the vidshare API.

Services raise these; the handler registered in main.py turns them into
JSON responses of the form {"detail": ..., "code": ...}.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class VidshareError(Exception):
    """Base class for all domain errors."""

    def __init__(
        self,
        message: str,
        code: str = "VIDSHARE_ERROR",
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(VidshareError):
    """Bad request field or a duplicate unique field (username, email)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details={"field": field} if field else None,
        )


class NotFoundError(VidshareError):
    """Referenced user or channel does not exist."""

    def __init__(self, message: str = "User not found", user_id: int | None = None):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"user_id": user_id} if user_id is not None else None,
        )


class InvalidOperationError(VidshareError):
    """Operation not allowed on these arguments, e.g. subscribing to yourself."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_OPERATION",
            status_code=422,
        )


class InvalidTokenError(VidshareError):
    """Expired, tampered or malformed access token."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(
            message=message,
            code="INVALID_TOKEN",
            status_code=401,
        )


async def vidshare_exception_handler(request: Request, exc: VidshareError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )
