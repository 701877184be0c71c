"""Application errors raised by repositories/services and rendered by the API layer."""

from typing import Any, Optional


class ApiError(Exception):
    """Error with an HTTP status and a JSON-friendly payload."""

    status_code = 500

    def __init__(
        self,
        message: str,
        details: Any = None,
        status_code: Optional[int] = None,
        **extra: Any,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.extra = extra
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        body.update(self.extra)
        return body


class ValidationFailed(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409
