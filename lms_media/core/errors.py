# lms_media/core/errors.py
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


class MultipartError(Exception):
    """Request-scoped failure of a multipart operation."""

    status_code: int = 500
    error_type: str = "MultipartError"

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        status_code: Optional[int] = None,
        hint: Optional[str] = None,
        operation: Optional[str] = None,
        aws_request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.hint = hint
        self.operation = operation
        self.aws_request_id = aws_request_id
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "error": {
                "type": self.error_type,
                "code": self.code,
                "message": self.message,
                "hint": self.hint,
                "operation": self.operation,
                "aws_request_id": self.aws_request_id,
            },
        }


class InvalidRequest(MultipartError):
    """Caller data fails a precondition (or the store says it is the caller's mistake)."""

    status_code = 400
    error_type = "InvalidRequest"


class UpstreamFailure(MultipartError):
    """The object store rejected the call or could not be reached."""

    status_code = 502
    error_type = "UpstreamFailure"


def multipart_error_handler(request: Request, exc: MultipartError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())
