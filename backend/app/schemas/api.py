"""
Generic API schemas — health and the error envelope.
"""

from typing import Any, Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    finnhub_configured: bool


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[Any] = None


class ApiError(Exception):
    """
    Raised by route handlers; rendered as ErrorResponse by the app-level handler.
    `detail` carries the upstream error body or offending payload when there is one.
    """

    def __init__(self, status_code: int, error: str, detail: Any = None) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.detail = detail

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.error, detail=self.detail)
